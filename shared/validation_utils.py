"""
Photo Backup Service Validation Utilities
"""
from typing import List, Dict, Any

from .constants import KeyConstants
from .exceptions import ValidationError


def validate_required_fields(data: Dict[str, Any], required_fields: List[str]) -> List[str]:
    """
    Validate that all required fields are present in the data.

    Args:
        data: Dictionary containing the data to validate
        required_fields: List of required field names

    Returns:
        List of missing field names (empty if all fields are present)
    """
    if not isinstance(data, dict):
        return required_fields

    missing_fields = []
    for field in required_fields:
        if field not in data or data[field] is None or data[field] == "":
            missing_fields.append(field)

    return missing_fields


def validate_file_name(file_name: Any) -> str:
    """
    Validate a client supplied file name used to build `<sub>/<fileName>` keys.

    Args:
        file_name: Raw file name

    Returns:
        The file name, stripped of surrounding whitespace

    Raises:
        ValidationError: If the name is empty or could escape the user prefix
    """
    if not isinstance(file_name, str) or not file_name.strip():
        raise ValidationError('fileName is required', 'fileName')

    file_name = file_name.strip()
    if '/' in file_name or '\\' in file_name:
        raise ValidationError('fileName must not contain path separators', 'fileName', file_name)
    if '..' in file_name:
        raise ValidationError('fileName must not contain ".."', 'fileName', file_name)

    return file_name


def normalize_album_id(album_id: Any) -> str:
    """
    Accept album ids with or without the ALBUM# prefix.

    Returns:
        The sort key form, ALBUM#<uuid>
    """
    if not isinstance(album_id, str) or not album_id.strip():
        raise ValidationError('albumId is required', 'albumId')

    album_id = album_id.strip()
    if album_id.startswith(KeyConstants.ALBUM_PREFIX):
        return album_id
    return f"{KeyConstants.ALBUM_PREFIX}{album_id}"


def validate_album_name(album_name: Any) -> str:
    """Album names are required and trimmed"""
    if not isinstance(album_name, str) or not album_name.strip():
        raise ValidationError('albumName is required', 'albumName')
    return album_name.strip()


def validate_item_keys(items: Any, user_id: str) -> List[Dict[str, str]]:
    """
    Validate a list of {PK, SK} references owned by user_id.

    Raises:
        ValidationError: If the list is empty, malformed, or references another user's rows
    """
    if not isinstance(items, list) or not items:
        raise ValidationError('items must be a non-empty array', 'items')

    keys = []
    for index, item in enumerate(items):
        if not isinstance(item, dict) or not item.get('PK') or not isinstance(item.get('SK'), str) or not item['SK']:
            raise ValidationError(f'items[{index}] must contain PK and SK', 'items')
        if item['PK'] != user_id:
            raise ValidationError(f'items[{index}] does not belong to the current user', 'items')
        keys.append({'PK': item['PK'], 'SK': item['SK']})

    return keys


def is_media_sort_key(sort_key: str) -> bool:
    """Media rows use timestamp sort keys, which sort before every prefixed key"""
    return isinstance(sort_key, str) and bool(sort_key) and sort_key < KeyConstants.ALBUM_PREFIX
