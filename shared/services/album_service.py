"""
Album service: create/rename albums and (un)assign media to them
"""
from typing import Dict, List, Any, Optional
from ..config import config
from ..exceptions import DuplicateEntityError, EntityNotFoundError, ValidationError
from ..logger import album_logger as logger
from ..models import Album, MediaItem
from ..utils import now_iso, encode_pagination_token, decode_pagination_token
from ..validation_utils import normalize_album_id, validate_album_name, validate_item_keys


class AlbumService:
    """
    Albums are rows under the user's partition; media rows point at them through albumId
    """

    def _require_album(self, user_id: str, album_id: str) -> Album:
        album = Album.get_album(user_id, album_id)
        if not album:
            raise EntityNotFoundError('album', album_id)
        return album

    def _name_taken(self, user_id: str, album_name: str, exclude_album_id: Optional[str] = None) -> bool:
        wanted = album_name.lower()
        return any(
            album.album_name.lower() == wanted
            for album in Album.list_albums(user_id)
            if album.album_id != exclude_album_id
        )

    def save_album(self, user_id: str, album_name: Any, album_id: Any = None) -> Dict[str, Any]:
        """
        Create an album, or rename one when album_id is given

        Raises:
            ValidationError: empty name
            DuplicateEntityError: another album of the user has the same name (case-insensitive)
            EntityNotFoundError: renaming an unknown album
        """
        album_name = validate_album_name(album_name)
        is_new = not album_id
        album_id = Album.new_album_id() if is_new else normalize_album_id(album_id)

        if self._name_taken(user_id, album_name, None if is_new else album_id):
            raise DuplicateEntityError('album', 'name', album_name)

        if is_new:
            album = Album(user_id, album_id, album_name, created_at=now_iso())
        else:
            existing = self._require_album(user_id, album_id)
            album = Album(user_id, album_id, album_name,
                          created_at=existing.created_at or existing.updated_at or now_iso())

        album.save()
        logger.log_service_operation('save_album', user_id=user_id, album_id=album_id, created=is_new)

        result = {
            'albumId': album.album_id,
            'albumName': album.album_name,
            'message': 'Album created successfully' if is_new else 'Album updated successfully',
        }
        if is_new:
            result['createdAt'] = album.created_at
        result['updatedAt'] = album.updated_at
        return result

    def list_albums(self, user_id: str) -> List[Dict[str, Any]]:
        return [album.to_dict() for album in Album.list_albums(user_id)]

    def get_album_photos(self, user_id: str, album_id: Any, next_token: Optional[str] = None) -> Dict[str, Any]:
        """
        One page of the media rows assigned to an album, newest first

        Returns:
            {'items', 'nextToken', 'count'}
        """
        album_id = normalize_album_id(album_id)
        self._require_album(user_id, album_id)

        start_key = decode_pagination_token(next_token)
        if start_key and start_key.get('PK') != user_id:
            raise ValidationError('Invalid nextToken', 'nextToken')

        items, last_key = MediaItem.query_media(
            user_id,
            limit=config.page_size,
            exclusive_start_key=start_key,
            album_id=album_id
        )
        return {
            'items': [item.to_dict() for item in items],
            'nextToken': encode_pagination_token(last_key),
            'count': len(items)
        }

    def assign_photos(self, user_id: str, album_id: Any, items: Any) -> Dict[str, Any]:
        """
        Point media rows at an album

        Raises:
            ValidationError: bad album id or item list, or items that are not existing media rows
            EntityNotFoundError: unknown album
        """
        album_id = normalize_album_id(album_id)
        keys = validate_item_keys(items, user_id)
        self._require_album(user_id, album_id)

        unique_keys = list({(key['PK'], key['SK']): key for key in keys}.values())
        existing = MediaItem.get_existing_media(user_id, unique_keys)
        if len(existing) != len(unique_keys):
            raise ValidationError('Some items do not exist or are not photos/videos', 'items')

        success, failed, errors = 0, 0, []
        for key in unique_keys:
            if MediaItem.assign_album(user_id, key['SK'], album_id):
                success += 1
            else:
                failed += 1
                errors.append(f"Failed to assign {key['SK']}: item does not exist or is not owned by user")

        logger.log_service_operation('assign_photos', user_id=user_id, album_id=album_id,
                                     success=success, failed=failed)

        result = {
            'message': f'Assignment completed. {success} items assigned successfully.',
            'success': success,
            'failed': failed,
        }
        if errors:
            result['errors'] = errors
        return result

    def unassign_photos(self, user_id: str, items: Any, album_id: Any = None) -> Dict[str, Any]:
        """
        Clear albumId on media rows; with an album, only rows currently in that album
        """
        keys = validate_item_keys(items, user_id)
        if album_id:
            album_id = normalize_album_id(album_id)
            self._require_album(user_id, album_id)

        unique_keys = list({(key['PK'], key['SK']): key for key in keys}.values())
        existing = MediaItem.get_existing_media(user_id, unique_keys)
        if len(existing) != len(unique_keys):
            raise ValidationError('Some items do not exist or are not photos/videos', 'items')

        success, failed, errors = 0, 0, []
        for key in unique_keys:
            if MediaItem.unassign_album(user_id, key['SK'], album_id or None):
                success += 1
                continue

            failed += 1
            if album_id:
                errors.append(f"{key['SK']} is not assigned to the specified album")
            else:
                errors.append(f"{key['SK']} does not exist or is not owned by user")

        logger.log_service_operation('unassign_photos', user_id=user_id, album_id=album_id,
                                     success=success, failed=failed)

        if album_id:
            message = f'Unassignment from album completed. {success} items unassigned successfully.'
        else:
            message = f'Unassignment from all albums completed. {success} items unassigned successfully.'

        result = {'message': message, 'success': success, 'failed': failed}
        if errors:
            result['errors'] = errors
        return result
