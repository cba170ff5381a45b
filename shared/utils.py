"""
Request/response utilities for photo-backup-service
"""
import json
import base64
import binascii
from decimal import Decimal
from datetime import datetime, timezone
from typing import Dict, Any, Optional, List
from urllib.parse import unquote_plus
from boto3.dynamodb.types import TypeDeserializer
from .constants import HTTPConstants
from .config import config
from .exceptions import ValidationError


class DecimalEncoder(json.JSONEncoder):
    """JSON encoder for the Decimal numbers boto3 returns from DynamoDB"""
    def default(self, obj):
        if isinstance(obj, Decimal):
            return int(obj) if obj % 1 == 0 else float(obj)
        return super().default(obj)


def create_response(status_code: int, body: str, headers: Optional[dict] = None) -> Dict[str, Any]:
    """
    Create standardized Lambda proxy response

    Args:
        status_code: HTTP status code
        body: Response body (JSON string)
        headers: Additional headers

    Returns:
        Lambda proxy integration response
    """
    default_headers = {
        HTTPConstants.CONTENT_TYPE: HTTPConstants.JSON,
        'Access-Control-Allow-Origin': config.cors_allowed_origin,
        'Access-Control-Allow-Headers': 'Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token',
        'Access-Control-Allow-Methods': 'GET,POST,PUT,DELETE,OPTIONS'
    }

    if headers:
        default_headers.update(headers)

    return {
        'statusCode': status_code,
        'headers': default_headers,
        'body': body
    }


def create_json_response(status_code: int, data: Any) -> Dict[str, Any]:
    """Serialize data and wrap it in a proxy response"""
    return create_response(status_code, json.dumps(data, cls=DecimalEncoder))


def now_iso() -> str:
    """Current UTC time as ISO-8601, the format used for sort keys and audit fields"""
    return datetime.now(timezone.utc).isoformat()


def get_header(event: dict, name: str) -> Optional[str]:
    """Case-insensitive header lookup"""
    headers = event.get('headers') or {}
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def get_access_token(event: dict) -> Optional[str]:
    """
    Read the Cognito access token from the Authorization header.
    Accepts both a bare token and a "Bearer <token>" value.
    """
    value = get_header(event, HTTPConstants.AUTHORIZATION)
    if not value:
        return None
    parts = value.split(None, 1)
    if parts and parts[0].lower() == 'bearer':
        parts = parts[1:]
    return parts[0].strip() if parts else None


def parse_json_body(event: dict) -> Dict[str, Any]:
    """
    Parse the JSON body of an API Gateway event

    Raises:
        ValidationError: If the body is not valid JSON or not an object
    """
    raw_body = event.get('body')
    if not raw_body:
        return {}

    if event.get('isBase64Encoded'):
        try:
            raw_body = base64.b64decode(raw_body).decode('utf-8')
        except (binascii.Error, UnicodeDecodeError):
            raise ValidationError('Invalid JSON in request body')

    try:
        body = json.loads(raw_body)
    except json.JSONDecodeError:
        raise ValidationError('Invalid JSON in request body')

    if not isinstance(body, dict):
        raise ValidationError('Request body must be a JSON object')
    return body


def get_query_parameter(event: dict, name: str) -> Optional[str]:
    """Read a query string parameter, tolerating a null queryStringParameters"""
    params = event.get('queryStringParameters') or {}
    return params.get(name)


def encode_pagination_token(last_evaluated_key: Optional[dict]) -> Optional[str]:
    """Opaque nextToken: base64 of the JSON LastEvaluatedKey"""
    if not last_evaluated_key:
        return None
    return base64.b64encode(json.dumps(last_evaluated_key, cls=DecimalEncoder).encode('utf-8')).decode('ascii')


def decode_pagination_token(token: Optional[str]) -> Optional[dict]:
    """
    Decode a nextToken produced by encode_pagination_token

    Raises:
        ValidationError: If the token is not a string or cannot be decoded
    """
    if token is None or token == '':
        return None
    if not isinstance(token, str):
        raise ValidationError('Invalid nextToken', 'nextToken')

    try:
        decoded = json.loads(base64.b64decode(token.encode('ascii'), validate=True).decode('utf-8'))
    except (binascii.Error, UnicodeError, ValueError):
        raise ValidationError('Invalid nextToken', 'nextToken')

    if not isinstance(decoded, dict):
        raise ValidationError('Invalid nextToken', 'nextToken')
    return decoded


def chunk_list(items: List[Any], size: int) -> List[List[Any]]:
    """Split items into consecutive chunks of at most size elements"""
    return [items[i:i + size] for i in range(0, len(items), size)]


def file_extension(file_name: str) -> str:
    """Lower-cased extension without the dot, or '' when there is none"""
    if '.' not in file_name:
        return ''
    return file_name.rsplit('.', 1)[1].lower()


def build_object_key(user_id: str, file_name: str) -> str:
    """Object key used in both buckets"""
    return f"{user_id}/{file_name}"


def split_object_key(key: str):
    """
    Split an object key into (user_id, file_name) on the first '/'

    Raises:
        ValidationError: If the key has no user prefix
    """
    if '/' not in key:
        raise ValidationError(f'Object key has no user prefix: {key}', 'key', key)
    user_id, file_name = key.split('/', 1)
    if not user_id or not file_name:
        raise ValidationError(f'Object key has no user prefix: {key}', 'key', key)
    return user_id, file_name


_deserializer = TypeDeserializer()


def deserialize_stream_image(image: Optional[dict]) -> Dict[str, Any]:
    """Turn a DynamoDB Streams NewImage/OldImage into plain Python values"""
    if not image:
        return {}
    return {key: _deserializer.deserialize(value) for key, value in image.items()}


def object_event_details(event: dict) -> List[Dict[str, Any]]:
    """
    Object-created notifications as [{'key', 'size'}], from either an EventBridge
    "Object Created" event or a classic S3 notification. Keys are URL-decoded.
    """
    if 'detail' in event:
        obj = (event.get('detail') or {}).get('object') or {}
        objects = [obj] if obj.get('key') else []
    else:
        objects = [
            (record.get('s3') or {}).get('object') or {}
            for record in event.get('Records', [])
        ]

    return [
        {'key': unquote_plus(obj['key']), 'size': int(obj.get('size') or 0)}
        for obj in objects
        if obj.get('key')
    ]
