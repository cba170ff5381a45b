"""
Media item rows: one per uploaded photo or video

    PK = <cognito sub>, SK = ISO-8601 upload timestamp
"""
from typing import Dict, List, Optional, Any, Tuple
from boto3.dynamodb.conditions import Key, Attr
from botocore.exceptions import ClientError, BotoCoreError
from ..constants import KeyConstants
from ..logger import media_logger as logger
from ..utils import now_iso
from ..validation_utils import is_media_sort_key
from .table import get_table, raise_database_error, is_condition_failure, batch_delete, batch_get


class MediaItem:
    """
    Metadata for one object in the upload bucket
    """

    def __init__(self, user_id: str, uploaded_at: str, file_name: str, file_size: int = 0,
                 thumbnail_key: Optional[str] = None, image_id: Optional[str] = None,
                 album_id: Optional[str] = None, created_at: Optional[str] = None,
                 updated_at: Optional[str] = None):
        self.user_id = user_id
        self.uploaded_at = uploaded_at
        self.file_name = file_name
        self.file_size = file_size
        self.thumbnail_key = thumbnail_key
        self.image_id = image_id
        self.album_id = album_id
        self.created_at = created_at
        self.updated_at = updated_at

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> 'MediaItem':
        """Build from a table item (resource-level types)"""
        return cls(
            user_id=item['PK'],
            uploaded_at=item['SK'],
            file_name=item.get('fileName', ''),
            file_size=int(item.get('fileSize', 0)),
            thumbnail_key=item.get('thumbnailKey'),
            image_id=item.get('imageId'),
            album_id=item.get('albumId'),
            created_at=item.get('createdAt'),
            updated_at=item.get('updatedAt')
        )

    def to_item(self) -> Dict[str, Any]:
        """Table item with camelCase attribute names, omitting unset optionals"""
        item = {
            'PK': self.user_id,
            'SK': self.uploaded_at,
            'fileName': self.file_name,
            'fileSize': self.file_size,
        }
        optional = {
            'thumbnailKey': self.thumbnail_key,
            'imageId': self.image_id,
            'albumId': self.album_id,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }
        item.update({name: value for name, value in optional.items() if value is not None})
        return item

    def to_dict(self) -> Dict[str, Any]:
        return self.to_item()

    @classmethod
    def create_media_item(cls, user_id: str, file_name: str, file_size: int,
                          thumbnail_key: Optional[str] = None) -> 'MediaItem':
        """
        Write the row for a freshly uploaded object

        Args:
            user_id: Owner's Cognito sub
            file_name: Object name under the user's prefix
            file_size: Object size in bytes
            thumbnail_key: Thumbnail object key, when one was generated

        Returns:
            Created MediaItem
        """
        timestamp = now_iso()
        media_item = cls(
            user_id=user_id,
            uploaded_at=timestamp,
            file_name=file_name,
            file_size=int(file_size or 0),
            thumbnail_key=thumbnail_key,
            created_at=timestamp
        )

        try:
            get_table().put_item(Item=media_item.to_item())
        except (ClientError, BotoCoreError) as e:
            raise_database_error(e, 'create_media_item', user_id=user_id, file_name=file_name)

        logger.log_database_operation(
            table_name=get_table().name,
            operation='create_media_item',
            success=True,
            user_id=user_id,
            sort_key=timestamp,
            has_thumbnail=thumbnail_key is not None
        )
        return media_item

    @classmethod
    def get_media_item(cls, user_id: str, sort_key: str) -> Optional['MediaItem']:
        """Get one media row, or None when it does not exist or is not a media row"""
        if not is_media_sort_key(sort_key):
            return None

        try:
            response = get_table().get_item(Key={'PK': user_id, 'SK': sort_key})
        except (ClientError, BotoCoreError) as e:
            raise_database_error(e, 'get_media_item', user_id=user_id, sort_key=sort_key)

        item = response.get('Item')
        return cls.from_item(item) if item else None

    @classmethod
    def query_media(cls, user_id: str, date_prefix: Optional[str] = None, limit: int = 100,
                    exclusive_start_key: Optional[dict] = None,
                    album_id: Optional[str] = None) -> Tuple[List['MediaItem'], Optional[dict]]:
        """
        Query a user's media rows, newest first

        Args:
            user_id: Owner's Cognito sub
            date_prefix: Only rows whose timestamp starts with this prefix (e.g. '2024-05')
            limit: Page size
            exclusive_start_key: LastEvaluatedKey of the previous page
            album_id: Only rows assigned to this album (ALBUM#<uuid>)

        Returns:
            (items, last_evaluated_key)
        """
        if date_prefix:
            key_condition = Key('PK').eq(user_id) & Key('SK').begins_with(date_prefix)
        else:
            key_condition = Key('PK').eq(user_id) & Key('SK').lt(KeyConstants.ALBUM_PREFIX)

        query_kwargs = {
            'KeyConditionExpression': key_condition,
            'ScanIndexForward': False,
            'Limit': limit,
        }
        if album_id:
            query_kwargs['FilterExpression'] = Attr('albumId').eq(album_id)
        if exclusive_start_key:
            query_kwargs['ExclusiveStartKey'] = exclusive_start_key

        try:
            response = get_table().query(**query_kwargs)
        except (ClientError, BotoCoreError) as e:
            raise_database_error(e, 'query_media', user_id=user_id, date_prefix=date_prefix, album_id=album_id)

        items = [
            cls.from_item(item) for item in response.get('Items', [])
            if is_media_sort_key(item['SK'])
        ]

        logger.log_database_operation(
            table_name=get_table().name,
            operation='query_media',
            success=True,
            user_id=user_id,
            result_count=len(items),
            has_more='LastEvaluatedKey' in response
        )
        return items, response.get('LastEvaluatedKey')

    @classmethod
    def get_existing_media(cls, user_id: str, keys: List[Dict[str, str]]) -> List['MediaItem']:
        """Batch-get the given keys and keep only the caller's media rows"""
        items = batch_get(keys, 'batch_get_media')
        return [
            cls.from_item(item) for item in items
            if item['PK'] == user_id and is_media_sort_key(item['SK'])
        ]

    @classmethod
    def delete_media_items(cls, keys: List[Dict[str, str]]) -> int:
        """Delete media rows by PK/SK"""
        return batch_delete(keys, 'delete_media_items')

    @classmethod
    def set_image_id(cls, user_id: str, sort_key: str, image_id: str) -> None:
        """Record the Rekognition image id on an existing media row"""
        try:
            get_table().update_item(
                Key={'PK': user_id, 'SK': sort_key},
                UpdateExpression='SET imageId = :imageId, updatedAt = :updatedAt',
                ConditionExpression=Attr('PK').exists(),
                ExpressionAttributeValues={':imageId': image_id, ':updatedAt': now_iso()}
            )
        except (ClientError, BotoCoreError) as e:
            raise_database_error(e, 'set_image_id', user_id=user_id, sort_key=sort_key, image_id=image_id)

        logger.log_database_operation(
            table_name=get_table().name,
            operation='set_image_id',
            success=True,
            user_id=user_id,
            sort_key=sort_key,
            image_id=image_id
        )

    @classmethod
    def assign_album(cls, user_id: str, sort_key: str, album_id: str) -> bool:
        """
        Set albumId on a media row owned by user_id

        Returns:
            False when the row does not exist or is not owned by the user
        """
        try:
            get_table().update_item(
                Key={'PK': user_id, 'SK': sort_key},
                UpdateExpression='SET albumId = :albumId, updatedAt = :updatedAt',
                ConditionExpression=Attr('PK').eq(user_id) & Attr('PK').exists(),
                ExpressionAttributeValues={':albumId': album_id, ':updatedAt': now_iso()}
            )
        except ClientError as e:
            if is_condition_failure(e):
                return False
            raise_database_error(e, 'assign_album', user_id=user_id, sort_key=sort_key, album_id=album_id)
        except BotoCoreError as e:
            raise_database_error(e, 'assign_album', user_id=user_id, sort_key=sort_key, album_id=album_id)
        return True

    @classmethod
    def unassign_album(cls, user_id: str, sort_key: str, album_id: Optional[str] = None) -> bool:
        """
        Remove albumId from a media row owned by user_id.
        With album_id, only rows currently assigned to that album are changed.

        Returns:
            False when the condition did not hold
        """
        condition = Attr('PK').eq(user_id) & Attr('PK').exists()
        if album_id:
            condition = condition & Attr('albumId').eq(album_id)

        try:
            get_table().update_item(
                Key={'PK': user_id, 'SK': sort_key},
                UpdateExpression='REMOVE albumId SET updatedAt = :updatedAt',
                ConditionExpression=condition,
                ExpressionAttributeValues={':updatedAt': now_iso()}
            )
        except ClientError as e:
            if is_condition_failure(e):
                return False
            raise_database_error(e, 'unassign_album', user_id=user_id, sort_key=sort_key, album_id=album_id)
        except BotoCoreError as e:
            raise_database_error(e, 'unassign_album', user_id=user_id, sort_key=sort_key, album_id=album_id)
        return True
