"""
Album rows: PK = <cognito sub>, SK = ALBUM#<uuid>
"""
import uuid
from typing import Dict, List, Optional, Any
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError, BotoCoreError
from ..constants import KeyConstants
from ..logger import album_logger as logger
from ..utils import now_iso
from .table import get_table, raise_database_error


class Album:
    """A named collection of a user's media items"""

    def __init__(self, user_id: str, album_id: str, album_name: str,
                 created_at: Optional[str] = None, updated_at: Optional[str] = None):
        self.user_id = user_id
        self.album_id = album_id
        self.album_name = album_name
        self.created_at = created_at
        self.updated_at = updated_at

    @staticmethod
    def new_album_id() -> str:
        return f"{KeyConstants.ALBUM_PREFIX}{uuid.uuid4()}"

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> 'Album':
        return cls(
            user_id=item['PK'],
            album_id=item['SK'],
            album_name=item.get('albumName', ''),
            created_at=item.get('createdAt'),
            updated_at=item.get('updatedAt')
        )

    def to_item(self) -> Dict[str, Any]:
        item = {
            'PK': self.user_id,
            'SK': self.album_id,
            'albumName': self.album_name,
            'updatedAt': self.updated_at,
        }
        if self.created_at:
            item['createdAt'] = self.created_at
        return item

    def to_dict(self) -> Dict[str, Any]:
        """Public shape used by album listings"""
        result = {
            'albumId': self.album_id,
            'albumName': self.album_name,
            'updatedAt': self.updated_at,
        }
        if self.created_at:
            result['createdAt'] = self.created_at
        return result

    @classmethod
    def get_album(cls, user_id: str, album_id: str) -> Optional['Album']:
        """Get an album by its full ALBUM#<uuid> id"""
        try:
            response = get_table().get_item(Key={'PK': user_id, 'SK': album_id})
        except (ClientError, BotoCoreError) as e:
            raise_database_error(e, 'get_album', user_id=user_id, album_id=album_id)

        item = response.get('Item')
        return cls.from_item(item) if item else None

    @classmethod
    def list_albums(cls, user_id: str) -> List['Album']:
        """All albums of a user, following pagination"""
        query_kwargs = {
            'KeyConditionExpression': Key('PK').eq(user_id) & Key('SK').begins_with(KeyConstants.ALBUM_PREFIX),
            'ScanIndexForward': False,
        }
        albums = []

        try:
            while True:
                response = get_table().query(**query_kwargs)
                albums.extend(cls.from_item(item) for item in response.get('Items', []))
                if 'LastEvaluatedKey' not in response:
                    break
                query_kwargs['ExclusiveStartKey'] = response['LastEvaluatedKey']
        except (ClientError, BotoCoreError) as e:
            raise_database_error(e, 'list_albums', user_id=user_id)

        logger.log_database_operation(
            table_name=get_table().name,
            operation='list_albums',
            success=True,
            user_id=user_id,
            result_count=len(albums)
        )
        return albums

    def save(self) -> 'Album':
        """Put the album row, stamping updatedAt"""
        self.updated_at = now_iso()

        try:
            get_table().put_item(Item=self.to_item())
        except (ClientError, BotoCoreError) as e:
            raise_database_error(e, 'save_album', user_id=self.user_id, album_id=self.album_id)

        logger.log_database_operation(
            table_name=get_table().name,
            operation='save_album',
            success=True,
            user_id=self.user_id,
            album_id=self.album_id
        )
        return self
