"""
Face rows written from Rekognition IndexFaces output

    PK = IMAGE#<imageId>, SK = FACE#<faceId>
"""
import json
from decimal import Decimal
from typing import Dict, List, Optional, Any
from boto3.dynamodb.conditions import Key, Attr
from botocore.exceptions import ClientError, BotoCoreError
from ..constants import KeyConstants
from ..logger import face_logger as logger
from ..utils import DecimalEncoder, now_iso
from .table import get_table, raise_database_error, is_condition_failure, batch_put, batch_delete


def image_key(image_id: str) -> str:
    """IMAGE#<imageId>, accepting ids that already carry the prefix"""
    if image_id.startswith(KeyConstants.IMAGE_PREFIX):
        return image_id
    return f"{KeyConstants.IMAGE_PREFIX}{image_id}"


def face_key(face_id: str) -> str:
    """FACE#<faceId>, accepting ids that already carry the prefix"""
    if face_id.startswith(KeyConstants.FACE_PREFIX):
        return face_id
    return f"{KeyConstants.FACE_PREFIX}{face_id}"


def strip_prefix(value: str, prefix: str) -> str:
    return value[len(prefix):] if value.startswith(prefix) else value


def _as_decimals(value: Any) -> Any:
    """Rekognition floats as the Decimals DynamoDB accepts"""
    return json.loads(json.dumps(value, cls=DecimalEncoder), parse_float=Decimal)


class FaceRecord:
    """One detected face of one indexed image"""

    def __init__(self, image_id: str, face_id: str, bounding_box: Optional[dict] = None,
                 confidence: Optional[float] = None, face_name: Optional[str] = None,
                 updated_at: Optional[str] = None):
        # Bare Rekognition ids; keys are derived
        self.image_id = strip_prefix(image_id, KeyConstants.IMAGE_PREFIX)
        self.face_id = strip_prefix(face_id, KeyConstants.FACE_PREFIX)
        self.bounding_box = bounding_box or {}
        self.confidence = confidence
        self.face_name = face_name
        self.updated_at = updated_at

    @property
    def pk(self) -> str:
        return image_key(self.image_id)

    @property
    def sk(self) -> str:
        return face_key(self.face_id)

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> 'FaceRecord':
        return cls(
            image_id=item['PK'],
            face_id=item['SK'],
            bounding_box=item.get('boundingBox', {}),
            confidence=float(item['confidence']) if 'confidence' in item else None,
            face_name=item.get('faceName'),
            updated_at=item.get('updatedAt')
        )

    @classmethod
    def from_rekognition(cls, face: Dict[str, Any]) -> Optional['FaceRecord']:
        """Build from an IndexFaces FaceRecords[].Face entry; None when ids are missing"""
        if not face.get('FaceId') or not face.get('ImageId'):
            return None
        return cls(
            image_id=face['ImageId'],
            face_id=face['FaceId'],
            bounding_box=face.get('BoundingBox', {}),
            confidence=face.get('Confidence'),
            updated_at=now_iso()
        )

    def to_item(self) -> Dict[str, Any]:
        item = {
            'PK': self.pk,
            'SK': self.sk,
            'boundingBox': _as_decimals(self.bounding_box),
            'updatedAt': self.updated_at or now_iso(),
        }
        if self.confidence is not None:
            item['confidence'] = _as_decimals(float(self.confidence))
        if self.face_name:
            item['faceName'] = self.face_name
        return item

    def to_dict(self) -> Dict[str, Any]:
        return self.to_item()

    @classmethod
    def save_faces(cls, faces: List['FaceRecord']) -> int:
        """Put face rows through the batch writer"""
        if not faces:
            return 0
        return batch_put([face.to_item() for face in faces], 'save_faces')

    @classmethod
    def list_image_faces(cls, image_id: str) -> List['FaceRecord']:
        """All FACE# rows of an image"""
        return [cls.from_item(item) for item in cls.query_partition(image_key(image_id), KeyConstants.FACE_PREFIX)]

    @classmethod
    def query_partition(cls, partition_key: str, sort_prefix: Optional[str] = None) -> List[Dict[str, Any]]:
        """Every item under one partition key, optionally restricted to a sort key prefix"""
        key_condition = Key('PK').eq(partition_key)
        if sort_prefix:
            key_condition = key_condition & Key('SK').begins_with(sort_prefix)

        query_kwargs = {'KeyConditionExpression': key_condition}
        items = []

        try:
            while True:
                response = get_table().query(**query_kwargs)
                items.extend(response.get('Items', []))
                if 'LastEvaluatedKey' not in response:
                    break
                query_kwargs['ExclusiveStartKey'] = response['LastEvaluatedKey']
        except (ClientError, BotoCoreError) as e:
            raise_database_error(e, 'query_faces', partition_key=partition_key)

        logger.log_database_operation(
            table_name=get_table().name,
            operation='query_faces',
            success=True,
            partition_key=partition_key,
            result_count=len(items)
        )
        return items

    @classmethod
    def get_face(cls, image_id: str, face_id: str) -> Optional['FaceRecord']:
        try:
            response = get_table().get_item(Key={'PK': image_key(image_id), 'SK': face_key(face_id)})
        except (ClientError, BotoCoreError) as e:
            raise_database_error(e, 'get_face', image_id=image_id, face_id=face_id)

        item = response.get('Item')
        return cls.from_item(item) if item else None

    @classmethod
    def set_face_name(cls, image_id: str, face_id: str, face_name: str) -> bool:
        """
        Set faceName on an existing face row

        Returns:
            False when the face row does not exist
        """
        try:
            get_table().update_item(
                Key={'PK': image_key(image_id), 'SK': face_key(face_id)},
                UpdateExpression='SET faceName = :faceName, updatedAt = :updatedAt',
                ConditionExpression=Attr('PK').exists(),
                ExpressionAttributeValues={':faceName': face_name, ':updatedAt': now_iso()}
            )
        except ClientError as e:
            if is_condition_failure(e):
                logger.info("Face row not found for rename", image_id=image_id, face_id=face_id)
                return False
            raise_database_error(e, 'set_face_name', image_id=image_id, face_id=face_id)
        except BotoCoreError as e:
            raise_database_error(e, 'set_face_name', image_id=image_id, face_id=face_id)

        logger.log_database_operation(
            table_name=get_table().name,
            operation='set_face_name',
            success=True,
            image_id=image_id,
            face_id=face_id
        )
        return True

    @classmethod
    def delete_image_faces(cls, image_ids: List[str]) -> List['FaceRecord']:
        """
        Delete every face row of the given images

        Returns:
            The deleted face rows
        """
        faces = []
        for image_id in image_ids:
            faces.extend(cls.list_image_faces(image_id))

        if faces:
            batch_delete([{'PK': face.pk, 'SK': face.sk} for face in faces], 'delete_image_faces')
        return faces
