"""
Face service backed by Rekognition collections (one collection per user, named by the user's sub)
"""
from typing import Dict, List, Any, Optional
import boto3
from botocore.exceptions import ClientError, BotoCoreError
from ..config import config
from ..constants import BatchConstants, HTTPConstants, KeyConstants
from ..error_handler import error_handler, client_error_code
from ..exceptions import EntityNotFoundError, RekognitionError, ValidationError
from ..logger import face_logger as logger
from ..models import MediaItem, FaceRecord
from ..models.face import strip_prefix
from ..utils import build_object_key, chunk_list


class FaceService:
    """
    Index, match, list and name faces
    """

    def __init__(self, rekognition_client=None):
        self.rekognition_client = rekognition_client or boto3.client('rekognition', region_name=config.aws_region)
        self.upload_bucket = config.upload_bucket_name

    def _raise_rekognition_error(self, error: Exception, operation: str, collection_id: str = None):
        error_data = error_handler.handle_rekognition_error(error, operation, collection_id)
        raise RekognitionError(error_data['error_message'], operation, collection_id,
                               status_code=error_data['status_code']) from error

    def ensure_collection(self, collection_id: str) -> bool:
        """
        Make sure the user's collection exists

        Returns:
            True when the collection had to be created
        """
        try:
            self.rekognition_client.describe_collection(CollectionId=collection_id)
            return False
        except ClientError as e:
            if client_error_code(e) != 'ResourceNotFoundException':
                self._raise_rekognition_error(e, 'describe_collection', collection_id)

        try:
            self.rekognition_client.create_collection(CollectionId=collection_id)
        except ClientError as e:
            # Lost a race with a concurrent invocation
            if client_error_code(e) != 'ResourceAlreadyExistsException':
                self._raise_rekognition_error(e, 'create_collection', collection_id)

        logger.info("Face collection created", collection_id=collection_id)
        return True

    def index_image(self, user_id: str, sort_key: str, file_name: str) -> Dict[str, Any]:
        """
        Index the faces of one uploaded image into the user's collection,
        store a row per face and link the image id to the media row

        Returns:
            {'imageId', 'faceCount'}
        """
        self.ensure_collection(user_id)
        key = build_object_key(user_id, file_name)

        try:
            response = self.rekognition_client.index_faces(
                CollectionId=user_id,
                Image={'S3Object': {'Bucket': self.upload_bucket, 'Name': key}},
                DetectionAttributes=['DEFAULT'],
                MaxFaces=config.index_max_faces
            )
        except (ClientError, BotoCoreError) as e:
            self._raise_rekognition_error(e, 'index_faces', user_id)

        faces = [
            face for face in (
                FaceRecord.from_rekognition(record.get('Face', {}))
                for record in response.get('FaceRecords', [])
            )
            if face is not None
        ]

        if not faces:
            logger.info("No faces detected", key=key)
            return {'imageId': None, 'faceCount': 0}

        FaceRecord.save_faces(faces)
        image_id = faces[0].image_id
        MediaItem.set_image_id(user_id, sort_key, image_id)

        logger.log_service_operation('index_faces', user_id=user_id, key=key,
                                     image_id=image_id, face_count=len(faces))
        return {'imageId': image_id, 'faceCount': len(faces)}

    def search_faces(self, collection_id: str, face_id: str, max_faces: int) -> List[Dict[str, Any]]:
        """Rekognition SearchFaces, returning FaceMatches in similarity order"""
        try:
            response = self.rekognition_client.search_faces(
                CollectionId=collection_id,
                FaceId=strip_prefix(face_id, KeyConstants.FACE_PREFIX),
                MaxFaces=max_faces
            )
        except (ClientError, BotoCoreError) as e:
            self._raise_rekognition_error(e, 'search_faces', collection_id)
        return response.get('FaceMatches', [])

    def _find_named_match(self, image_id: str, matches: List[Dict[str, Any]]) -> Optional[str]:
        for match in matches:
            matched = match.get('Face', {})
            matched_image_id = matched.get('ImageId')
            matched_face_id = matched.get('FaceId')
            if not matched_image_id or not matched_face_id or matched_image_id == image_id:
                continue

            matched_face = FaceRecord.get_face(matched_image_id, matched_face_id)
            if matched_face and matched_face.face_name:
                return matched_face.face_name
        return None

    def match_new_image(self, user_id: str, image_id: str) -> Dict[str, Any]:
        """
        Copy names onto the faces of a freshly indexed image from the best
        named match in another image of the same collection

        Returns:
            {'imageId', 'faceCount', 'namedCount'}
        """
        faces = FaceRecord.list_image_faces(image_id)
        named = 0

        for face in faces:
            try:
                matches = self.search_faces(user_id, face.face_id, config.face_match_max_faces)
            except RekognitionError as e:
                logger.warning("Face search failed, skipping face", image_id=image_id,
                               face_id=face.face_id, reason=e.message)
                continue

            face_name = self._find_named_match(image_id, matches)
            if face_name and FaceRecord.set_face_name(image_id, face.face_id, face_name):
                named += 1

        logger.log_service_operation('match_faces', user_id=user_id, image_id=image_id,
                                     face_count=len(faces), named_count=named)
        return {'imageId': image_id, 'faceCount': len(faces), 'namedCount': named}

    def list_faces(self, partition_key: str) -> List[Dict[str, Any]]:
        """
        Every row under a partition key (IMAGE#<imageId>)

        Raises:
            EntityNotFoundError: nothing stored under the key
        """
        if not partition_key or not isinstance(partition_key, str):
            raise ValidationError('PK is required', 'PK')

        items = FaceRecord.query_partition(partition_key)
        if not items:
            raise EntityNotFoundError('face', partition_key)

        return [
            FaceRecord.from_item(item).to_dict() if item['SK'].startswith(KeyConstants.FACE_PREFIX)
            else item
            for item in items
        ]

    def rename_face(self, user_id: str, image_id: str, face_id: str, face_name: str) -> Dict[str, Any]:
        """
        Name one face, then every face Rekognition matches to it

        Returns:
            {'message', 'updatedCount'}
        """
        face_name = face_name.strip() if isinstance(face_name, str) else face_name
        if not face_name:
            raise ValidationError('faceName is required', 'faceName')

        if not FaceRecord.get_face(image_id, face_id):
            raise EntityNotFoundError('face', f'{image_id}/{face_id}')

        # SearchFaces only accepts faces of the caller's own collection; nothing is written before it succeeds
        try:
            matches = self.search_faces(user_id, face_id, config.face_rename_max_faces)
        except RekognitionError as e:
            if e.status_code in (HTTPConstants.BAD_REQUEST, HTTPConstants.NOT_FOUND):
                raise EntityNotFoundError('face', f'{image_id}/{face_id}') from e
            raise

        if not FaceRecord.set_face_name(image_id, face_id, face_name):
            raise EntityNotFoundError('face', f'{image_id}/{face_id}')

        updated = 1
        for match in matches:
            matched = match.get('Face', {})
            if not matched.get('ImageId') or not matched.get('FaceId'):
                continue
            if FaceRecord.set_face_name(matched['ImageId'], matched['FaceId'], face_name):
                updated += 1

        logger.log_service_operation('rename_face', user_id=user_id, image_id=image_id,
                                     face_id=face_id, updated_count=updated)
        return {'message': 'Face name updated successfully', 'updatedCount': updated}

    def delete_image_faces(self, user_id: str, image_ids: List[str]) -> int:
        """
        Remove the face rows of deleted images and drop those faces from the collection

        Returns:
            Number of face rows deleted
        """
        faces = FaceRecord.delete_image_faces(image_ids)
        face_ids = [face.face_id for face in faces]

        for chunk in chunk_list(face_ids, BatchConstants.REKOGNITION_DELETE_FACES_SIZE):
            try:
                self.rekognition_client.delete_faces(CollectionId=user_id, FaceIds=chunk)
            except ClientError as e:
                if client_error_code(e) == 'ResourceNotFoundException':
                    logger.warning("Collection missing while deleting faces", collection_id=user_id)
                    break
                self._raise_rekognition_error(e, 'delete_faces', user_id)

        logger.log_service_operation('delete_image_faces', user_id=user_id,
                                     image_count=len(image_ids), face_count=len(faces))
        return len(faces)
