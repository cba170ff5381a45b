"""
Media service: multipart uploads, object listing, metadata access, deletion
and thumbnail ingestion for uploaded objects
"""
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Any, Optional
import boto3
from botocore.exceptions import ClientError, BotoCoreError
from ..config import config
from ..constants import BatchConstants, KeyConstants, MediaConstants
from ..error_handler import error_handler
from ..exceptions import (
    ValidationError, AuthorizationError, EntityNotFoundError,
    S3OperationError, ImageProcessingError
)
from ..logger import media_logger as logger
from ..models import MediaItem, Album
from ..processors.image import ThumbnailProcessor, is_image_file
from ..utils import (
    build_object_key, chunk_list, encode_pagination_token, decode_pagination_token
)
from ..validation_utils import validate_file_name, is_media_sort_key
from .service_container import get_service


class MediaService:
    """
    Uploads, listings and deletion of a user's photos and videos
    """

    def __init__(self, s3_client=None, thumbnail_processor: ThumbnailProcessor = None):
        self.s3_client = s3_client or boto3.client('s3', region_name=config.aws_region)
        self.upload_bucket = config.upload_bucket_name
        self.thumbnail_bucket = config.thumbnail_bucket_name
        self.thumbnail_processor = thumbnail_processor or ThumbnailProcessor()

    def _raise_s3_error(self, error: Exception, operation: str, bucket: str, key: str = None):
        error_data = error_handler.handle_s3_error(error, operation, bucket, key)
        logger.log_s3_operation(bucket, operation, key, success=False, error=str(error))
        raise S3OperationError(error_data['error_message'], operation, bucket, key,
                               status_code=error_data['status_code']) from error

    # Uploads

    def initiate_upload(self, user_id: str, file_name: str, part_count: Any = 1,
                        content_type: Optional[str] = None) -> Dict[str, Any]:
        """
        Start a multipart upload of <sub>/<fileName> and presign one URL per part

        Returns:
            {'uploadId', 'key', 'parts': [{'partNumber', 'url'}]}
        """
        file_name = validate_file_name(file_name)
        try:
            part_count = int(part_count)
        except (TypeError, ValueError):
            raise ValidationError('partCount must be an integer', 'partCount', str(part_count))
        if not 1 <= part_count <= BatchConstants.S3_MAX_PARTS:
            raise ValidationError(f'partCount must be between 1 and {BatchConstants.S3_MAX_PARTS}',
                                  'partCount', str(part_count))

        key = build_object_key(user_id, file_name)
        create_kwargs = {'Bucket': self.upload_bucket, 'Key': key}
        if content_type:
            create_kwargs['ContentType'] = content_type

        try:
            response = self.s3_client.create_multipart_upload(**create_kwargs)
            upload_id = response['UploadId']
            parts = [
                {
                    'partNumber': part_number,
                    'url': self.s3_client.generate_presigned_url(
                        'upload_part',
                        Params={
                            'Bucket': self.upload_bucket,
                            'Key': key,
                            'UploadId': upload_id,
                            'PartNumber': part_number
                        },
                        ExpiresIn=config.upload_part_url_expiry
                    )
                }
                for part_number in range(1, part_count + 1)
            ]
        except (ClientError, BotoCoreError) as e:
            self._raise_s3_error(e, 'create_multipart_upload', self.upload_bucket, key)

        logger.log_s3_operation(self.upload_bucket, 'create_multipart_upload', key,
                                upload_id=upload_id, part_count=part_count)
        return {'uploadId': upload_id, 'key': file_name, 'parts': parts}

    def complete_upload(self, user_id: str, upload_id: str, file_name: str, parts: Any) -> Dict[str, Any]:
        """
        Complete a multipart upload of <sub>/<key>

        Args:
            parts: [{'ETag': ..., 'PartNumber': ...}] as reported by the part uploads
        """
        file_name = validate_file_name(file_name)
        if not isinstance(parts, list) or not parts:
            raise ValidationError('parts must be a non-empty array', 'parts')

        normalized_parts = []
        for index, part in enumerate(parts):
            etag = part.get('ETag') if isinstance(part, dict) else None
            part_number = part.get('PartNumber') if isinstance(part, dict) else None
            if not etag or part_number is None:
                raise ValidationError(f'parts[{index}] must contain ETag and PartNumber', 'parts')
            normalized_parts.append({'ETag': etag, 'PartNumber': int(part_number)})

        key = build_object_key(user_id, file_name)
        try:
            response = self.s3_client.complete_multipart_upload(
                Bucket=self.upload_bucket,
                Key=key,
                UploadId=upload_id,
                MultipartUpload={'Parts': sorted(normalized_parts, key=lambda p: p['PartNumber'])}
            )
        except (ClientError, BotoCoreError) as e:
            self._raise_s3_error(e, 'complete_multipart_upload', self.upload_bucket, key)

        logger.log_s3_operation(self.upload_bucket, 'complete_multipart_upload', key,
                                upload_id=upload_id, part_count=len(normalized_parts))
        return {name: value for name, value in response.items() if name != 'ResponseMetadata'}

    # Listing and access

    def list_objects(self, user_id: str) -> List[str]:
        """Every object key under <sub>/ in the upload bucket"""
        prefix = f"{user_id}/"
        keys = []

        try:
            paginator = self.s3_client.get_paginator('list_objects_v2')
            for page in paginator.paginate(Bucket=self.upload_bucket, Prefix=prefix):
                keys.extend(obj['Key'] for obj in page.get('Contents', []))
        except (ClientError, BotoCoreError) as e:
            self._raise_s3_error(e, 'list_objects', self.upload_bucket, prefix)

        logger.log_s3_operation(self.upload_bucket, 'list_objects', prefix, object_count=len(keys))
        return keys

    def list_media(self, user_id: str, date_prefix: Optional[str] = None,
                   next_token: Optional[str] = None) -> Dict[str, Any]:
        """
        Page through a user's media rows, newest first

        Returns:
            {'items', 'nextToken', 'count'}
        """
        start_key = decode_pagination_token(next_token)
        if start_key and start_key.get('PK') != user_id:
            raise ValidationError('Invalid nextToken', 'nextToken')

        items, last_key = MediaItem.query_media(
            user_id,
            date_prefix=date_prefix,
            limit=config.page_size,
            exclusive_start_key=start_key
        )
        return {
            'items': [item.to_dict() for item in items],
            'nextToken': encode_pagination_token(last_key),
            'count': len(items)
        }

    def get_item(self, user_id: str, partition_key: str, sort_key: str) -> Dict[str, Any]:
        """
        One media or album row of the caller

        Raises:
            ValidationError: PK or SK is not a string
            AuthorizationError: partition_key is not the caller
            EntityNotFoundError: no such row
        """
        if not isinstance(partition_key, str) or not partition_key:
            raise ValidationError('PK must be a non-empty string', 'PK')
        if not isinstance(sort_key, str) or not sort_key:
            raise ValidationError('SK must be a non-empty string', 'SK')

        if partition_key != user_id:
            raise AuthorizationError('Access denied', f'{partition_key}/{sort_key}')

        if sort_key.startswith(KeyConstants.ALBUM_PREFIX):
            album = Album.get_album(user_id, sort_key)
            if album:
                return album.to_item()
            raise EntityNotFoundError('item', sort_key)

        media_item = MediaItem.get_media_item(user_id, sort_key)
        if not media_item:
            raise EntityNotFoundError('item', sort_key)
        return media_item.to_dict()

    def get_download_url(self, user_id: str, file_name: str) -> str:
        """Presigned GetObject URL for <sub>/<fileName>"""
        file_name = validate_file_name(file_name)
        key = build_object_key(user_id, file_name)

        try:
            url = self.s3_client.generate_presigned_url(
                'get_object',
                Params={'Bucket': self.upload_bucket, 'Key': key},
                ExpiresIn=config.download_url_expiry
            )
        except (ClientError, BotoCoreError) as e:
            self._raise_s3_error(e, 'generate_presigned_url', self.upload_bucket, key)

        logger.log_s3_operation(self.upload_bucket, 'generate_presigned_url', key,
                                expires_in=config.download_url_expiry)
        return url

    # Deletion

    def _delete_from_bucket(self, bucket: str, keys: List[str]) -> List[Dict[str, Any]]:
        deleted = []
        for chunk in chunk_list(keys, BatchConstants.S3_DELETE_BATCH_SIZE):
            try:
                response = self.s3_client.delete_objects(
                    Bucket=bucket,
                    Delete={'Objects': [{'Key': key} for key in chunk], 'Quiet': False}
                )
            except (ClientError, BotoCoreError) as e:
                self._raise_s3_error(e, 'delete_objects', bucket)

            if response.get('Errors'):
                logger.warning("Some objects could not be deleted", bucket=bucket, errors=response['Errors'])
            deleted.extend(response.get('Deleted', []))

        logger.log_s3_operation(bucket, 'delete_objects', deleted_count=len(deleted))
        return deleted

    def delete_media(self, user_id: str, files: Any) -> Dict[str, Any]:
        """
        Delete media from both buckets, their rows, and their face rows

        Args:
            files: [{'PK', 'SK', 'fileName'}]; any imageId sent along is ignored

        Returns:
            Deletion summary
        """
        if not isinstance(files, list) or not files:
            raise ValidationError('files must be a non-empty array', 'files')

        for index, file in enumerate(files):
            if not isinstance(file, dict) or not file.get('PK') or not file.get('SK') or not file.get('fileName'):
                raise ValidationError(f'files[{index}] must contain PK, SK and fileName', 'files')
            if file['PK'] != user_id:
                raise AuthorizationError('Access denied', f"{file['PK']}/{file['SK']}")
            if not is_media_sort_key(file['SK']):
                raise ValidationError(f'files[{index}] is not a media item', 'files')
            validate_file_name(file['fileName'])

        logger.log_service_operation('delete_media', user_id=user_id, file_count=len(files))

        object_keys = [build_object_key(user_id, file['fileName']) for file in files]

        with ThreadPoolExecutor(max_workers=2) as executor:
            upload_future = executor.submit(self._delete_from_bucket, self.upload_bucket, object_keys)
            thumbnail_future = executor.submit(self._delete_from_bucket, self.thumbnail_bucket, object_keys)
            upload_deleted = upload_future.result()
            thumbnail_deleted = thumbnail_future.result()

        row_keys = list({(f['PK'], f['SK']): {'PK': f['PK'], 'SK': f['SK']} for f in files}.values())
        # Face rows are found through the stored imageId, never the one in the request
        stored_rows = MediaItem.get_existing_media(user_id, row_keys)
        image_ids = list(dict.fromkeys(row.image_id for row in stored_rows if row.image_id))

        records_deleted = MediaItem.delete_media_items(row_keys)

        faces_deleted = 0
        if image_ids:
            faces_deleted = get_service('face_service').delete_image_faces(user_id, image_ids)

        return {
            'message': 'Files and records deleted successfully',
            'uploadFilesDeleted': upload_deleted,
            'thumbnailFilesDeleted': thumbnail_deleted,
            'recordsDeleted': records_deleted,
            'facesDeleted': faces_deleted
        }

    # Object-created ingestion

    def process_uploaded_object(self, user_id: str, file_name: str, file_size: int) -> MediaItem:
        """
        Thumbnail an uploaded image and write its media row.
        Videos and undecodable images get a row without thumbnailKey.
        """
        key = build_object_key(user_id, file_name)
        thumbnail_key = None

        if is_image_file(file_name) and int(file_size or 0) > config.max_thumbnail_source_size:
            logger.warning("Skipping thumbnail for oversized image", key=key, file_size=file_size,
                           max_size=config.max_thumbnail_source_size)
        elif is_image_file(file_name):
            thumbnail_key = self._generate_thumbnail(key)
        else:
            logger.info("Skipping thumbnail for non-image object", key=key)

        return MediaItem.create_media_item(user_id, file_name, file_size, thumbnail_key)

    def _generate_thumbnail(self, key: str) -> Optional[str]:
        try:
            response = self.s3_client.get_object(Bucket=self.upload_bucket, Key=key)
            image_data = response['Body'].read()
        except (ClientError, BotoCoreError) as e:
            self._raise_s3_error(e, 'get_object', self.upload_bucket, key)

        try:
            thumbnail_bytes, stats = self.thumbnail_processor.create_thumbnail(image_data)
        except ImageProcessingError as e:
            logger.warning("Thumbnail could not be generated", key=key, reason=e.message)
            return None

        try:
            self.s3_client.put_object(
                Bucket=self.thumbnail_bucket,
                Key=key,
                Body=thumbnail_bytes,
                ContentType=MediaConstants.THUMBNAIL_CONTENT_TYPE
            )
        except (ClientError, BotoCoreError) as e:
            self._raise_s3_error(e, 'put_object', self.thumbnail_bucket, key)

        logger.log_s3_operation(self.thumbnail_bucket, 'put_object', key,
                                size=stats['file_size'], dimensions=stats['output_size'])
        return key
