"""
Faces Index Lambda Function
DynamoDB Streams trigger: indexes the faces of every newly inserted image row
"""
import os
import sys

# Add shared directory to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.constants import MediaConstants
from shared.decorators import event_handler
from shared.exceptions import ServiceError
from shared.logger import face_logger as logger
from shared.services.service_container import get_service
from shared.utils import deserialize_stream_image, file_extension
from shared.validation_utils import is_media_sort_key


def is_indexable(row: dict) -> bool:
    """Media rows of JPEG/PNG files (the formats Rekognition accepts)"""
    return (
        bool(row.get('PK')) and bool(row.get('fileName'))
        and is_media_sort_key(row.get('SK', ''))
        and file_extension(row['fileName']) in MediaConstants.FACE_INDEX_EXTENSIONS
    )


@event_handler(function_name='faces-index')
def lambda_handler(event, context):
    face_service = get_service('face_service')
    processed, skipped, failed = 0, 0, 0

    for record in event.get('Records', []):
        if record.get('eventName') != 'INSERT':
            skipped += 1
            continue

        row = deserialize_stream_image(record.get('dynamodb', {}).get('NewImage'))
        if not is_indexable(row):
            skipped += 1
            continue

        try:
            face_service.index_image(row['PK'], row['SK'], row['fileName'])
        except ServiceError as e:
            logger.error("Face indexing failed", error=e, user_id=row['PK'], file_name=row['fileName'])
            failed += 1
            continue

        processed += 1

    return {'processed': processed, 'skipped': skipped, 'failed': failed}
