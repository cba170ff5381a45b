"""
Faces Match Lambda Function
DynamoDB Streams trigger: once an image row receives its imageId, names its
faces after already named matches in the user's collection
"""
import os
import sys

# Add shared directory to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.decorators import event_handler
from shared.exceptions import ServiceError
from shared.logger import face_logger as logger
from shared.services.service_container import get_service
from shared.utils import deserialize_stream_image


def newly_indexed_image(record: dict):
    """(user_id, image_id) when the record is the first write of imageId, else None"""
    if record.get('eventName') != 'MODIFY':
        return None

    stream = record.get('dynamodb', {})
    new_row = deserialize_stream_image(stream.get('NewImage'))
    old_row = deserialize_stream_image(stream.get('OldImage'))

    if not new_row.get('imageId') or old_row.get('imageId'):
        return None
    return new_row['PK'], new_row['imageId']


@event_handler(function_name='faces-match')
def lambda_handler(event, context):
    face_service = get_service('face_service')
    seen = set()
    processed, skipped, failed = 0, 0, 0

    for record in event.get('Records', []):
        image = newly_indexed_image(record)
        if image is None or image in seen:
            skipped += 1
            continue
        seen.add(image)

        user_id, image_id = image
        try:
            face_service.match_new_image(user_id, image_id)
        except ServiceError as e:
            logger.error("Face matching failed", error=e, user_id=user_id, image_id=image_id)
            failed += 1
            continue

        processed += 1

    return {'processed': processed, 'skipped': skipped, 'failed': failed}
