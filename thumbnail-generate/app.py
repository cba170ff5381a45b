"""
Thumbnail Generate Lambda Function
Runs on every object created in the upload bucket: writes a thumbnail for
images and records a media row for every upload
"""
import os
import sys

# Add shared directory to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.decorators import event_handler
from shared.exceptions import ServiceError
from shared.logger import media_logger as logger
from shared.services.service_container import get_service
from shared.utils import object_event_details, split_object_key


@event_handler(function_name='thumbnail-generate')
def lambda_handler(event, context):
    """
    Accepts an EventBridge "Object Created" event (detail.object.key/size)
    or an S3 notification (Records[].s3.object)
    """
    media_service = get_service('media_service')
    processed, failed = 0, 0

    for obj in object_event_details(event):
        try:
            user_id, file_name = split_object_key(obj['key'])
            item = media_service.process_uploaded_object(user_id, file_name, obj['size'])
        except ServiceError as e:
            logger.error("Failed to process uploaded object", error=e, key=obj['key'])
            failed += 1
            continue

        logger.info("Media row written", key=obj['key'], sort_key=item.uploaded_at,
                    thumbnail_key=item.thumbnail_key)
        processed += 1

    return {'processed': processed, 'failed': failed}
