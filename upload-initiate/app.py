"""
Upload Initiate Lambda Function
Starts a multipart upload and hands out one presigned URL per part
"""
import os
import sys

# Add shared directory to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.constants import HTTPConstants
from shared.decorators import api_gateway_handler
from shared.services.service_container import get_service
from shared.utils import create_json_response


@api_gateway_handler(required_fields=['fileName'], function_name='upload-initiate')
def lambda_handler(event, context):
    """
    Expected request format:
    {
        "fileName": "IMG_0001.jpg",
        "contentType": "image/jpeg",   # Optional
        "partCount": 3                 # Optional, default: 1
    }

    The client PUTs each part to its URL, keeps the returned ETags and
    finishes with upload-complete.
    """
    params = event['parsed_body']

    result = get_service('media_service').initiate_upload(
        event['user_id'],
        params['fileName'],
        part_count=params.get('partCount', 1),
        content_type=params.get('contentType')
    )

    return create_json_response(HTTPConstants.OK, result)
