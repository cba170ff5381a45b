"""
Upload Complete Lambda Function
Finishes a multipart upload started by upload-initiate
"""
import os
import sys

# Add shared directory to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.constants import HTTPConstants
from shared.decorators import api_gateway_handler
from shared.services.service_container import get_service
from shared.utils import create_json_response


@api_gateway_handler(required_fields=['uploadId', 'key', 'parts'], function_name='upload-complete')
def lambda_handler(event, context):
    """
    Expected request format:
    {
        "uploadId": "...",
        "key": "IMG_0001.jpg",
        "parts": [{"ETag": "\\"abc\\"", "PartNumber": 1}]
    }
    """
    params = event['parsed_body']

    result = get_service('media_service').complete_upload(
        event['user_id'],
        params['uploadId'],
        params['key'],
        params['parts']
    )

    return create_json_response(HTTPConstants.OK, result)
