"""
Media Delete Lambda Function
Deletes originals, thumbnails, media rows and face data of the given files
"""
import os
import sys

# Add shared directory to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.constants import HTTPConstants
from shared.decorators import api_gateway_handler
from shared.services.service_container import get_service
from shared.utils import create_json_response


@api_gateway_handler(required_fields=['files'], function_name='media-delete')
def lambda_handler(event, context):
    """
    Expected request format:
    {
        "files": [
            {"PK": "<sub>", "SK": "2024-05-01T10:00:00+00:00", "fileName": "IMG_0001.jpg"}
        ]
    }

    Face rows go too, found through the imageId stored on each media row.
    """
    params = event['parsed_body']

    result = get_service('media_service').delete_media(event['user_id'], params['files'])

    return create_json_response(HTTPConstants.OK, result)
