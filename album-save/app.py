"""
Album Save Lambda Function
Creates an album, or renames one when albumId is given
"""
import os
import sys

# Add shared directory to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.constants import HTTPConstants
from shared.decorators import api_gateway_handler
from shared.services.service_container import get_service
from shared.utils import create_json_response


@api_gateway_handler(required_fields=['albumName'], function_name='album-save')
def lambda_handler(event, context):
    """
    Expected request format:
    {
        "albumName": "Summer 2024",
        "albumId": "ALBUM#..."       # Optional, renames an existing album
    }
    """
    params = event['parsed_body']
    album_id = params.get('albumId') or (event.get('pathParameters') or {}).get('albumId')

    result = get_service('album_service').save_album(event['user_id'], params['albumName'], album_id)

    return create_json_response(HTTPConstants.OK, result)
