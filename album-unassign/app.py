"""
Album Unassign Lambda Function
Removes media from one album, or from whatever album they are in
"""
import os
import sys

# Add shared directory to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.constants import HTTPConstants
from shared.decorators import api_gateway_handler
from shared.services.service_container import get_service
from shared.utils import create_json_response


@api_gateway_handler(required_fields=['items'], function_name='album-unassign')
def lambda_handler(event, context):
    """
    Expected request format:
    {
        "albumId": "ALBUM#...",      # Optional; only unassign items currently in this album
        "items": [{"PK": "<sub>", "SK": "2024-05-01T10:00:00+00:00"}]
    }
    """
    params = event['parsed_body']
    album_id = (event.get('pathParameters') or {}).get('albumId') or params.get('albumId')

    result = get_service('album_service').unassign_photos(event['user_id'], params['items'], album_id)

    return create_json_response(HTTPConstants.OK, result)
