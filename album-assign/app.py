"""
Album Assign Lambda Function
Adds media to an album
"""
import os
import sys

# Add shared directory to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.constants import HTTPConstants
from shared.decorators import api_gateway_handler
from shared.exceptions import ValidationError
from shared.services.service_container import get_service
from shared.utils import create_json_response


@api_gateway_handler(required_fields=['items'], function_name='album-assign')
def lambda_handler(event, context):
    """
    Expected request format:
    {
        "albumId": "ALBUM#...",
        "items": [{"PK": "<sub>", "SK": "2024-05-01T10:00:00+00:00"}]
    }
    """
    params = event['parsed_body']
    album_id = (event.get('pathParameters') or {}).get('albumId') or params.get('albumId')
    if not album_id:
        raise ValidationError('albumId is required', 'albumId')

    result = get_service('album_service').assign_photos(event['user_id'], album_id, params['items'])

    return create_json_response(HTTPConstants.OK, result)
