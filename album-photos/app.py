"""
Album Photos Lambda Function
Pages through the media assigned to one album
"""
import os
import sys

# Add shared directory to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.constants import HTTPConstants
from shared.decorators import api_gateway_handler
from shared.exceptions import ValidationError
from shared.services.service_container import get_service
from shared.utils import create_json_response, get_query_parameter


@api_gateway_handler(function_name='album-photos')
def lambda_handler(event, context):
    """
    albumId comes from the path (/albums/{albumId}/photos) or the body;
    nextToken from the body or the query string
    """
    params = event['parsed_body']
    album_id = (event.get('pathParameters') or {}).get('albumId') or params.get('albumId')
    if not album_id or not str(album_id).strip():
        raise ValidationError('albumId is required', 'albumId')

    next_token = params.get('nextToken') or get_query_parameter(event, 'nextToken')

    result = get_service('album_service').get_album_photos(event['user_id'], str(album_id).strip(), next_token)

    return create_json_response(HTTPConstants.OK, result)
