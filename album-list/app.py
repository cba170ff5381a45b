"""
Album List Lambda Function
Lists the caller's albums, newest first
"""
import os
import sys

# Add shared directory to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.constants import HTTPConstants
from shared.decorators import api_gateway_handler
from shared.services.service_container import get_service
from shared.utils import create_json_response


@api_gateway_handler(function_name='album-list')
def lambda_handler(event, context):
    albums = get_service('album_service').list_albums(event['user_id'])

    return create_json_response(HTTPConstants.OK, {'albums': albums})
