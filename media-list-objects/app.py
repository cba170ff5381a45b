"""
Media List Objects Lambda Function
Lists every object the caller has in the upload bucket
"""
import os
import sys

# Add shared directory to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.constants import HTTPConstants
from shared.decorators import api_gateway_handler
from shared.services.service_container import get_service
from shared.utils import create_json_response


@api_gateway_handler(function_name='media-list-objects')
def lambda_handler(event, context):
    keys = get_service('media_service').list_objects(event['user_id'])

    return create_json_response(HTTPConstants.OK, {'items': keys, 'count': len(keys)})
