"""
Auth Current User Lambda Function
Returns the username and attributes of the token's owner
"""
import os
import sys

# Add shared directory to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.constants import HTTPConstants
from shared.decorators import api_gateway_handler
from shared.services.service_container import get_service
from shared.utils import create_json_response


@api_gateway_handler(resolve_user=False, function_name='auth-current-user')
def lambda_handler(event, context):
    user = get_service('auth_service').get_current_user(event['access_token'])

    return create_json_response(HTTPConstants.OK, user)
