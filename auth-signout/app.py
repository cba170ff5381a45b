"""
Auth Signout Lambda Function
Revokes every token issued to the caller
"""
import os
import sys

# Add shared directory to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.constants import HTTPConstants
from shared.decorators import api_gateway_handler
from shared.services.service_container import get_service
from shared.utils import create_json_response


@api_gateway_handler(resolve_user=False, function_name='auth-signout')
def lambda_handler(event, context):
    get_service('auth_service').signout(event['access_token'])

    return create_json_response(HTTPConstants.OK, {'message': 'Successfully signed out.'})
