"""
Auth Signin Lambda Function
Exchanges username/password for Cognito tokens
"""
import os
import sys

# Add shared directory to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.constants import HTTPConstants
from shared.decorators import api_gateway_handler
from shared.services.service_container import get_service
from shared.utils import create_json_response


@api_gateway_handler(
    required_fields=['username', 'password'],
    require_auth=False,
    function_name='auth-signin'
)
def lambda_handler(event, context):
    """
    Sign a user in

    Expected request format:
    {
        "username": "jane",
        "password": "..."
    }

    Returns Cognito's authentication response (AuthenticationResult with
    AccessToken, IdToken, RefreshToken and ExpiresIn).
    """
    params = event['parsed_body']

    result = get_service('auth_service').signin(params['username'], params['password'])

    return create_json_response(HTTPConstants.OK, result)
