"""
Media List Lambda Function
Pages through the caller's media rows, newest first, optionally for one date prefix
"""
import os
import sys

# Add shared directory to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.constants import HTTPConstants
from shared.decorators import api_gateway_handler
from shared.services.service_container import get_service
from shared.utils import create_json_response, get_query_parameter


@api_gateway_handler(function_name='media-list')
def lambda_handler(event, context):
    """
    Expected request format (all optional):
    {
        "date": "2024-05",        # Sort key prefix, e.g. a year, month or day
        "nextToken": "..."        # From a previous page
    }

    Both values are also accepted as query string parameters.
    """
    params = event['parsed_body']
    date_prefix = params.get('date') or get_query_parameter(event, 'date')
    next_token = params.get('nextToken') or get_query_parameter(event, 'nextToken')

    result = get_service('media_service').list_media(event['user_id'], date_prefix, next_token)

    return create_json_response(HTTPConstants.OK, result)
