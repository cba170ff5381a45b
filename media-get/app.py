"""
Media Get Lambda Function
Fetches one media or album row of the caller
"""
import os
import sys

# Add shared directory to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.constants import HTTPConstants
from shared.decorators import api_gateway_handler
from shared.services.service_container import get_service
from shared.utils import create_json_response


@api_gateway_handler(required_fields=['PK', 'SK'], function_name='media-get')
def lambda_handler(event, context):
    params = event['parsed_body']

    item = get_service('media_service').get_item(event['user_id'], params['PK'], params['SK'])

    return create_json_response(HTTPConstants.OK, {'item': item})
