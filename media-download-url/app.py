"""
Media Download URL Lambda Function
Presigns a 24 hour GET URL for one of the caller's originals
"""
import os
import sys

# Add shared directory to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.constants import HTTPConstants
from shared.decorators import api_gateway_handler
from shared.services.service_container import get_service
from shared.utils import create_json_response


@api_gateway_handler(required_fields=['fileName'], function_name='media-download-url')
def lambda_handler(event, context):
    params = event['parsed_body']

    signed_url = get_service('media_service').get_download_url(event['user_id'], params['fileName'])

    return create_json_response(HTTPConstants.OK, {'signedUrl': signed_url})
