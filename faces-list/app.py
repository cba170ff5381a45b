"""
Faces List Lambda Function
Returns every face row stored for one image
"""
import os
import sys

# Add shared directory to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.constants import HTTPConstants
from shared.decorators import api_gateway_handler
from shared.services.service_container import get_service
from shared.utils import create_json_response


@api_gateway_handler(required_fields=['PK'], function_name='faces-list')
def lambda_handler(event, context):
    """
    Expected request format:
    {
        "PK": "IMAGE#<imageId>"
    }
    """
    params = event['parsed_body']

    faces = get_service('face_service').list_faces(params['PK'])

    return create_json_response(HTTPConstants.OK, {'items': faces, 'count': len(faces)})
