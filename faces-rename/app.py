"""
Faces Rename Lambda Function
Names a face and every face Rekognition matches to it
"""
import os
import sys

# Add shared directory to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.constants import HTTPConstants
from shared.decorators import api_gateway_handler
from shared.services.service_container import get_service
from shared.utils import create_json_response


@api_gateway_handler(required_fields=['imageId', 'faceId', 'faceName'], function_name='faces-rename')
def lambda_handler(event, context):
    """
    Expected request format:
    {
        "imageId": "...",
        "faceId": "...",
        "faceName": "Grandma"
    }
    """
    params = event['parsed_body']

    result = get_service('face_service').rename_face(
        event['user_id'],
        params['imageId'],
        params['faceId'],
        params['faceName']
    )

    return create_json_response(HTTPConstants.OK, result)
