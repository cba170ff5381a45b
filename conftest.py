"""
Pytest configuration and fixtures for photo-backup-service tests
DynamoDB and S3 run on moto; Cognito and Rekognition are MagicMock clients
"""
import importlib.util
import io
import json
import os
import pytest
import boto3
from moto import mock_aws
from unittest.mock import MagicMock
from botocore.exceptions import ClientError
from PIL import Image


ROOT_DIR = os.path.dirname(os.path.abspath(__file__))

# Set test environment variables before anything from shared is imported
os.environ.update({
    'AWS_DEFAULT_REGION': 'us-east-1',
    'AWS_REGION': 'us-east-1',
    'AWS_ACCESS_KEY_ID': 'testing',
    'AWS_SECRET_ACCESS_KEY': 'testing',
    'AWS_SECURITY_TOKEN': 'testing',
    'AWS_SESSION_TOKEN': 'testing',
    'ENVIRONMENT': 'test',
    'USE_PARAMETER_STORE': 'false',
    'DYNAMODB_TABLE': 'PhotoBackup-test',
    'UPLOAD_BUCKET_NAME': 'photo-backup-uploads-test',
    'THUMBNAIL_BUCKET_NAME': 'photo-backup-thumbnails-test',
    'USER_POOL_CLIENT_ID': 'test-client-id'
})

from shared.models.table import create_table, reset_table  # noqa: E402
from shared.services.service_container import register_service, clear_services  # noqa: E402

TEST_USER_ID = 'user-sub-123'
OTHER_USER_ID = 'user-sub-456'
TEST_ACCESS_TOKEN = 'test-access-token'
UPLOAD_BUCKET = os.environ['UPLOAD_BUCKET_NAME']
THUMBNAIL_BUCKET = os.environ['THUMBNAIL_BUCKET_NAME']


@pytest.fixture(autouse=True)
def service_registry():
    """Fresh service container per test, with a fake auth service resolving every token to TEST_USER_ID"""
    clear_services()
    auth_service = MagicMock()
    auth_service.get_user_id.return_value = TEST_USER_ID
    register_service('auth_service', auth_service)
    yield auth_service
    clear_services()
    reset_table()


@pytest.fixture
def aws():
    """moto-backed DynamoDB table and both buckets"""
    with mock_aws():
        reset_table()
        table = create_table()

        s3 = boto3.client('s3', region_name='us-east-1')
        s3.create_bucket(Bucket=UPLOAD_BUCKET)
        s3.create_bucket(Bucket=THUMBNAIL_BUCKET)

        yield {
            'table': table,
            's3': s3
        }

        reset_table()


@pytest.fixture
def rekognition_client():
    """Rekognition stand-in registered behind the face service"""
    from shared.services.face_service import FaceService

    client = MagicMock()
    client.describe_collection.return_value = {'FaceCount': 0}
    client.search_faces.return_value = {'FaceMatches': []}
    client.delete_faces.return_value = {'DeletedFaces': []}
    register_service('face_service', FaceService(rekognition_client=client))
    return client


@pytest.fixture
def cognito_client():
    """Cognito stand-in registered behind a real auth service (no backoff sleeps)"""
    from shared.services.auth_service import AuthService

    client = MagicMock()
    sleeps = []
    service = AuthService(cognito_client=client, sleep=sleeps.append)
    register_service('auth_service', service)
    client.sleeps = sleeps
    return client


@pytest.fixture
def make_client_error():
    """Factory for botocore ClientErrors"""
    def _make(code, operation='Operation', message='error', status=400):
        return ClientError(
            {
                'Error': {'Code': code, 'Message': message},
                'ResponseMetadata': {'HTTPStatusCode': status}
            },
            operation
        )
    return _make


@pytest.fixture
def lambda_context():
    """Mock Lambda context"""
    context = MagicMock()
    context.function_name = 'test-function'
    context.function_version = '$LATEST'
    context.invoked_function_arn = 'arn:aws:lambda:us-east-1:123456789012:function:test-function'
    context.memory_limit_in_mb = 128
    context.remaining_time_in_millis = lambda: 30000
    context.aws_request_id = 'test-request-id'
    return context


@pytest.fixture
def api_gateway_event():
    """Factory for API Gateway proxy events carrying a bearer token"""
    def _make(body=None, token=TEST_ACCESS_TOKEN, path_parameters=None, query=None, method='POST'):
        headers = {'Content-Type': 'application/json'}
        if token:
            headers['Authorization'] = f'Bearer {token}'
        return {
            'httpMethod': method,
            'path': '/test',
            'resource': '/test',
            'headers': headers,
            'pathParameters': path_parameters,
            'queryStringParameters': query,
            'requestContext': {'requestId': 'test-request-id', 'stage': 'test'},
            'body': json.dumps(body) if body is not None else None,
            'isBase64Encoded': False
        }
    return _make


@pytest.fixture
def load_handler():
    """
    Import <function-dir>/app.py under a unique module name and return its lambda_handler
    (every function ships a module called app)
    """
    def _load(function_dir):
        path = os.path.join(ROOT_DIR, function_dir, 'app.py')
        module_name = f"{function_dir.replace('-', '_')}_app"
        spec = importlib.util.spec_from_file_location(module_name, path)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module.lambda_handler
    return _load


@pytest.fixture
def response_body():
    """Decode the JSON body of a proxy response"""
    def _decode(response):
        return json.loads(response['body'])
    return _decode


@pytest.fixture
def sample_image_bytes():
    """A 400x300 JPEG"""
    img = Image.new('RGB', (400, 300), color='red')
    buffer = io.BytesIO()
    img.save(buffer, format='JPEG', quality=85)
    return buffer.getvalue()


@pytest.fixture
def put_media_row(aws):
    """Insert a media row directly"""
    def _put(sort_key, file_name='IMG_0001.jpg', user_id=TEST_USER_ID, **attributes):
        item = {
            'PK': user_id,
            'SK': sort_key,
            'fileName': file_name,
            'fileSize': 1024,
            'createdAt': sort_key
        }
        item.update(attributes)
        aws['table'].put_item(Item=item)
        return item
    return _put


@pytest.fixture
def put_album_row(aws):
    """Insert an album row directly"""
    def _put(album_id, album_name, user_id=TEST_USER_ID):
        item = {
            'PK': user_id,
            'SK': album_id,
            'albumName': album_name,
            'createdAt': '2024-01-01T00:00:00+00:00',
            'updatedAt': '2024-01-01T00:00:00+00:00'
        }
        aws['table'].put_item(Item=item)
        return item
    return _put


@pytest.fixture
def put_face_row(aws):
    """Insert a face row directly"""
    def _put(image_id, face_id, face_name=None):
        item = {
            'PK': f'IMAGE#{image_id}',
            'SK': f'FACE#{face_id}',
            'boundingBox': {'Width': 1, 'Height': 1, 'Left': 0, 'Top': 0},
            'updatedAt': '2024-01-01T00:00:00+00:00'
        }
        if face_name:
            item['faceName'] = face_name
        aws['table'].put_item(Item=item)
        return item
    return _put
