"""
Unit tests for upload initiate Lambda function
"""
import pytest
from conftest import TEST_USER_ID, UPLOAD_BUCKET


@pytest.fixture
def handler(load_handler):
    return load_handler('upload-initiate')


class TestUploadInitiateHandler:

    def test_presigns_one_url_per_part(self, handler, aws, service_registry, api_gateway_event,
                                       lambda_context, response_body):
        event = api_gateway_event({'fileName': 'holiday.mp4', 'contentType': 'video/mp4', 'partCount': 3})

        response = handler(event, lambda_context)

        assert response['statusCode'] == 200
        body = response_body(response)
        assert body['key'] == 'holiday.mp4'
        assert body['uploadId']
        assert [part['partNumber'] for part in body['parts']] == [1, 2, 3]
        for part in body['parts']:
            assert f"partNumber={part['partNumber']}" in part['url']
            assert 'uploadId=' in part['url']
            assert f'{TEST_USER_ID}/holiday.mp4' in part['url']

        uploads = aws['s3'].list_multipart_uploads(Bucket=UPLOAD_BUCKET).get('Uploads', [])
        assert [upload['Key'] for upload in uploads] == [f'{TEST_USER_ID}/holiday.mp4']
        service_registry.get_user_id.assert_called_once_with('test-access-token')

    def test_defaults_to_single_part(self, handler, aws, api_gateway_event, lambda_context, response_body):
        response = handler(api_gateway_event({'fileName': 'IMG_0001.jpg'}), lambda_context)

        assert response['statusCode'] == 200
        assert len(response_body(response)['parts']) == 1

    @pytest.mark.parametrize('file_name', ['../escape.jpg', 'nested/photo.jpg', '   '])
    def test_rejects_unsafe_file_names(self, handler, aws, api_gateway_event, lambda_context, file_name):
        response = handler(api_gateway_event({'fileName': file_name}), lambda_context)

        assert response['statusCode'] == 400

    def test_rejects_invalid_part_count(self, handler, aws, api_gateway_event, lambda_context):
        response = handler(api_gateway_event({'fileName': 'a.jpg', 'partCount': 0}), lambda_context)

        assert response['statusCode'] == 400

    def test_missing_token_is_unauthorized(self, handler, aws, service_registry, api_gateway_event, lambda_context):
        response = handler(api_gateway_event({'fileName': 'a.jpg'}, token=None), lambda_context)

        assert response['statusCode'] == 401
        service_registry.get_user_id.assert_not_called()
