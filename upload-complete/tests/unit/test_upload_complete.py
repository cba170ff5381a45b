"""
Unit tests for upload complete Lambda function
"""
import pytest
from conftest import TEST_USER_ID, UPLOAD_BUCKET


@pytest.fixture
def handler(load_handler):
    return load_handler('upload-complete')


@pytest.fixture
def started_upload(aws):
    """A multipart upload with one uploaded part"""
    key = f'{TEST_USER_ID}/clip.mp4'
    upload_id = aws['s3'].create_multipart_upload(Bucket=UPLOAD_BUCKET, Key=key)['UploadId']
    part = aws['s3'].upload_part(Bucket=UPLOAD_BUCKET, Key=key, UploadId=upload_id,
                                 PartNumber=1, Body=b'video-bytes')
    return {'key': key, 'upload_id': upload_id, 'etag': part['ETag']}


class TestUploadCompleteHandler:

    def test_completes_upload(self, handler, aws, started_upload, api_gateway_event, lambda_context, response_body):
        event = api_gateway_event({
            'uploadId': started_upload['upload_id'],
            'key': 'clip.mp4',
            'parts': [{'ETag': started_upload['etag'], 'PartNumber': 1}]
        })

        response = handler(event, lambda_context)

        assert response['statusCode'] == 200
        assert response_body(response)['Key'] == started_upload['key']
        stored = aws['s3'].get_object(Bucket=UPLOAD_BUCKET, Key=started_upload['key'])
        assert stored['Body'].read() == b'video-bytes'

    def test_missing_parts_is_bad_request(self, handler, aws, api_gateway_event, lambda_context, response_body):
        response = handler(api_gateway_event({'uploadId': 'abc', 'key': 'clip.mp4'}), lambda_context)

        assert response['statusCode'] == 400
        assert 'parts' in response_body(response)['message']

    def test_part_without_etag_is_bad_request(self, handler, aws, started_upload, api_gateway_event, lambda_context):
        event = api_gateway_event({
            'uploadId': started_upload['upload_id'],
            'key': 'clip.mp4',
            'parts': [{'PartNumber': 1}]
        })

        response = handler(event, lambda_context)

        assert response['statusCode'] == 400

    def test_unknown_upload_is_not_found(self, handler, aws, api_gateway_event, lambda_context):
        event = api_gateway_event({
            'uploadId': 'does-not-exist',
            'key': 'clip.mp4',
            'parts': [{'ETag': '"abc"', 'PartNumber': 1}]
        })

        response = handler(event, lambda_context)

        assert response['statusCode'] == 404
