"""
Unit tests for faces index Lambda function
"""
import pytest
from boto3.dynamodb.types import TypeSerializer
from conftest import TEST_USER_ID, UPLOAD_BUCKET

SORT_KEY = '2024-05-01T10:00:00+00:00'


@pytest.fixture
def handler(load_handler):
    return load_handler('faces-index')


def stream_record(event_name, row):
    serializer = TypeSerializer()
    return {
        'eventName': event_name,
        'dynamodb': {'NewImage': {key: serializer.serialize(value) for key, value in row.items()}}
    }


def media_row(file_name='may1.jpg', sort_key=SORT_KEY):
    return {'PK': TEST_USER_ID, 'SK': sort_key, 'fileName': file_name, 'fileSize': 1024, 'createdAt': sort_key}


def indexed_faces(*face_ids, image_id='img-1'):
    return {
        'FaceRecords': [
            {
                'Face': {
                    'FaceId': face_id,
                    'ImageId': image_id,
                    'BoundingBox': {'Width': 0.25, 'Height': 0.3, 'Left': 0.1, 'Top': 0.2},
                    'Confidence': 99.87
                }
            }
            for face_id in face_ids
        ]
    }


class TestFacesIndexHandler:

    def test_indexes_faces_of_new_image(self, handler, aws, put_media_row, rekognition_client, lambda_context):
        put_media_row(SORT_KEY, 'may1.jpg')
        rekognition_client.index_faces.return_value = indexed_faces('face-1', 'face-2')

        summary = handler({'Records': [stream_record('INSERT', media_row())]}, lambda_context)

        assert summary == {'processed': 1, 'skipped': 0, 'failed': 0}
        rekognition_client.describe_collection.assert_called_once_with(CollectionId=TEST_USER_ID)
        rekognition_client.create_collection.assert_not_called()
        rekognition_client.index_faces.assert_called_once_with(
            CollectionId=TEST_USER_ID,
            Image={'S3Object': {'Bucket': UPLOAD_BUCKET, 'Name': f'{TEST_USER_ID}/may1.jpg'}},
            DetectionAttributes=['DEFAULT'],
            MaxFaces=10
        )

        media = aws['table'].get_item(Key={'PK': TEST_USER_ID, 'SK': SORT_KEY})['Item']
        assert media['imageId'] == 'img-1'
        assert 'updatedAt' in media

        face = aws['table'].get_item(Key={'PK': 'IMAGE#img-1', 'SK': 'FACE#face-2'})['Item']
        assert float(face['boundingBox']['Width']) == 0.25
        assert float(face['confidence']) == 99.87

    def test_creates_missing_collection(self, handler, aws, put_media_row, rekognition_client,
                                        make_client_error, lambda_context):
        put_media_row(SORT_KEY, 'may1.png')
        rekognition_client.describe_collection.side_effect = make_client_error(
            'ResourceNotFoundException', 'DescribeCollection'
        )
        rekognition_client.index_faces.return_value = indexed_faces('face-1')

        summary = handler({'Records': [stream_record('INSERT', media_row('may1.png'))]}, lambda_context)

        assert summary['processed'] == 1
        rekognition_client.create_collection.assert_called_once_with(CollectionId=TEST_USER_ID)

    def test_image_without_faces_keeps_row_unlinked(self, handler, aws, put_media_row, rekognition_client,
                                                    lambda_context):
        put_media_row(SORT_KEY, 'landscape.jpg')
        rekognition_client.index_faces.return_value = {'FaceRecords': []}

        summary = handler({'Records': [stream_record('INSERT', media_row('landscape.jpg'))]}, lambda_context)

        assert summary['processed'] == 1
        media = aws['table'].get_item(Key={'PK': TEST_USER_ID, 'SK': SORT_KEY})['Item']
        assert 'imageId' not in media

    def test_skips_other_records(self, handler, aws, rekognition_client, lambda_context):
        records = [
            stream_record('INSERT', media_row('clip.mp4')),
            stream_record('MODIFY', media_row('may1.jpg')),
            stream_record('INSERT', {'PK': TEST_USER_ID, 'SK': 'ALBUM#1', 'albumName': 'Trips'}),
            stream_record('INSERT', {'PK': 'IMAGE#img-1', 'SK': 'FACE#face-1'}),
        ]

        summary = handler({'Records': records}, lambda_context)

        assert summary == {'processed': 0, 'skipped': 4, 'failed': 0}
        rekognition_client.index_faces.assert_not_called()

    def test_rekognition_failure_is_counted(self, handler, aws, put_media_row, rekognition_client,
                                            make_client_error, lambda_context):
        put_media_row(SORT_KEY, 'may1.jpg')
        rekognition_client.index_faces.side_effect = make_client_error('InvalidImageFormatException', 'IndexFaces')

        summary = handler({'Records': [stream_record('INSERT', media_row())]}, lambda_context)

        assert summary == {'processed': 0, 'skipped': 0, 'failed': 1}
