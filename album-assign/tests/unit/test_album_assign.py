"""
Unit tests for album assign Lambda function
"""
import pytest
from conftest import TEST_USER_ID, OTHER_USER_ID

FIRST = '2024-05-01T10:00:00+00:00'
SECOND = '2024-05-02T10:00:00+00:00'


@pytest.fixture
def handler(load_handler):
    return load_handler('album-assign')


@pytest.fixture
def library(put_album_row, put_media_row):
    put_album_row('ALBUM#1111', 'Trips')
    put_media_row(FIRST, 'a.jpg')
    put_media_row(SECOND, 'b.jpg')


def album_of(table, sort_key):
    return table.get_item(Key={'PK': TEST_USER_ID, 'SK': sort_key})['Item'].get('albumId')


class TestAlbumAssignHandler:

    def test_assigns_items(self, handler, aws, library, api_gateway_event, lambda_context, response_body):
        event = api_gateway_event({
            'albumId': '1111',
            'items': [{'PK': TEST_USER_ID, 'SK': FIRST}, {'PK': TEST_USER_ID, 'SK': SECOND}]
        })

        response = handler(event, lambda_context)

        assert response['statusCode'] == 200
        body = response_body(response)
        assert body['message'] == 'Assignment completed. 2 items assigned successfully.'
        assert body['success'] == 2
        assert body['failed'] == 0
        assert 'errors' not in body
        assert album_of(aws['table'], FIRST) == 'ALBUM#1111'
        assert album_of(aws['table'], SECOND) == 'ALBUM#1111'

    def test_album_id_from_path(self, handler, aws, library, api_gateway_event, lambda_context):
        event = api_gateway_event({'items': [{'PK': TEST_USER_ID, 'SK': FIRST}]},
                                  path_parameters={'albumId': 'ALBUM#1111'})

        response = handler(event, lambda_context)

        assert response['statusCode'] == 200
        assert album_of(aws['table'], FIRST) == 'ALBUM#1111'

    def test_unknown_album_is_not_found(self, handler, aws, library, api_gateway_event, lambda_context):
        event = api_gateway_event({'albumId': 'ALBUM#9999', 'items': [{'PK': TEST_USER_ID, 'SK': FIRST}]})

        response = handler(event, lambda_context)

        assert response['statusCode'] == 404

    def test_missing_item_is_bad_request(self, handler, aws, library, api_gateway_event, lambda_context,
                                         response_body):
        event = api_gateway_event({
            'albumId': 'ALBUM#1111',
            'items': [{'PK': TEST_USER_ID, 'SK': FIRST}, {'PK': TEST_USER_ID, 'SK': '2019-01-01'}]
        })

        response = handler(event, lambda_context)

        assert response['statusCode'] == 400
        assert response_body(response)['message'] == 'Some items do not exist or are not photos/videos'
        assert album_of(aws['table'], FIRST) is None

    def test_album_row_is_not_assignable(self, handler, aws, library, api_gateway_event, lambda_context):
        event = api_gateway_event({'albumId': 'ALBUM#1111', 'items': [{'PK': TEST_USER_ID, 'SK': 'ALBUM#1111'}]})

        response = handler(event, lambda_context)

        assert response['statusCode'] == 400

    def test_other_users_item_is_bad_request(self, handler, aws, library, api_gateway_event, lambda_context):
        event = api_gateway_event({'albumId': 'ALBUM#1111', 'items': [{'PK': OTHER_USER_ID, 'SK': FIRST}]})

        response = handler(event, lambda_context)

        assert response['statusCode'] == 400

    @pytest.mark.parametrize('body', [
        {'albumId': 'ALBUM#1111', 'items': []},
        {'albumId': 'ALBUM#1111'},
        {'items': [{'PK': TEST_USER_ID, 'SK': FIRST}]},
    ])
    def test_incomplete_requests_are_bad_requests(self, handler, aws, library, api_gateway_event,
                                                  lambda_context, body):
        response = handler(api_gateway_event(body), lambda_context)

        assert response['statusCode'] == 400
