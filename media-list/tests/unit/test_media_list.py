"""
Unit tests for media list Lambda function
"""
import pytest
from conftest import OTHER_USER_ID


@pytest.fixture
def handler(load_handler):
    return load_handler('media-list')


@pytest.fixture
def library(put_media_row, put_album_row):
    put_media_row('2024-04-30T09:00:00+00:00', 'april.jpg')
    put_media_row('2024-05-01T10:00:00+00:00', 'may1.jpg')
    put_media_row('2024-05-02T10:00:00+00:00', 'may2.mp4')
    put_album_row('ALBUM#1111', 'Trips')
    put_media_row('2024-05-03T10:00:00+00:00', 'theirs.jpg', user_id=OTHER_USER_ID)


class TestMediaListHandler:

    def test_lists_all_media_newest_first(self, handler, library, api_gateway_event, lambda_context, response_body):
        response = handler(api_gateway_event({}), lambda_context)

        assert response['statusCode'] == 200
        body = response_body(response)
        assert [item['fileName'] for item in body['items']] == ['may2.mp4', 'may1.jpg', 'april.jpg']
        assert body['count'] == 3
        assert body['nextToken'] is None

    def test_filters_by_date_prefix(self, handler, library, api_gateway_event, lambda_context, response_body):
        response = handler(api_gateway_event({'date': '2024-05'}), lambda_context)

        body = response_body(response)
        assert [item['fileName'] for item in body['items']] == ['may2.mp4', 'may1.jpg']

    def test_date_from_query_string(self, handler, library, api_gateway_event, lambda_context, response_body):
        response = handler(api_gateway_event(query={'date': '2024-04'}, method='GET'), lambda_context)

        body = response_body(response)
        assert [item['fileName'] for item in body['items']] == ['april.jpg']

    def test_pages_with_next_token(self, handler, library, api_gateway_event, lambda_context,
                                   response_body, monkeypatch):
        monkeypatch.setenv('PAGE_SIZE', '2')

        first = response_body(handler(api_gateway_event({}), lambda_context))
        assert first['count'] == 2
        assert first['nextToken']

        second = response_body(handler(api_gateway_event({'nextToken': first['nextToken']}), lambda_context))

        assert [item['fileName'] for item in second['items']] == ['april.jpg']

    def test_undecodable_token_is_bad_request(self, handler, library, api_gateway_event, lambda_context):
        response = handler(api_gateway_event({'nextToken': '%%%not-base64'}), lambda_context)

        assert response['statusCode'] == 400

    def test_token_for_another_user_is_bad_request(self, handler, library, api_gateway_event, lambda_context):
        from shared.utils import encode_pagination_token
        token = encode_pagination_token({'PK': OTHER_USER_ID, 'SK': '2024-05-03T10:00:00+00:00'})

        response = handler(api_gateway_event({'nextToken': token}), lambda_context)

        assert response['statusCode'] == 400

    def test_numeric_token_is_bad_request(self, handler, library, api_gateway_event, lambda_context):
        response = handler(api_gateway_event({'nextToken': 123}), lambda_context)

        assert response['statusCode'] == 400
