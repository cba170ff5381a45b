"""
Unit tests for auth signout Lambda function
"""
import pytest


@pytest.fixture
def handler(load_handler):
    return load_handler('auth-signout')


class TestSignoutHandler:

    def test_signout_success(self, handler, cognito_client, api_gateway_event, lambda_context, response_body):
        cognito_client.global_sign_out.return_value = {}

        response = handler(api_gateway_event(), lambda_context)

        assert response['statusCode'] == 200
        assert response_body(response)['message'] == 'Successfully signed out.'
        cognito_client.global_sign_out.assert_called_once_with(AccessToken='test-access-token')
        cognito_client.get_user.assert_not_called()

    def test_missing_token_is_unauthorized(self, handler, cognito_client, api_gateway_event, lambda_context):
        response = handler(api_gateway_event(token=None), lambda_context)

        assert response['statusCode'] == 401
        cognito_client.global_sign_out.assert_not_called()

    def test_revoked_token_is_unauthorized(self, handler, cognito_client, api_gateway_event,
                                           lambda_context, make_client_error):
        cognito_client.global_sign_out.side_effect = make_client_error('NotAuthorizedException', 'GlobalSignOut')

        response = handler(api_gateway_event(), lambda_context)

        assert response['statusCode'] == 401
