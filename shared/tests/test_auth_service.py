"""
Tests for the Cognito auth service
"""
from unittest.mock import MagicMock
import pytest

from shared.exceptions import AuthenticationError, RateLimitExceededError, ConfigurationError, ValidationError
from shared.services.auth_service import AuthService


def user_response(*attributes):
    return {
        'Username': 'jane',
        'UserAttributes': [{'Name': name, 'Value': value} for name, value in attributes]
    }


@pytest.fixture
def cognito():
    return MagicMock()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def service(cognito, sleeps):
    return AuthService(cognito_client=cognito, sleep=sleeps.append)


class TestResolveUserId:

    def test_returns_sub(self, service, cognito):
        cognito.get_user.return_value = user_response(('email', 'jane@example.com'), ('sub', 'sub-1'))

        assert service.get_user_id('token') == 'sub-1'
        cognito.get_user.assert_called_once_with(AccessToken='token')

    def test_recovers_after_throttling(self, service, cognito, sleeps, make_client_error):
        throttled = make_client_error('TooManyRequestsException', 'GetUser')
        cognito.get_user.side_effect = [throttled, throttled, user_response(('sub', 'sub-1'))]

        assert service.get_user_id('token') == 'sub-1'
        assert sleeps == [0.25, 0.5]

    def test_gives_up_after_five_retries(self, service, cognito, sleeps, make_client_error):
        cognito.get_user.side_effect = make_client_error('TooManyRequestsException', 'GetUser')

        with pytest.raises(RateLimitExceededError) as exc_info:
            service.get_user_id('token')

        assert exc_info.value.status_code == 429
        assert cognito.get_user.call_count == 6
        assert sleeps == [0.25, 0.5, 1.0, 2.0, 4.0]

    def test_invalid_token(self, service, cognito, sleeps, make_client_error):
        cognito.get_user.side_effect = make_client_error('NotAuthorizedException', 'GetUser')

        with pytest.raises(AuthenticationError):
            service.get_user_id('expired')
        assert sleeps == []

    def test_user_without_sub(self, service, cognito):
        cognito.get_user.return_value = user_response(('email', 'jane@example.com'))

        with pytest.raises(AuthenticationError):
            service.get_user_id('token')


class TestSignin:

    def test_requires_client_id(self, service, monkeypatch):
        monkeypatch.delenv('USER_POOL_CLIENT_ID')

        with pytest.raises(ConfigurationError):
            service.signin('jane', 'pw')

    def test_requires_credentials(self, service, cognito):
        with pytest.raises(ValidationError):
            service.signin('', 'pw')
        cognito.initiate_auth.assert_not_called()

    def test_rate_limited_signin(self, service, cognito, make_client_error):
        cognito.initiate_auth.side_effect = make_client_error('TooManyRequestsException', 'InitiateAuth')

        with pytest.raises(RateLimitExceededError):
            service.signin('jane', 'pw')
