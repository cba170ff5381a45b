"""
Cognito user pool adapter: sign-in, sign-out and access token resolution
"""
import time
from typing import Dict, Any, Callable, Optional
import boto3
from botocore.exceptions import ClientError, BotoCoreError
from ..config import config
from ..constants import AuthConstants, HTTPConstants
from ..error_handler import error_handler
from ..exceptions import (
    AuthenticationError, RateLimitExceededError, ValidationError,
    ConfigurationError, ServiceError
)
from ..logger import auth_logger as logger


def _strip_metadata(response: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in response.items() if key != 'ResponseMetadata'}


class AuthService:
    """
    Thin wrapper around the cognito-idp API
    """

    def __init__(self, cognito_client=None, sleep: Callable[[float], None] = time.sleep):
        self.cognito_client = cognito_client or boto3.client('cognito-idp', region_name=config.aws_region)
        self.max_retries = config.auth_max_retries
        self._sleep = sleep

    def _raise_cognito_error(self, error: Exception, operation: str):
        error_data = error_handler.handle_cognito_error(error, operation)
        status_code = error_data['status_code']

        if status_code == HTTPConstants.UNAUTHORIZED:
            raise AuthenticationError() from error
        if status_code == HTTPConstants.TOO_MANY_REQUESTS:
            raise RateLimitExceededError(error_data['error_message']) from error
        if status_code == HTTPConstants.BAD_REQUEST:
            raise ValidationError(error_data['error_message']) from error
        raise ServiceError(error_data['error_message'], 'IDENTITY_PROVIDER_ERROR',
                           {'operation': operation}, status_code) from error

    def _client_id(self) -> str:
        client_id = config.user_pool_client_id
        if not client_id:
            raise ConfigurationError('User pool client id is not configured', 'user-pool-client-id')
        return client_id

    def signin(self, username: str, password: str) -> Dict[str, Any]:
        """
        USER_PASSWORD_AUTH sign-in. A first login that Cognito answers with
        NEW_PASSWORD_REQUIRED is completed by re-submitting the same password.

        Returns:
            Cognito's authentication response (AuthenticationResult with tokens)
        """
        if not username or not password:
            raise ValidationError('username and password are required', 'username' if not username else 'password')

        client_id = self._client_id()
        logger.log_service_operation('signin', username=username)

        try:
            response = self.cognito_client.initiate_auth(
                ClientId=client_id,
                AuthFlow=AuthConstants.USER_PASSWORD_AUTH,
                AuthParameters={'USERNAME': username, 'PASSWORD': password}
            )

            if response.get('ChallengeName') == AuthConstants.NEW_PASSWORD_REQUIRED:
                logger.info("Answering first-login password challenge", username=username)
                response = self.cognito_client.respond_to_auth_challenge(
                    ClientId=client_id,
                    ChallengeName=AuthConstants.NEW_PASSWORD_REQUIRED,
                    ChallengeResponses={'USERNAME': username, 'NEW_PASSWORD': password},
                    Session=response.get('Session')
                )
        except (ClientError, BotoCoreError) as e:
            self._raise_cognito_error(e, 'signin')

        logger.info("User signed in", username=username)
        return _strip_metadata(response)

    def signout(self, access_token: str) -> None:
        """Invalidate every token issued to the user"""
        try:
            self.cognito_client.global_sign_out(AccessToken=access_token)
        except (ClientError, BotoCoreError) as e:
            self._raise_cognito_error(e, 'signout')

        logger.info("User signed out")

    def get_user(self, access_token: str) -> Dict[str, Any]:
        """
        GetUser with exponential backoff on TooManyRequestsException:
        retries wait RETRY_BASE_DELAY_SECONDS * 2 ** attempt (0.25s, 0.5s, 1s, 2s, 4s)
        """
        attempt = 0
        while True:
            try:
                return _strip_metadata(self.cognito_client.get_user(AccessToken=access_token))
            except ClientError as e:
                code = e.response.get('Error', {}).get('Code')
                if code != 'TooManyRequestsException':
                    self._raise_cognito_error(e, 'get_user')

                if attempt >= self.max_retries:
                    logger.warning("GetUser still throttled after retries", retries=attempt)
                    raise RateLimitExceededError('Too many requests. Please try again.', attempt) from e

                delay = AuthConstants.RETRY_BASE_DELAY_SECONDS * (2 ** attempt)
                logger.warning("GetUser throttled, retrying", attempt=attempt + 1, delay_seconds=delay)
                self._sleep(delay)
                attempt += 1
            except BotoCoreError as e:
                self._raise_cognito_error(e, 'get_user')

    def get_current_user(self, access_token: str) -> Dict[str, Any]:
        """Username and attributes of the token's owner"""
        user = self.get_user(access_token)
        attributes = {attr['Name']: attr['Value'] for attr in user.get('UserAttributes', [])}
        return {
            'username': user.get('Username'),
            'attributes': attributes
        }

    def get_user_id(self, access_token: str) -> str:
        """
        Resolve an access token to the user's Cognito sub

        Raises:
            AuthenticationError: Token invalid/expired, or the user has no sub
            RateLimitExceededError: GetUser kept throttling
        """
        user = self.get_user(access_token)
        user_id: Optional[str] = next(
            (attr['Value'] for attr in user.get('UserAttributes', [])
             if attr.get('Name') == AuthConstants.SUB_ATTRIBUTE),
            None
        )
        if not user_id:
            logger.warning("Token owner has no sub attribute", username=user.get('Username'))
            raise AuthenticationError()

        return user_id
