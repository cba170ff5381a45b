"""
Lambda handler decorators for photo-backup-service
"""
import time
from functools import wraps
from typing import List, Callable

from .error_handler import error_handler
from .exceptions import AuthenticationError, ValidationError
from .logger import logger
from .services.service_container import get_service
from .utils import get_access_token, parse_json_body
from .validation_utils import validate_required_fields


def api_gateway_handler(
    required_fields: List[str] = None,
    require_auth: bool = True,
    resolve_user: bool = True,
    function_name: str = None,
    log_requests: bool = True
):
    """
    Decorator for API Gateway proxy handlers authenticated with a Cognito access token

    The wrapped handler receives the event with these extra keys:
        parsed_body: the decoded JSON body ({} when absent)
        access_token: the raw token from the Authorization header
        user_id: the caller's Cognito sub (only when resolve_user is set)

    Args:
        required_fields: Fields that must be present and non-empty in the body
        require_auth: Reject requests without an Authorization header
        resolve_user: Look the token up in Cognito and attach the user's sub
        function_name: Name used in log lines (defaults to the handler name)
        log_requests: Whether to log request start/end
    """
    def decorator(func: Callable) -> Callable:
        name = function_name or getattr(func, '__name__', 'unknown')

        @wraps(func)
        def wrapper(event, context):
            start_time = time.time()

            if log_requests:
                logger.log_lambda_start(name, event, context)

            try:
                event['parsed_body'] = parse_json_body(event)

                if require_auth:
                    access_token = get_access_token(event)
                    if not access_token:
                        raise AuthenticationError()
                    event['access_token'] = access_token

                    if resolve_user:
                        event['user_id'] = get_service('auth_service').get_user_id(access_token)

                if required_fields:
                    missing_fields = validate_required_fields(event['parsed_body'], required_fields)
                    if missing_fields:
                        raise ValidationError(f'Missing required fields: {", ".join(missing_fields)}', missing_fields[0])

                result = func(event, context)

                if log_requests:
                    duration_ms = (time.time() - start_time) * 1000
                    logger.log_lambda_end(name, True, duration_ms, status_code=result.get('statusCode'))

                return result

            except Exception as e:
                error_data = error_handler.handle_exception(e)

                if log_requests:
                    duration_ms = (time.time() - start_time) * 1000
                    logger.log_lambda_end(name, False, duration_ms,
                                          status_code=error_data['status_code'], error=str(e))

                return error_handler.create_lambda_error_response(error_data)

        return wrapper
    return decorator


def event_handler(function_name: str = None, log_requests: bool = True):
    """
    Decorator for EventBridge, S3 notification and DynamoDB Streams handlers

    The wrapped handler returns a summary dict ({'processed': n, 'failed': m, ...}).
    Unexpected errors are logged and re-raised so the platform retries the batch.
    """
    def decorator(func: Callable) -> Callable:
        name = function_name or getattr(func, '__name__', 'unknown')

        @wraps(func)
        def wrapper(event, context):
            start_time = time.time()

            if log_requests:
                logger.log_lambda_start(name, event, context)

            try:
                summary = func(event, context)
            except Exception as e:
                logger.error(f"Unhandled error in {name}", error=e)
                if log_requests:
                    duration_ms = (time.time() - start_time) * 1000
                    logger.log_lambda_end(name, False, duration_ms, error=str(e))
                raise

            if log_requests:
                duration_ms = (time.time() - start_time) * 1000
                success = not summary.get('failed') if isinstance(summary, dict) else True
                logger.log_lambda_end(name, success, duration_ms, summary=summary)

            return summary

        return wrapper
    return decorator
