"""
AWS error handling utilities for photo-backup-service
"""
import json
from typing import Dict, Any
from botocore.exceptions import ClientError, BotoCoreError
from .constants import HTTPConstants
from .exceptions import ServiceError
from .logger import logger
from .utils import create_response


def client_error_code(error: Exception) -> str:
    """Extract the AWS error code from a botocore ClientError"""
    if isinstance(error, ClientError):
        return error.response.get('Error', {}).get('Code', 'Unknown')
    return 'Unknown'


class AWSErrorHandler:
    """
    Centralized AWS error handling for photo-backup-service
    """

    @staticmethod
    def handle_dynamodb_error(error: Exception, operation: str, table_name: str = None) -> Dict[str, Any]:
        """
        Handle DynamoDB-related errors

        Args:
            error: The exception that occurred
            operation: The operation being performed
            table_name: Optional table name for context

        Returns:
            Standardized error response
        """
        error_context = {
            'operation': operation,
            'table_name': table_name or 'unknown',
            'error_type': type(error).__name__,
            'error_message': str(error)
        }

        error_code = client_error_code(error)
        error_context['aws_error_code'] = error_code

        if error_code in ['ThrottlingException', 'ProvisionedThroughputExceededException']:
            logger.warning("DynamoDB throttled", **error_context)
            return {
                'success': False,
                'error_type': 'ThrottlingError',
                'error_message': 'Database is temporarily busy. Please try again.',
                'status_code': HTTPConstants.TOO_MANY_REQUESTS,
                'retryable': True
            }

        if error_code == 'ConditionalCheckFailedException':
            logger.info("DynamoDB condition not met", **error_context)
            return {
                'success': False,
                'error_type': 'ConditionFailed',
                'error_message': 'The item does not satisfy the update condition',
                'status_code': HTTPConstants.BAD_REQUEST,
                'retryable': False
            }

        if error_code in ['ResourceNotFoundException', 'ValidationException']:
            logger.error("DynamoDB request rejected", error=error, **error_context)
            return {
                'success': False,
                'error_type': 'DatabaseError',
                'error_message': f'Database request rejected: {error_code}',
                'status_code': HTTPConstants.INTERNAL_SERVER_ERROR,
                'retryable': False
            }

        if isinstance(error, (ClientError, BotoCoreError)):
            logger.error(f"DynamoDB operation failed: {operation}", error=error, **error_context)
            return {
                'success': False,
                'error_type': 'DatabaseError',
                'error_message': f'Database operation failed: {operation}',
                'status_code': HTTPConstants.INTERNAL_SERVER_ERROR,
                'retryable': True
            }

        logger.error("Unexpected database error", error=error, **error_context)
        return {
            'success': False,
            'error_type': 'DatabaseError',
            'error_message': 'Unexpected database error occurred',
            'status_code': HTTPConstants.INTERNAL_SERVER_ERROR,
            'retryable': False
        }

    @staticmethod
    def handle_s3_error(error: Exception, operation: str, bucket_name: str = None, key: str = None) -> Dict[str, Any]:
        """
        Handle S3-related errors

        Args:
            error: The exception that occurred
            operation: The operation being performed
            bucket_name: Optional bucket name for context
            key: Optional S3 key for context

        Returns:
            Standardized error response
        """
        error_context = {
            'operation': operation,
            'bucket_name': bucket_name or 'unknown',
            's3_key': key or 'unknown',
            'error_type': type(error).__name__,
            'error_message': str(error)
        }

        error_code = client_error_code(error)
        error_context['aws_error_code'] = error_code
        logger.error("S3 error", error=error, **error_context)

        if error_code in ['NoSuchKey', 'NoSuchUpload', 'NoSuchBucket']:
            return {
                'success': False,
                'error_type': 'FileNotFound',
                'error_message': 'File not found in storage',
                'status_code': HTTPConstants.NOT_FOUND,
                'retryable': False
            }
        if error_code in ['InvalidPart', 'InvalidPartOrder', 'EntityTooSmall', 'MalformedXML']:
            return {
                'success': False,
                'error_type': 'InvalidUpload',
                'error_message': f'Upload could not be completed: {error_code}',
                'status_code': HTTPConstants.BAD_REQUEST,
                'retryable': False
            }
        if error_code == 'AccessDenied':
            return {
                'success': False,
                'error_type': 'AccessDenied',
                'error_message': 'Access denied to storage resource',
                'status_code': HTTPConstants.FORBIDDEN,
                'retryable': False
            }
        if error_code in ['SlowDown', 'RequestLimitExceeded']:
            return {
                'success': False,
                'error_type': 'ThrottlingError',
                'error_message': 'Storage service is busy. Please try again.',
                'status_code': HTTPConstants.TOO_MANY_REQUESTS,
                'retryable': True
            }
        return {
            'success': False,
            'error_type': 'StorageError',
            'error_message': f'Storage error: {error_code}',
            'status_code': HTTPConstants.INTERNAL_SERVER_ERROR,
            'retryable': True
        }

    @staticmethod
    def handle_cognito_error(error: Exception, operation: str) -> Dict[str, Any]:
        """
        Handle Cognito identity provider errors

        Args:
            error: The exception that occurred
            operation: The operation being performed

        Returns:
            Standardized error response
        """
        error_code = client_error_code(error)
        error_context = {
            'operation': operation,
            'aws_error_code': error_code,
            'error_type': type(error).__name__,
            'error_message': str(error)
        }

        if error_code in ['NotAuthorizedException', 'UserNotFoundException', 'UserNotConfirmedException',
                          'PasswordResetRequiredException']:
            logger.warning("Cognito rejected credentials", **error_context)
            return {
                'success': False,
                'error_type': 'Unauthorized',
                'error_message': 'Unauthorized',
                'status_code': HTTPConstants.UNAUTHORIZED,
                'retryable': False
            }
        if error_code in ['TooManyRequestsException', 'LimitExceededException']:
            logger.warning("Cognito throttled", **error_context)
            return {
                'success': False,
                'error_type': 'ThrottlingError',
                'error_message': 'Too many requests. Please try again.',
                'status_code': HTTPConstants.TOO_MANY_REQUESTS,
                'retryable': True
            }
        if error_code in ['InvalidParameterException', 'InvalidPasswordException']:
            logger.info("Cognito rejected parameters", **error_context)
            return {
                'success': False,
                'error_type': 'ValidationError',
                'error_message': str(error),
                'status_code': HTTPConstants.BAD_REQUEST,
                'retryable': False
            }

        logger.error("Cognito error", error=error, **error_context)
        return {
            'success': False,
            'error_type': 'IdentityProviderError',
            'error_message': f'Identity provider error: {error_code}',
            'status_code': HTTPConstants.INTERNAL_SERVER_ERROR,
            'retryable': True
        }

    @staticmethod
    def handle_rekognition_error(error: Exception, operation: str, collection_id: str = None) -> Dict[str, Any]:
        """
        Handle Rekognition face collection errors

        Args:
            error: The exception that occurred
            operation: The operation being performed
            collection_id: Optional collection id for context

        Returns:
            Standardized error response
        """
        error_code = client_error_code(error)
        error_context = {
            'operation': operation,
            'collection_id': collection_id or 'unknown',
            'aws_error_code': error_code,
            'error_type': type(error).__name__,
            'error_message': str(error)
        }

        if error_code in ['ResourceNotFoundException', 'InvalidS3ObjectException']:
            logger.warning("Rekognition resource not found", **error_context)
            return {
                'success': False,
                'error_type': 'NotFound',
                'error_message': f'Face collection resource not found: {error_code}',
                'status_code': HTTPConstants.NOT_FOUND,
                'retryable': False
            }
        if error_code in ['InvalidParameterException', 'InvalidImageFormatException', 'ImageTooLargeException']:
            logger.warning("Rekognition rejected input", **error_context)
            return {
                'success': False,
                'error_type': 'ValidationError',
                'error_message': f'Image cannot be analyzed: {error_code}',
                'status_code': HTTPConstants.BAD_REQUEST,
                'retryable': False
            }
        if error_code in ['ThrottlingException', 'ProvisionedThroughputExceededException']:
            logger.warning("Rekognition throttled", **error_context)
            return {
                'success': False,
                'error_type': 'ThrottlingError',
                'error_message': 'Face service is busy. Please try again.',
                'status_code': HTTPConstants.TOO_MANY_REQUESTS,
                'retryable': True
            }

        logger.error("Rekognition error", error=error, **error_context)
        return {
            'success': False,
            'error_type': 'FaceServiceError',
            'error_message': f'Face service error: {error_code}',
            'status_code': HTTPConstants.INTERNAL_SERVER_ERROR,
            'retryable': True
        }

    @staticmethod
    def handle_exception(error: Exception) -> Dict[str, Any]:
        """
        Map any exception raised by a handler to an error response dict.
        Service errors carry their own status; anything else is a 500 with
        the error message attached.
        """
        if isinstance(error, ServiceError):
            level = logger.error if error.status_code >= HTTPConstants.INTERNAL_SERVER_ERROR else logger.info
            level(f"Service error: {error.message}", error_code=error.error_code, details=error.details)
            error_data = {
                'success': False,
                'error_type': type(error).__name__,
                'error_message': error.message,
                'status_code': error.status_code,
                'retryable': error.status_code == HTTPConstants.TOO_MANY_REQUESTS
            }
            if error.details:
                error_data['details'] = error.details
            return error_data

        logger.error("Unhandled error", error=error)
        return {
            'success': False,
            'error_type': 'InternalServerError',
            'error_message': 'Internal server error',
            'status_code': HTTPConstants.INTERNAL_SERVER_ERROR,
            'retryable': False,
            'error': str(error)
        }

    @staticmethod
    def create_lambda_error_response(error_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create Lambda-compatible error response

        Args:
            error_data: Error data from handle_* methods

        Returns:
            Lambda proxy integration response
        """
        response_body = {
            'success': False,
            'message': error_data['error_message'],
            'error_type': error_data['error_type'],
            'retryable': error_data.get('retryable', False)
        }

        if 'details' in error_data:
            response_body['details'] = error_data['details']
        if 'error' in error_data:
            response_body['error'] = error_data['error']

        return create_response(error_data['status_code'], json.dumps(response_body, default=str))


# Global error handler instance
error_handler = AWSErrorHandler()
