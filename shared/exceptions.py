"""
Photo Backup Service Exceptions
Custom exception classes for service operations
"""
from .constants import HTTPConstants


class ServiceError(Exception):
    """Base exception for all photo backup service errors"""

    status_code = HTTPConstants.INTERNAL_SERVER_ERROR

    def __init__(self, message: str, error_code: str = None, details: dict = None, status_code: int = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert exception to dictionary for API responses"""
        result = {
            'error': self.__class__.__name__,
            'message': self.message
        }
        if self.error_code:
            result['error_code'] = self.error_code
        if self.details:
            result['details'] = self.details
        return result


class ValidationError(ServiceError):
    """Raised when input validation fails"""

    status_code = HTTPConstants.BAD_REQUEST

    def __init__(self, message: str, field: str = None, value: str = None):
        self.field = field
        self.value = value

        details = {}
        if field:
            details['field'] = field
        if value:
            details['value'] = value

        super().__init__(message, 'VALIDATION_ERROR', details)


class EntityNotFoundError(ServiceError):
    """Raised when an entity is not found"""

    status_code = HTTPConstants.NOT_FOUND

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id

        message = f"{entity_type.capitalize()} not found"
        details = {
            'entity_type': entity_type,
            'entity_id': entity_id
        }

        super().__init__(message, 'ENTITY_NOT_FOUND', details)


class DuplicateEntityError(ServiceError):
    """Raised when attempting to create a duplicate entity"""

    status_code = HTTPConstants.CONFLICT

    def __init__(self, entity_type: str, field: str, value: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value

        message = f"An {entity_type} with this {field} already exists"
        details = {
            'entity_type': entity_type,
            'field': field,
            'value': value
        }

        super().__init__(message, 'DUPLICATE_ENTITY', details)


class ImageProcessingError(ServiceError):
    """Raised when image processing fails"""

    def __init__(self, message: str, operation: str = None, original_error: str = None):
        self.operation = operation
        self.original_error = original_error

        details = {}
        if operation:
            details['operation'] = operation
        if original_error:
            details['original_error'] = original_error

        super().__init__(message, 'IMAGE_PROCESSING_ERROR', details)


class S3OperationError(ServiceError):
    """Raised when S3 operations fail"""

    def __init__(self, message: str, operation: str = None, bucket: str = None, key: str = None, status_code: int = None):
        self.operation = operation
        self.bucket = bucket
        self.key = key

        details = {}
        if operation:
            details['operation'] = operation
        if bucket:
            details['bucket'] = bucket
        if key:
            details['key'] = key

        super().__init__(message, 'S3_OPERATION_ERROR', details, status_code)


class DynamoDBError(ServiceError):
    """Raised when DynamoDB operations fail"""

    def __init__(self, message: str, operation: str = None, table: str = None, original_error: str = None, status_code: int = None):
        self.operation = operation
        self.table = table
        self.original_error = original_error

        details = {}
        if operation:
            details['operation'] = operation
        if table:
            details['table'] = table
        if original_error:
            details['original_error'] = original_error

        super().__init__(message, 'DYNAMODB_ERROR', details, status_code)


class ConfigurationError(ServiceError):
    """Raised when configuration is invalid or missing"""

    def __init__(self, message: str, config_key: str = None):
        self.config_key = config_key

        details = {}
        if config_key:
            details['config_key'] = config_key

        super().__init__(message, 'CONFIGURATION_ERROR', details)


class AuthenticationError(ServiceError):
    """Raised when the access token is missing, invalid or expired"""

    status_code = HTTPConstants.UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, 'AUTHENTICATION_ERROR')


class AuthorizationError(ServiceError):
    """Raised when a user touches rows that are not theirs"""

    status_code = HTTPConstants.FORBIDDEN

    def __init__(self, message: str = "Access denied", resource: str = None):
        self.resource = resource

        details = {}
        if resource:
            details['resource'] = resource

        super().__init__(message, 'AUTHORIZATION_ERROR', details)


class RateLimitExceededError(ServiceError):
    """Raised when a managed service keeps throttling after all retries"""

    status_code = HTTPConstants.TOO_MANY_REQUESTS

    def __init__(self, message: str = "Rate limit exceeded", retries: int = None):
        self.retries = retries

        details = {}
        if retries:
            details['retries'] = retries

        super().__init__(message, 'RATE_LIMIT_EXCEEDED', details)


class RekognitionError(ServiceError):
    """Raised when a face collection call fails"""

    def __init__(self, message: str, operation: str = None, collection_id: str = None, status_code: int = None):
        self.operation = operation
        self.collection_id = collection_id

        details = {}
        if operation:
            details['operation'] = operation
        if collection_id:
            details['collection_id'] = collection_id

        super().__init__(message, 'REKOGNITION_ERROR', details, status_code)
