"""
Photo Backup Service Constants
"""


class HTTPConstants:
    """HTTP status codes and headers"""

    # Status codes
    OK = 200
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    TOO_MANY_REQUESTS = 429
    INTERNAL_SERVER_ERROR = 500

    # Headers
    CONTENT_TYPE = 'Content-Type'
    AUTHORIZATION = 'Authorization'

    # MIME types
    JSON = 'application/json'


class KeyConstants:
    """Single-table key prefixes"""

    ALBUM_PREFIX = 'ALBUM#'
    IMAGE_PREFIX = 'IMAGE#'
    FACE_PREFIX = 'FACE#'


class MediaConstants:
    """File types handled by thumbnailing and face indexing"""

    IMAGE_EXTENSIONS = ['jpg', 'jpeg', 'png', 'gif', 'webp', 'bmp', 'tif', 'tiff', 'heic']
    VIDEO_EXTENSIONS = ['mp4', 'mov', 'avi', 'mkv', 'webm', 'm4v', '3gp']

    # Rekognition only accepts these
    FACE_INDEX_EXTENSIONS = ['jpg', 'jpeg', 'png']

    THUMBNAIL_FORMAT = 'JPEG'
    THUMBNAIL_CONTENT_TYPE = 'image/jpeg'
    THUMBNAIL_QUALITY = 85


class BatchConstants:
    """AWS batch limits"""

    DYNAMODB_BATCH_GET_SIZE = 100
    S3_DELETE_BATCH_SIZE = 1000
    REKOGNITION_DELETE_FACES_SIZE = 4096
    S3_MAX_PARTS = 10000


class AuthConstants:
    """Cognito flow names and retry timing"""

    USER_PASSWORD_AUTH = 'USER_PASSWORD_AUTH'
    NEW_PASSWORD_REQUIRED = 'NEW_PASSWORD_REQUIRED'
    SUB_ATTRIBUTE = 'sub'

    RETRY_BASE_DELAY_SECONDS = 0.25
