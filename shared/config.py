"""
Configuration management for photo-backup-service
Supports environment variables, SSM Parameter Store, and local .env files
"""
import os
import json
from typing import Optional, Any
from functools import lru_cache
import boto3
from botocore.exceptions import ClientError, NoCredentialsError
from dotenv import load_dotenv

# Local development: pick up a .env file next to the working directory
load_dotenv(override=False)


class Config:
    """
    Configuration manager with hybrid approach:
    1. Environment Variables (highest priority)
    2. AWS Parameter Store (environment-specific)
    3. Local defaults (development fallback)
    """

    def __init__(self):
        self.environment = os.environ.get('ENVIRONMENT', 'dev')
        self.parameter_store_prefix = os.environ.get(
            'PARAMETER_STORE_PREFIX',
            f'/photo-backup/{self.environment}/service'
        )
        self.use_parameter_store = os.environ.get('USE_PARAMETER_STORE', 'true').lower() == 'true'
        self._ssm_client = None

    @property
    def ssm_client(self):
        """Lazy initialization of SSM client"""
        if self._ssm_client is None:
            try:
                self._ssm_client = boto3.client('ssm', region_name=self.aws_region)
            except NoCredentialsError:
                # For local development or testing without AWS credentials
                self._ssm_client = None
        return self._ssm_client

    def get_parameter(self, key: str, default: Any = None) -> Any:
        """
        Get configuration parameter with fallback hierarchy:
        1. Environment variable (PHOTO_BACKUP_ prefixed, then plain)
        2. SSM Parameter Store
        3. Default value
        """
        env_name = key.upper().replace('-', '_')

        env_value = os.environ.get(f"PHOTO_BACKUP_{env_name}")
        if env_value is not None:
            return env_value

        env_value = os.environ.get(env_name)
        if env_value is not None:
            return env_value

        if self.use_parameter_store:
            ssm_value = self.get_ssm_parameter(key)
            if ssm_value is not None:
                return ssm_value

        return default

    @lru_cache(maxsize=128)
    def get_ssm_parameter(self, key: str) -> Optional[str]:
        """
        Get parameter from AWS SSM Parameter Store with caching
        """
        if not self.ssm_client:
            return None

        parameter_name = f"{self.parameter_store_prefix}/{key}"

        try:
            response = self.ssm_client.get_parameter(Name=parameter_name)
            return response['Parameter']['Value']
        except ClientError as e:
            if e.response['Error']['Code'] != 'ParameterNotFound':
                print(f"Error getting SSM parameter {parameter_name}: {e}")
            return None
        except NoCredentialsError as e:
            print(f"No credentials to read SSM parameter {parameter_name}: {e}")
            return None

    def get_int_parameter(self, key: str, default: int = 0) -> int:
        """Get integer parameter"""
        value = self.get_parameter(key, default)
        try:
            return int(value)
        except (ValueError, TypeError):
            return default

    def get_bool_parameter(self, key: str, default: bool = False) -> bool:
        """Get boolean parameter"""
        value = self.get_parameter(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ('true', '1', 'yes', 'on')
        return default

    def get_json_parameter(self, key: str, default: dict = None) -> dict:
        """Get JSON parameter"""
        value = self.get_parameter(key)
        if value is None:
            return default or {}

        try:
            if isinstance(value, str):
                return json.loads(value)
            return value
        except (json.JSONDecodeError, TypeError):
            return default or {}

    def get_list_parameter(self, key: str, default: list = None, separator: str = ',') -> list:
        """Get list parameter (comma-separated string)"""
        value = self.get_parameter(key)
        if value is None:
            return default or []

        if isinstance(value, list):
            return value

        if isinstance(value, str):
            return [item.strip() for item in value.split(separator) if item.strip()]

        return default or []

    # Common configuration getters
    @property
    def aws_region(self) -> str:
        """AWS region, as set by the Lambda runtime"""
        return os.environ.get('AWS_REGION') or os.environ.get('AWS_DEFAULT_REGION', 'us-east-1')

    @property
    def table_name(self) -> str:
        """Single table holding media, album and face rows"""
        return self.get_parameter('dynamodb-table', f'PhotoBackup-{self.environment}')

    @property
    def upload_bucket_name(self) -> str:
        """Bucket receiving original uploads"""
        return self.get_parameter('upload-bucket-name', f'photo-backup-uploads-{self.environment}')

    @property
    def thumbnail_bucket_name(self) -> str:
        """Bucket receiving generated thumbnails"""
        return self.get_parameter('thumbnail-bucket-name', f'photo-backup-thumbnails-{self.environment}')

    @property
    def user_pool_client_id(self) -> Optional[str]:
        """Cognito app client used for USER_PASSWORD_AUTH"""
        return self.get_parameter('user-pool-client-id')

    @property
    def thumbnail_width(self) -> int:
        """Thumbnail width in pixels (height follows aspect ratio)"""
        return self.get_int_parameter('thumbnail-width', 200)

    @property
    def max_thumbnail_source_size(self) -> int:
        """Largest original we attempt to thumbnail, in bytes"""
        return self.get_int_parameter('max-thumbnail-source-size', 50 * 1024 * 1024)  # 50MB

    @property
    def download_url_expiry(self) -> int:
        """Presigned download URL expiry in seconds"""
        return self.get_int_parameter('download-url-expiry', 24 * 60 * 60)  # 24 hours

    @property
    def upload_part_url_expiry(self) -> int:
        """Presigned multipart part URL expiry in seconds"""
        return self.get_int_parameter('upload-part-url-expiry', 60 * 60)  # 1 hour

    @property
    def page_size(self) -> int:
        """Items per page for media and album queries"""
        return self.get_int_parameter('page-size', 100)

    @property
    def index_max_faces(self) -> int:
        return self.get_int_parameter('index-max-faces', 10)

    @property
    def face_match_max_faces(self) -> int:
        return self.get_int_parameter('face-match-max-faces', 5)

    @property
    def face_rename_max_faces(self) -> int:
        return self.get_int_parameter('face-rename-max-faces', 20)

    @property
    def auth_max_retries(self) -> int:
        """Retries for rate-limited Cognito GetUser calls"""
        return self.get_int_parameter('auth-max-retries', 5)

    @property
    def enable_debug_logging(self) -> bool:
        """Get debug logging flag"""
        return self.get_bool_parameter('enable-debug-logging', False)

    @property
    def cors_allowed_origin(self) -> str:
        """Value for Access-Control-Allow-Origin"""
        return self.get_parameter('allowed-origin', '*')


# Global configuration instance
config = Config()


def get_config() -> Config:
    """Get global configuration instance"""
    return config
