from pydantic_settings import BaseSettings
from pydantic import field_validator, ValidationError
import sys


class Settings(BaseSettings):
    # MongoDB
    MONGO_URI: str = "mongodb://localhost:27017/"
    MONGO_DB: str = "gridstore"

    # GridFS bucket
    GRIDFS_BUCKET_NAME: str = "fs"
    GRIDFS_CHUNK_SIZE_BYTES: int = 255 * 1024
    GRIDFS_DISABLE_MD5: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    @field_validator('GRIDFS_CHUNK_SIZE_BYTES')
    @classmethod
    def validate_chunk_size(cls, v):
        if v < 1:
            raise ValueError('Chunk size must be at least 1 byte')
        return v

    @field_validator('GRIDFS_BUCKET_NAME')
    @classmethod
    def validate_bucket_name(cls, v):
        if not v:
            raise ValueError('Bucket name must not be empty')
        return v

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f'Unknown log level: {v}')
        return level

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


def load_settings() -> Settings:
    """Load settings with error handling and validation."""
    try:
        return Settings()
    except ValidationError as e:
        invalid_fields = []
        for error in e.errors():
            field_name = '.'.join(str(loc) for loc in error['loc'])
            invalid_fields.append(f"{field_name} ({error['msg']})")

        print(f"❌ Invalid configuration: {', '.join(invalid_fields)}")
        print("Please check your .env file and environment variables.")
        sys.exit(1)
    except Exception as e:
        print(f"❌ Error loading configuration: {e}")
        sys.exit(1)


settings = load_settings()
