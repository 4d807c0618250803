"""
Configuration settings for the Trip Booking API
"""

import logging
from typing import List, Optional, Dict, Any
from enum import Enum
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings


class Environment(str, Enum):
    """Supported environment types"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Supported log levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class OverlapMode(str, Enum):
    """How a proposed stay is compared against existing reservations"""
    CONTAINMENT = "containment"
    INTERSECTION = "intersection"


class Settings(BaseSettings):
    """Application settings loaded from environment variables with validation"""

    # API Configuration
    API_TITLE: str = Field(default="Trip Booking API", description="API title")
    API_VERSION: str = Field(default="1.0.0", description="API version")
    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=8000, ge=1, le=65535, description="API port")

    # CORS Configuration (stored as string, parsed to list)
    CORS_ORIGINS_STR: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)",
        alias="CORS_ORIGINS"
    )

    # Request Configuration
    REQUEST_TIMEOUT: int = Field(
        default=10,
        ge=1,
        le=300,
        description="Timeout in seconds for a single storage operation"
    )

    # Logging Configuration
    LOG_LEVEL: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level"
    )

    # Reservation Configuration
    RESERVATION_OVERLAP_MODE: OverlapMode = Field(
        default=OverlapMode.CONTAINMENT,
        description="Conflict test used by the reservation check endpoint"
    )

    # Storage Configuration
    SEED_DATA_PATH: Optional[str] = Field(
        default=None,
        description="JSON file with trips and reservations loaded at startup"
    )

    # Environment Configuration
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment"
    )

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Get CORS origins as a list"""
        return [origin.strip() for origin in self.CORS_ORIGINS_STR.split(',') if origin.strip()]

    @field_validator('LOG_LEVEL', mode='before')
    @classmethod
    def validate_log_level(cls, v) -> str:
        """Validate and normalize log level"""
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator('RESERVATION_OVERLAP_MODE', 'ENVIRONMENT', mode='before')
    @classmethod
    def normalize_lowercase_enums(cls, v) -> str:
        """Accept enum values regardless of case"""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator('SEED_DATA_PATH', mode='before')
    @classmethod
    def blank_seed_path_is_none(cls, v):
        """Treat an empty seed path as unset"""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode='after')
    def validate_environment_specific_settings(self) -> 'Settings':
        """Validate environment-specific configuration"""
        if self.ENVIRONMENT == Environment.PRODUCTION:
            if any('localhost' in origin for origin in self.CORS_ORIGINS):
                logging.warning(
                    "Production environment detected with localhost CORS origins. "
                    "Consider updating CORS_ORIGINS for production."
                )

            if self.LOG_LEVEL == LogLevel.DEBUG:
                logging.warning(
                    "DEBUG log level detected in production environment. "
                    "Consider using INFO or WARNING for production."
                )

            if self.SEED_DATA_PATH is None:
                logging.warning(
                    "No SEED_DATA_PATH configured in production; "
                    "the trip store will start empty."
                )

        return self

    def get_environment_config(self) -> Dict[str, Any]:
        """Get environment-specific configuration"""
        base_config = {
            'api_title': self.API_TITLE,
            'api_version': self.API_VERSION,
            'environment': self.ENVIRONMENT,
            'debug': self.ENVIRONMENT == Environment.DEVELOPMENT,
            'testing': self.ENVIRONMENT == Environment.STAGING,
        }

        if self.ENVIRONMENT == Environment.PRODUCTION:
            base_config.update({
                'log_level': LogLevel.INFO.value,
                'enable_docs': False,  # Disable API docs in production
                'enable_redoc': False,
            })
        else:
            base_config.update({
                'log_level': self.LOG_LEVEL,
                'enable_docs': True,
                'enable_redoc': True,
            })

        return base_config

    def get_reservation_config(self) -> Dict[str, Any]:
        """Get reservation check configuration"""
        return {
            'overlap_mode': self.RESERVATION_OVERLAP_MODE,
            'timeout': self.REQUEST_TIMEOUT,
        }

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "validate_assignment": True,
        "use_enum_values": True,
        "validate_default": True,
        "env_parse_none_str": "None",
        "extra": "ignore",
    }


def get_settings() -> Settings:
    """Get validated settings instance"""
    return Settings()


# Global settings instance - will be initialized when first accessed
settings: Optional[Settings] = None


def get_global_settings() -> Settings:
    """Get or create global settings instance"""
    global settings
    if settings is None:
        settings = get_settings()
    return settings
