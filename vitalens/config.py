"""
Application configuration settings loaded from environment variables.
Uses pydantic_settings for validation and type conversion.
"""
from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings
from typing import Optional


class StorageKeys(BaseModel):
    """
    Key names under which each record collection is stored.

    Each key holds a JSON array of records. The defaults match the keys used
    by the browser build, so exported data can be loaded unchanged.
    """
    users: str = "emr-users"
    patients: str = "emr-patients"
    appointments: str = "emr-appointments"
    prescriptions: str = "emr-prescriptions"
    analyses: str = "emr-analyses"


class Settings(BaseSettings):
    """
    Application settings class with environment variable validation.

    Attributes:
        database_url: SQLAlchemy URL of the key-value store database
        secret_key: Secret key for JWT token encoding
        algorithm: Algorithm used for JWT encoding (typically HS256)
        access_token_expire_minutes: Access token expiration time in minutes
        bcrypt_rounds: Cost factor for password hashing

        # Storage keys
        users_key ... analyses_key: Key of each record collection

        # Generative model settings
        gemini_api_key: API key for the Gemini API (GEMINI_API_KEY or GOOGLE_API_KEY)
        gemini_base_url: Base URL of the Gemini REST API
        text_model: Model used for structured text analysis
        image_model: Model used for image highlighting
        ai_request_timeout: Transport timeout for a single model call, in seconds

        # Frontend settings
        frontend_url: URL of the frontend application
    """
    # Database settings
    database_url: str = "sqlite:///./vitalens.db"

    # JWT settings
    secret_key: str = "change-this-secret-key"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 12

    # Password hashing
    bcrypt_rounds: int = 12

    # Storage keys
    users_key: str = "emr-users"
    patients_key: str = "emr-patients"
    appointments_key: str = "emr-appointments"
    prescriptions_key: str = "emr-prescriptions"
    analyses_key: str = "emr-analyses"

    # Generative model settings
    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("gemini_api_key", "google_api_key"),
    )
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    text_model: str = "gemini-2.0-flash"
    image_model: str = "gemini-2.0-flash-preview-image-generation"
    ai_request_timeout: float = 120.0

    # Frontend settings
    frontend_url: str = "http://localhost:9002"

    class Config:
        """Configuration for environment variables loading"""
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    @property
    def storage_keys(self) -> StorageKeys:
        return StorageKeys(
            users=self.users_key,
            patients=self.patients_key,
            appointments=self.appointments_key,
            prescriptions=self.prescriptions_key,
            analyses=self.analyses_key,
        )

# Create settings instance
settings = Settings()
