"""
Configuration settings for Employee Hub.

Uses Pydantic Settings to load environment variables for the storage backend,
logging, listing defaults, and the validation policy switches.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from employee_hub.domain.validation import ValidationPolicy


class Settings(BaseSettings):
    # Storage
    storage_backend: Literal["sqlite", "postgres"] = Field("sqlite", alias="STORAGE_BACKEND")
    sqlite_path: str = Field("employee_hub.db", alias="SQLITE_PATH")

    # PostgreSQL (only used when STORAGE_BACKEND=postgres)
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("employee_hub", alias="DB_NAME")
    db_pool_min_size: int = Field(1, alias="DB_POOL_MIN_SIZE")
    db_pool_max_size: int = Field(4, alias="DB_POOL_MAX_SIZE")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")
    listing_order: Literal["first_name", "newest"] = Field("first_name", alias="LISTING_ORDER")

    # Validation policy
    email_required: bool = Field(True, alias="EMAIL_REQUIRED")
    phone_required: bool = Field(True, alias="PHONE_REQUIRED")
    address_required: bool = Field(True, alias="ADDRESS_REQUIRED")
    designation_required: bool = Field(True, alias="DESIGNATION_REQUIRED")
    names_letters_only: bool = Field(False, alias="NAMES_LETTERS_ONLY")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    def validation_policy(self) -> ValidationPolicy:
        """Build the validation policy from the requiredness switches."""
        return ValidationPolicy(
            email_required=self.email_required,
            phone_required=self.phone_required,
            address_required=self.address_required,
            designation_required=self.designation_required,
            names_letters_only=self.names_letters_only,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
