"""
Configuration Management for Finance Tracker

Everything the tracker reads from the environment or a .env file.

DESIGN DECISION: Storage is chosen here, not in code. The in-memory
backend needs no configuration at all; the Google Sheets settings are
only read once that backend is selected.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets document store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Service account key file used to reach the spreadsheet"
    )
    spreadsheet_id: str = Field(
        ...,
        description="Spreadsheet holding one worksheet per collection"
    )

    # Worksheet names within the spreadsheet, one per collection
    transactions_sheet_name: str = Field(
        default="Transactions",
        description="Name of the sheet for transactions"
    )
    categories_sheet_name: str = Field(
        default="Categories",
        description="Name of the sheet for categories"
    )
    accounts_sheet_name: str = Field(
        default="Accounts",
        description="Name of the sheet for accounts"
    )
    audit_sheet_name: str = Field(
        default="AuditLog",
        description="Worksheet for audit events"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """A missing file only warns; it may be mounted after startup."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Service account file {v} does not exist yet; "
                "connecting to Google Sheets will fail until it does."
            )
        return v

    def sheet_name_for(self, collection: str) -> str:
        """Worksheet title for a collection name."""
        names = {
            "transactions": self.transactions_sheet_name,
            "categories": self.categories_sheet_name,
            "accounts": self.accounts_sheet_name,
            "audit_log": self.audit_sheet_name,
        }
        return names.get(collection, collection)


class AppSettings(BaseSettings):
    """
    Settings every run needs, whatever the storage backend.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Deployment name, e.g. development or production"
    )
    debug_mode: bool = Field(
        default=False,
        description="Verbose logging for local runs"
    )

    # Storage
    storage_backend: Literal["memory", "google_sheets"] = Field(
        default="memory",
        description="Which document store to use"
    )
    owner_id: str = Field(
        default="local-user",
        min_length=1,
        description="Owner of the documents read and written by this instance"
    )

    # Lists
    recent_transactions_limit: int = Field(
        default=4,
        ge=1,
        le=50,
        description="How many transactions the recent list shows"
    )

    # Dates
    timezone: Optional[str] = Field(
        default=None,
        description="IANA timezone for calendar dates (host zone when unset)"
    )

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return None
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @property
    def tzinfo(self) -> Optional[ZoneInfo]:
        """Configured zone, or None to use the host zone."""
        return ZoneInfo(self.timezone) if self.timezone else None


class Settings(BaseSettings):
    """
    Entry point to all settings groups.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Each group is built on access, so an unused backend may stay unconfigured

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    The process-wide settings object.

    Cached; tests call ``get_settings.cache_clear()`` between cases.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Report which settings groups load, for the settings page.

    Maps group name to success, plus ``<group>_error`` on failure.
    Google Sheets is only checked when it is the configured backend.
    """
    results = {}

    settings = get_settings()

    try:
        app = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)
        return results

    if app.storage_backend == "google_sheets":
        try:
            _ = settings.google_sheets
            results["google_sheets"] = True
        except Exception as e:
            results["google_sheets"] = False
            results["google_sheets_error"] = str(e)

    return results
