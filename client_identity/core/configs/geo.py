from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from client_identity.core.paths import GEO_DATABASE_PATH, ROOT_PATH

_FALSY_FLAGS = {'', '0', 'false', 'no', 'off'}


# noinspection PyNestedDecorators
class GeoConfiguration(BaseSettings):
    """Client IP and geolocation resolution configuration."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=ROOT_PATH / '.env',
        env_file_encoding='utf-8',
        extra='ignore',
        populate_by_name=True,
    )

    client_ip_header: str | None = Field(
        None,
        description='Header trusted verbatim for the client IP',
        validation_alias='CLIENT_IP_HEADER',
    )
    debug: bool = Field(
        False,
        description='Trace header and database decisions',
        validation_alias='DEBUG_GEO',
    )
    skip_location_headers: bool = Field(
        False,
        description='Ignore CDN geolocation headers',
        validation_alias='SKIP_LOCATION_HEADERS',
    )
    database_path: Path | None = Field(
        None,
        description='GeoLite2 City database file',
        validation_alias='GEOLITE_DB_PATH',
    )
    ignore_ip: str = Field(
        '',
        description='Comma-separated IPs and CIDR ranges to ignore',
        validation_alias='IGNORE_IP',
    )

    @property
    def resolved_database_path(self) -> Path:
        return self.database_path or GEO_DATABASE_PATH

    @field_validator('debug', 'skip_location_headers', mode='before')
    @classmethod
    def parse_flag(cls, value: Any) -> bool:
        """Any non-empty value enables a flag unless it reads as false."""
        if isinstance(value, str):
            return value.strip().lower() not in _FALSY_FLAGS
        return bool(value)

    @field_validator('client_ip_header', mode='before')
    @classmethod
    def normalize_header_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip().lower()
        return value or None

    @field_validator('database_path', mode='before')
    @classmethod
    def empty_path_is_default(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value
