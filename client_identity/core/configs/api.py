import re
from ipaddress import ip_address

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from client_identity.core.paths import ROOT_PATH


# noinspection PyNestedDecorators
class APIConfiguration(BaseSettings):
    """HTTP server configuration."""

    _HOSTNAME_LABEL = re.compile(r'^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$')

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=ROOT_PATH / '.env',
        env_file_encoding='utf-8',
        env_prefix='API_',
        extra='ignore',
    )

    host: str = Field(
        default='127.0.0.1', description='API server bind address (IP or hostname)'
    )
    port: int = Field(
        default=8080, ge=1, le=65535, description='API server port number'
    )

    @field_validator('host')
    @classmethod
    def validate_host(cls, value: str) -> str:
        try:
            ip_address(value)
            return value
        except ValueError:
            pass

        if not value or len(value) > 253:
            msg = f'invalid hostname length: {value}'
            raise ValueError(msg)

        invalid_labels = [
            label for label in value.split('.') if not cls._HOSTNAME_LABEL.match(label)
        ]
        if invalid_labels:
            msg = f'invalid hostname "{value}": invalid labels {invalid_labels}'
            raise ValueError(msg)

        return value
