from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from client_identity import __version__
from client_identity.core.paths import ROOT_PATH

from .configs import (
    APIConfiguration,
    GeoConfiguration,
    LogConfiguration,
    ObservabilityConfiguration,
)


# noinspection PyArgumentList
class Configuration(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=ROOT_PATH / '.env',
        env_file_encoding='utf-8',
        extra='ignore',
    )

    app_name: str = Field('Client Identity', description='Application name')
    app_description: str = Field(
        'Client IP, geolocation and device resolution',
        description='Application description',
    )
    app_version: str = __version__
    app_environment: Literal['test', 'local', 'dev', 'qa', 'prod'] = Field(
        'local', description='Application environment', validation_alias='ENVIRONMENT'
    )

    api: APIConfiguration = Field(default_factory=APIConfiguration)
    geo: GeoConfiguration = Field(default_factory=GeoConfiguration)
    log: LogConfiguration = Field(default_factory=LogConfiguration)
    observability: ObservabilityConfiguration = Field(
        default_factory=ObservabilityConfiguration
    )

    @property
    def app_debug(self) -> bool:
        return self.app_environment in ['test', 'local', 'dev']


# noinspection PyArgumentList
@lru_cache
def get_config() -> Configuration:
    """
    Get cached application settings.
    """
    return Configuration()
