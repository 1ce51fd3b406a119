"""Client identity domain models."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Location(BaseModel):
    """Where a client appears to be; every part is optional."""

    model_config = ConfigDict(frozen=True)

    country: str | None = None
    region: str | None = None
    city: str | None = None

    @staticmethod
    def region_code(country: str | None, region: str | None) -> str | None:
        """Qualify a bare subdivision code with its country (``US-06``)."""
        if not country or not region:
            return None

        return region if '-' in region else f'{country}-{region}'

    @classmethod
    def build(
        cls, country: str | None, region: str | None, city: str | None
    ) -> 'Location':
        return cls(
            country=country, region=cls.region_code(country, region), city=city
        )


class ClientPayload(BaseModel):
    """Values a caller supplies explicitly; each one overrides detection."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra='ignore'
    )

    ip: str | None = None
    user_agent: str | None = None
    browser: str | None = None
    os: str | None = None
    device: str | None = None
    screen: str | None = None


class ClientInfo(BaseModel):
    """Identity attributes resolved for a single request."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    user_agent: str = ''
    browser: str | None = None
    os: str | None = None
    ip: str | None = None
    country: str | None = None
    region: str | None = None
    city: str | None = None
    device: str = Field('desktop', min_length=1)
