from collections.abc import Mapping

from client_identity.core.configs import GeoConfiguration
from client_identity.core.logging import DebugTrace, get_logger
from client_identity.domain.common.utils import StringUtils

from .extractor import ClientIPExtractor
from .geo import LocationResolver
from .headers import as_headers
from .models import ClientInfo, ClientPayload, Location
from .user_agent import DeviceClassifier, UserAgentParser

logger = get_logger(__name__)


class ClientInfoResolver:
    """Assemble the :class:`ClientInfo` for one request.

    Explicit payload values always win over anything derived from headers.
    Nothing in here raises for missing or unresolvable data: the affected
    fields are simply left empty.
    """

    def __init__(
        self,
        config: GeoConfiguration,
        extractor: ClientIPExtractor,
        locations: LocationResolver,
        parser: UserAgentParser,
        devices: DeviceClassifier,
    ) -> None:
        self.extractor = extractor
        self.locations = locations
        self.parser = parser
        self.devices = devices
        self._trace = DebugTrace('GEO', config.debug)

    async def get_client_info(
        self,
        headers: Mapping[str, str] | None,
        payload: ClientPayload | None = None,
    ) -> ClientInfo:
        headers = as_headers(headers)
        payload = payload or ClientPayload()

        user_agent = payload.user_agent or headers.get('user-agent') or ''
        ip = payload.ip or self.extractor.extract_client_ip(headers)
        has_payload_ip = bool(payload.ip)

        self._trace('getClientInfo', ip=ip, has_payload_ip=has_payload_ip)

        location = await self._locate(ip, headers, has_payload_ip) or Location()
        country = StringUtils.safe_url_decode(location.country) or None
        region = StringUtils.safe_url_decode(location.region) or None
        city = StringUtils.safe_url_decode(location.city) or None

        self._trace('Final result', country=country, region=region, city=city)

        parsed = self.parser.parse(user_agent)
        browser = payload.browser
        if browser is None:
            browser = parsed.browser_name
        os_name = payload.os
        if os_name is None:
            os_name = parsed.os_name

        device = payload.device or self.devices.get_device(user_agent, payload.screen)

        return ClientInfo(
            user_agent=user_agent,
            browser=browser,
            os=os_name,
            ip=ip,
            country=country,
            region=region,
            city=city,
            device=device,
        )

    async def _locate(
        self, ip: str | None, headers: Mapping[str, str], has_payload_ip: bool
    ) -> Location | None:
        try:
            return await self.locations.get_location(ip, headers, has_payload_ip)
        except Exception:
            logger.exception(f'Location lookup failed for {ip}')
            return None
