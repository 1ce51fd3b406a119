import re
from dataclasses import dataclass
from typing import ClassVar

from user_agents import parse as parse_ua

from client_identity.domain.common.utils import IntUtils, StringUtils

DESKTOP = 'desktop'
LAPTOP = 'laptop'
LAPTOP_MAX_WIDTH = 1920


@dataclass(frozen=True)
class ParsedUserAgent:
    browser_name: str | None = None
    os_name: str | None = None
    device_type: str | None = None


class UserAgentParser:
    """Reduce a user-agent string to browser, OS and device type names."""

    BROWSER_NAMES: ClassVar = {
        'Android': 'android',
        'Chrome': 'chrome',
        'Chrome Mobile': 'chrome',
        'Chrome Mobile iOS': 'crios',
        'Chrome Mobile WebView': 'chromium-webview',
        'Chromium': 'chromium-webview',
        'Facebook': 'facebook',
        'Firefox': 'firefox',
        'Firefox Mobile': 'firefox',
        'Firefox iOS': 'fxios',
        'IE': 'ie',
        'IE Mobile': 'ie',
        'Instagram': 'instagram',
        'Mobile Safari': 'ios',
        'Mobile Safari UI/WKWebView': 'ios-webview',
        'Opera': 'opera',
        'Opera Mini': 'opera-mini',
        'Safari': 'safari',
        'Samsung Internet': 'samsung',
        'Silk': 'silk',
        'Yandex Browser': 'yandexbrowser',
    }

    OS_NAMES: ClassVar = {
        'Android': 'Android OS',
        'BlackBerry OS': 'BlackBerry OS',
        'Chrome OS': 'Chrome OS',
        'Fedora': 'Linux',
        'FreeBSD': 'FreeBSD',
        'Linux': 'Linux',
        'Mac OS X': 'Mac OS',
        'OpenBSD': 'Open BSD',
        'Solaris': 'Sun OS',
        'Ubuntu': 'Linux',
        'Windows Phone': 'Windows Mobile',
        'iOS': 'iOS',
    }

    _CONSOLE_RE = re.compile(r'PlayStation|Xbox|Nintendo', re.IGNORECASE)
    _SMART_TV_RE = re.compile(
        r'Smart-?TV|GoogleTV|AppleTV|HbbTV|Tizen.+TV|Web0S', re.IGNORECASE
    )
    _WEARABLE_RE = re.compile(r'Watch', re.IGNORECASE)

    def parse(self, user_agent: str | None) -> ParsedUserAgent:
        if not user_agent:
            return ParsedUserAgent()

        ua = parse_ua(user_agent)
        return ParsedUserAgent(
            browser_name=self._browser_name(ua.browser.family, user_agent),
            os_name=self._os_name(ua.os.family, ua.os.version_string),
            device_type=self._device_type(ua, user_agent),
        )

    def _browser_name(self, family: str, user_agent: str) -> str | None:
        if not family or family == 'Other':
            return None

        if family == 'Edge':
            return 'edge-chromium' if 'Edg/' in user_agent else 'edge'

        return self.BROWSER_NAMES.get(family) or StringUtils.slugify(family) or None

    def _os_name(self, family: str, version: str) -> str | None:
        if not family or family == 'Other':
            return None

        if family.startswith('Windows') and family != 'Windows Phone':
            version = version or family.removeprefix('Windows').strip()
            return f'Windows {version}'.strip()

        return self.OS_NAMES.get(family, family)

    def _device_type(self, ua, user_agent: str) -> str | None:
        if self._CONSOLE_RE.search(user_agent):
            return 'console'
        if self._SMART_TV_RE.search(user_agent):
            return 'smarttv'
        if ua.is_tablet:
            return 'tablet'
        if ua.is_mobile:
            return 'wearable' if self._WEARABLE_RE.search(user_agent) else 'mobile'
        return None


class DeviceClassifier:
    """Coarse device class from the user agent and the reported screen size."""

    def __init__(self, parser: UserAgentParser) -> None:
        self.parser = parser

    def get_device(self, user_agent: str | None, screen: str | None = '') -> str:
        device = self.parser.parse(user_agent).device_type or DESKTOP

        # desktop-class browsers on small screens are usually laptops
        if device == DESKTOP and screen:
            width = IntUtils.to_int(screen.split('x', 1)[0])
            if width is not None and width <= LAPTOP_MAX_WIDTH:
                return LAPTOP

        return device
