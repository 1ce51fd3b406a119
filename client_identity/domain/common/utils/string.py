"""String Utilities Module
Helpers for header and query values that arrive in unreliable encodings.
"""

import re
from urllib.parse import unquote

from client_identity import __name__ as _package_name


class StringUtils:
    """Collection of static string utility methods."""

    _NON_ALNUM_RE = re.compile(r'[^a-z0-9]+')

    # ---------- Decoding ----------
    @staticmethod
    def latin1_to_utf8(value: str | None) -> str | None:
        """Re-read a header value that was decoded as Latin-1 as UTF-8.

        Edge providers send raw UTF-8 bytes (``ZÃ¼rich`` instead of
        ``Zürich``). Values that do not round-trip are returned unchanged.
        """
        if value is None:
            return None
        try:
            return value.encode('latin-1').decode('utf-8')
        except UnicodeError:
            return value

    @staticmethod
    def safe_url_decode(value: str | None) -> str | None:
        """Percent-decode *value*, keeping the raw text on invalid UTF-8."""
        if value is None:
            return None
        try:
            return unquote(value, errors='strict')
        except UnicodeDecodeError:
            return value

    # ---------- Splitting ----------
    @staticmethod
    def split_csv(text: str | None) -> list[str]:
        """Split a comma-separated *text*, trimming and dropping empty items."""
        if not text:
            return []
        return [item.strip() for item in text.split(',') if item.strip()]

    # ---------- Generation ----------
    @staticmethod
    def slugify(text: str) -> str:
        """Lower-case *text* and join its alphanumeric runs with dashes."""
        return StringUtils._NON_ALNUM_RE.sub('-', text.lower()).strip('-')

    @staticmethod
    def service_name() -> str:
        return StringUtils.slugify(_package_name)
