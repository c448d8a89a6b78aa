"""Yahoo session bootstrap: cookie plus crumb."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from tickerboard.core.config import ProviderConfig
from tickerboard.core.exceptions import SessionError, TransportError
from tickerboard.core.logging import get_logger
from tickerboard.core.providers.http import send_get

logger = get_logger(__name__)

PROVIDER_NAME = "yahoo"


@dataclass(frozen=True, slots=True)
class SessionTokens:
    """Ephemeral credentials accepted by the quote endpoint."""

    cookie: str
    crumb: str


def _cookie_header(response: httpx.Response) -> str:
    pairs: list[str] = []
    for raw in response.headers.get_list("set-cookie"):
        pair = raw.split(";", 1)[0].strip()
        if "=" in pair and pair.split("=", 1)[1]:
            pairs.append(pair)
    return "; ".join(pairs)


class YahooSession:
    """Obtains and caches the cookie/crumb pair.

    Tokens are reused across fetch cycles until :meth:`invalidate` is called,
    after which the next :meth:`acquire` bootstraps again.
    """

    def __init__(self, client: httpx.Client, config: ProviderConfig | None = None) -> None:
        self.client = client
        self.config = config or ProviderConfig()
        self._tokens: SessionTokens | None = None

    @property
    def tokens(self) -> SessionTokens | None:
        return self._tokens

    def acquire(self) -> SessionTokens:
        """Return cached tokens or run the bootstrap exchange.

        Raises:
            SessionError: when either the cookie or the crumb cannot be obtained
        """
        if self._tokens is not None:
            return self._tokens

        cookie = self._fetch_cookie()
        crumb = self._fetch_crumb(cookie)
        self._tokens = SessionTokens(cookie=cookie, crumb=crumb)
        logger.bind(provider=PROVIDER_NAME).info("Acquired Yahoo session")
        return self._tokens

    def invalidate(self) -> None:
        if self._tokens is not None:
            logger.bind(provider=PROVIDER_NAME).info("Dropping cached Yahoo session")
        self._tokens = None

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
            "User-Agent": self.config.user_agent,
        }

    def _fetch_cookie(self) -> str:
        # The landing host answers 404 but still sets the session cookie.
        try:
            response = send_get(
                self.client,
                self.config.yahoo_cookie_url,
                provider=PROVIDER_NAME,
                headers=self._headers(),
                allow_error_status=True,
            )
        except TransportError as e:
            raise SessionError(f"Unable to reach cookie host: {e}", PROVIDER_NAME, stage="cookie") from e

        cookie = _cookie_header(response)
        if not cookie:
            raise SessionError("No session cookie in response", PROVIDER_NAME, stage="cookie")
        return cookie

    def _fetch_crumb(self, cookie: str) -> str:
        headers = {**self._headers(), "Accept": "*/*", "Cookie": cookie}
        try:
            response = send_get(self.client, self.config.yahoo_crumb_url, provider=PROVIDER_NAME, headers=headers)
        except TransportError as e:
            raise SessionError(f"Unable to fetch crumb: {e}", PROVIDER_NAME, stage="crumb") from e

        crumb = response.text.strip()
        if not crumb or "<" in crumb or " " in crumb:
            raise SessionError("Crumb endpoint returned no usable token", PROVIDER_NAME, stage="crumb")
        return crumb
