"""
HTTP plumbing shared by provider adapters.

One synchronous GET per call. Transport errors and non-2xx statuses are
converted to :class:`TransportError`; nothing is retried.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from tickerboard.core.config import ProviderConfig
from tickerboard.core.exceptions import TransportError
from tickerboard.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class HttpConfig:
    """Configuration for HTTP client behavior."""

    timeout: float = 10.0
    max_redirects: int = 5
    verify_ssl: bool = True
    user_agent: str = "tickerboard/0.1.0"
    headers: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Validate HTTP configuration."""
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.max_redirects < 0:
            raise ValueError("max_redirects must be non-negative")

    @classmethod
    def from_provider_config(cls, config: ProviderConfig) -> "HttpConfig":
        return cls(timeout=config.timeout, verify_ssl=config.verify_ssl, user_agent=config.user_agent)


def create_client(config: HttpConfig, transport: Optional[httpx.BaseTransport] = None) -> httpx.Client:
    """Build a synchronous client from ``config``."""
    return httpx.Client(
        timeout=httpx.Timeout(config.timeout),
        follow_redirects=True,
        max_redirects=config.max_redirects,
        verify=config.verify_ssl,
        headers={"User-Agent": config.user_agent, **config.headers},
        transport=transport,
    )


def send_get(
    client: httpx.Client,
    url: str,
    *,
    provider: str,
    headers: Optional[Dict[str, str]] = None,
    params: Optional[Dict[str, Any]] = None,
    allow_error_status: bool = False,
) -> httpx.Response:
    """Execute a single GET request."""
    try:
        response = client.get(url, headers=headers, params=params)
    except httpx.HTTPError as e:
        raise TransportError(
            f"{type(e).__name__} while requesting {url}: {e}",
            provider_name=provider,
            details={"url": url},
        ) from e

    logger.bind(provider=provider).debug(f"GET {response.request.url} -> {response.status_code}")
    if response.is_success or allow_error_status:
        return response
    raise TransportError(
        f"HTTP {response.status_code} from {provider}",
        provider_name=provider,
        status_code=response.status_code,
        details={"url": url},
    )
