"""HTTP fetcher used when an extraction input is a remote locator."""

from __future__ import annotations

import logging
import time
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class HttpFetcher:
    """Synchronous HTTP fetcher with retry/backoff on transport errors.

    ``fetch`` never raises for network or protocol failures; it returns
    ``None`` so callers can treat an unreachable document as absent.
    """

    def __init__(
        self,
        user_agent: str = "xtract/0.1",
        timeout: float = 20.0,
        max_retries: int = 2,
        backoff_base: float = 0.6,
        follow_redirects: bool = True,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.user_agent = user_agent
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self.client = httpx.Client(
            follow_redirects=follow_redirects,
            headers={"User-Agent": user_agent},
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self.client.close()

    def fetch(self, url: str) -> Optional[str]:
        attempt = 0
        response: httpx.Response | None = None
        while attempt <= self.max_retries:
            try:
                response = self.client.get(url)
                break
            except (httpx.UnsupportedProtocol, httpx.InvalidURL) as exc:
                logger.info("Cannot fetch %s: %s", url, exc)
                return None
            except (httpx.TimeoutException, httpx.TransportError) as exc:
                logger.info("Fetch attempt %d failed for %s: %s", attempt + 1, url, exc)
                attempt += 1
                if attempt <= self.max_retries:
                    time.sleep(self.backoff_base * (2 ** (attempt - 1)))
            except httpx.HTTPError as exc:
                logger.info("Fetch failed for %s: %s", url, exc)
                return None
        if response is None:
            return None
        if response.status_code >= 400:
            logger.info("Fetch failed for %s: HTTP %d", url, response.status_code)
            return None
        return response.text


__all__ = ["HttpFetcher"]
