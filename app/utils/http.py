# app/utils/http.py
import logging
from typing import Any, Mapping

import httpx
from app import config

log = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Accept-Language": "pt-BR,pt;q=0.9,en;q=0.8",
}


class Http:
    """Thin AsyncClient wrapper for the JSON APIs we call.

    Every request gets exactly one attempt; callers decide what a failure means.
    """

    def __init__(self, timeout: float | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self.client = httpx.AsyncClient(
            timeout=float(config.HTTP_TIMEOUT if timeout is None else timeout),
            follow_redirects=True,
            headers={"User-Agent": config.USER_AGENT, **DEFAULT_HEADERS},
            proxy=config.PROXY_URL or None,
            transport=transport,
        )

    async def get_json(self, url: str, *, params: Mapping[str, Any] | None = None) -> Any:
        """GET ``url`` and decode the body as JSON.

        Raises ``httpx.HTTPError`` on transport errors and non-2xx statuses,
        ``ValueError`` when the body is not JSON.
        """
        r = await self.client.get(url, params=params)
        r.raise_for_status()
        log.debug("GET %s -> %s", r.request.url.copy_remove_param("key"), r.status_code)
        return r.json()

    async def close(self):
        await self.client.aclose()

    async def __aenter__(self) -> "Http":
        return self

    async def __aexit__(self, *exc):
        await self.close()
