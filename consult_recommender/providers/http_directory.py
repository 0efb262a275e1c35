"""
Expert directory backed by a JSON HTTP service.

Request::

    GET {base_url}/experts?industry=DeFi

Accepted response bodies::

    [{"id": "1", "name": "...", "specialization": "...", "rating": 4.9}, ...]
    {"experts": [ ...same objects... ]}

Transport errors, non-2xx statuses, and payloads that do not validate as
``Expert`` objects all surface as ``ProviderUnavailableError``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from consult_recommender.models.recommendation import Expert
from consult_recommender.providers.base import ExpertDirectory, ProviderUnavailableError

logger = logging.getLogger(__name__)


class HttpExpertDirectory(ExpertDirectory):
    """Experts fetched from a remote directory service.

    Args:
        base_url: Service root, e.g. ``"http://directory.internal"``.
        timeout_s: Per-request timeout passed to httpx.
        transport: Optional httpx transport (``httpx.MockTransport`` in tests).
        headers: Extra request headers (e.g. an API key).
    """

    source_name = "http_experts"

    def __init__(
        self,
        base_url: str,
        timeout_s: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._transport = transport
        self._headers = headers or {}

    async def by_industry(self, industry: str) -> list[Expert]:
        url = f"{self.base_url}/experts"
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self.timeout_s,
                headers=self._headers,
            ) as client:
                resp = await client.get(url, params={"industry": industry})
                resp.raise_for_status()
                payload = resp.json()
        except httpx.HTTPStatusError as exc:
            raise ProviderUnavailableError(
                self.source_name, f"HTTP {exc.response.status_code} from {url}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderUnavailableError(self.source_name, str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            raise ProviderUnavailableError(self.source_name, f"invalid JSON: {exc}") from exc

        experts = _parse_experts(payload, self.source_name)
        logger.debug("HTTP directory | industry=%s matched=%d", industry, len(experts))
        return experts


def _parse_experts(payload: Any, source_name: str) -> list[Expert]:
    if isinstance(payload, dict):
        payload = payload.get("experts")
    if not isinstance(payload, list):
        raise ProviderUnavailableError(source_name, "expected a list of experts")

    try:
        return [Expert.model_validate(item) for item in payload]
    except ValidationError as exc:
        raise ProviderUnavailableError(source_name, f"malformed expert record: {exc}") from exc
