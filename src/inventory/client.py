"""HTTP client for the inventory router API.

The router owns inventory semantics: it receives either a structured query (voice flow) or raw text
(text flow) together with an opaque caller identifier and returns a reply string. This client does
not interpret the reply.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any
from http.client import HTTPException
from urllib.error import HTTPError
from urllib.request import Request, urlopen

from src.intent.schema import StructuredQuery


class RouterError(RuntimeError):
    """Raised when the inventory router cannot be reached or answers unexpectedly."""


@dataclass(frozen=True)
class InventoryRouterClient:
    """Bearer-authenticated client for `POST <api_url>/api/ai/route`."""

    api_url: str
    api_token: str
    timeout_s: float = 20.0

    @property
    def route_url(self) -> str:
        return self.api_url.rstrip("/") + "/api/ai/route"

    def _post(self, payload: dict[str, Any]) -> str:
        req = Request(
            self.route_url,
            method="POST",
            headers={
                "Authorization": f"Bearer {self.api_token}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            data=json.dumps(payload).encode(),
        )

        try:
            with urlopen(req, timeout=self.timeout_s) as resp:  # noqa: S310 (configured router URL)
                body = resp.read()
        except HTTPError as exc:
            raise RouterError(f"router HTTP error: {exc.code}") from exc
        except (OSError, HTTPException) as exc:
            raise RouterError("router connection error") from exc

        try:
            decoded = json.loads(body)
        except json.JSONDecodeError as exc:
            raise RouterError("router did not return JSON") from exc

        reply = decoded.get("reply") if isinstance(decoded, dict) else None
        return str(reply or "").strip()

    async def route_query(self, query: StructuredQuery, caller_id: str) -> str:
        """Send a structured query (voice flow) and return the router's reply text."""

        payload = {"mode": "audio_nlp", "phone": caller_id, **query.to_payload()}
        return await asyncio.to_thread(self._post, payload)

    async def route_text(self, text: str, caller_id: str) -> str:
        """Forward raw text (text flow) and return the router's reply text."""

        return await asyncio.to_thread(self._post, {"text": text, "phone": caller_id})
