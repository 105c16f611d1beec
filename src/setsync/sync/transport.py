"""Callers for the remote settings endpoints.

:class:`NamedSettingsCaller` is the interface the sync protocols depend on.
:class:`HttpNamedSettingsCaller` implements it with ``urllib``: each POST
runs in a worker thread so the event loop only suspends while the request
is in flight.  Retries and backoff are not handled here.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Protocol
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from setsync.core.config import DEFAULT_TIMEOUT_SECONDS, endpoint_url
from setsync.core.errors import SetsyncError
from setsync.sync.wire import (
    ChangedSettingResponse,
    ChangeSetRequest,
    NamedSettingResponse,
    NamedSettingsRequest,
    parse_changed_settings_response,
    parse_named_settings_response,
)

logger = logging.getLogger(__name__)

TOKEN_ENV = "SETSYNC_TOKEN"


class TransportError(SetsyncError):
    """Raised when a remote call fails or returns an unusable body."""


class NamedSettingsCaller(Protocol):
    async def changed_named_settings(
        self, request: ChangeSetRequest
    ) -> dict[str, ChangedSettingResponse]: ...

    async def named_settings(
        self, request: NamedSettingsRequest
    ) -> dict[str, NamedSettingResponse]: ...


class HttpNamedSettingsCaller:
    """POST JSON to the configured endpoints with bearer-token auth."""

    def __init__(
        self,
        changed_settings_url: str,
        named_settings_url: str,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.changed_settings_url = changed_settings_url
        self.named_settings_url = named_settings_url
        self.token = token
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: dict, token: str | None = None) -> HttpNamedSettingsCaller:
        return cls(
            changed_settings_url=endpoint_url(config, "changed_settings"),
            named_settings_url=endpoint_url(config, "named_settings"),
            token=token,
            timeout=float(config.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)),
        )

    async def changed_named_settings(
        self, request: ChangeSetRequest
    ) -> dict[str, ChangedSettingResponse]:
        payload = await asyncio.to_thread(self._post, self.changed_settings_url, request.to_wire())
        return parse_changed_settings_response(payload)

    async def named_settings(
        self, request: NamedSettingsRequest
    ) -> dict[str, NamedSettingResponse]:
        payload = await asyncio.to_thread(self._post, self.named_settings_url, request.to_wire())
        return parse_named_settings_response(payload)

    def _post(self, url: str, body: dict) -> Any:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        data = json.dumps(body, sort_keys=True).encode("utf-8")
        req = Request(url, data=data, headers=headers, method="POST")
        logger.debug("POST %s", url)
        try:
            with urlopen(req, timeout=self.timeout) as resp:
                raw = resp.read()
        except HTTPError as exc:
            raise TransportError(f"POST {url} failed with HTTP {exc.code}") from exc
        except (URLError, OSError) as exc:
            raise TransportError(f"POST {url} failed: {exc}") from exc

        try:
            return json.loads(raw) if raw else {}
        except ValueError as exc:
            raise TransportError(f"POST {url} returned invalid JSON: {exc}") from exc
