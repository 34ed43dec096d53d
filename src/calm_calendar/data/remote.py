from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from ..config.settings import RemoteSettings
from ..domain import TransportError

logger = logging.getLogger(__name__)


@dataclass
class RemoteEventStore:
    """Thin REST client for the ``/events`` collection.

    Every failure, whether network, HTTP status, or an unreadable body, surfaces as
    ``TransportError`` so callers deal with a single failure type.
    """

    settings: RemoteSettings
    session: requests.Session = field(default_factory=requests.Session)

    def _url(self, event_id: Optional[str] = None) -> str:
        base = self.settings.events_url
        return f"{base}/{event_id}" if event_id else base

    def _request(self, method: str, url: str, payload: Optional[Dict[str, Any]] = None) -> requests.Response:
        try:
            response = self.session.request(
                method,
                url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.settings.timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc
        if not response.ok:
            raise TransportError(
                f"{method} {url} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        logger.debug("%s %s -> %s", method, url, response.status_code)
        return response

    def fetch_all(self) -> List[Any]:
        response = self._request("GET", self._url())
        try:
            records = response.json()
        except ValueError as exc:
            raise TransportError("Remote returned a body that is not JSON") from exc
        if not isinstance(records, list):
            raise TransportError("Remote returned JSON that is not an event array")
        return records

    def create(self, record: Dict[str, Any]) -> None:
        self._request("POST", self._url(), record)

    def update(self, event_id: str, record: Dict[str, Any]) -> None:
        self._request("PUT", self._url(event_id), record)

    def delete(self, event_id: str) -> None:
        self._request("DELETE", self._url(event_id))

    def close(self) -> None:
        self.session.close()
