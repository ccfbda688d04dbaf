from __future__ import annotations

import logging
import uuid
from typing import Callable, Protocol
from urllib.parse import quote, urlencode

from ..models.config_models import SheetDescriptor, SnapshotConfig
from .transport import Fetch, TransportError

"""Sheet sources: resolve one SheetDescriptor to its raw CSV text.

Only one strategy is active per deployment. ``csv_export`` is the canonical one:
it addresses a tab by its gid (stable across renames) and falls back to the
display name through the visualization CSV endpoint when no gid is configured.

Every request carries a fresh ``_cb`` token so no intermediary cache can serve
stale content.
"""

__all__ = [
    "SheetFetchError",
    "MalformedResponseError",
    "SheetSource",
    "CsvExportSource",
    "SOURCE_STRATEGIES",
    "build_source",
]

logger = logging.getLogger(__name__)

CACHE_BUSTER_PARAM = "_cb"
_BODY_EXCERPT_CHARS = 120

# Bodies that parse as text but are not a CSV payload.
_HTML_PREFIXES = ("<!doctype", "<html", "<?xml")
_GVIZ_WRAPPER_MARKERS = ("/*O_o*/", "google.visualization.Query.setResponse")


class SheetFetchError(Exception):
    """Sheet-scoped fetch failure. Never aborts the run; the sheet maps to []."""

    error_type = "FETCH_ERROR"

    def __init__(self, descriptor: SheetDescriptor, message: str) -> None:
        super().__init__(f'Failed to fetch "{descriptor.name}": {message}')
        self.sheet_key = descriptor.key
        self.sheet_name = descriptor.name


class MalformedResponseError(SheetFetchError):
    """The transport succeeded but the body is not the expected CSV payload."""

    error_type = "MALFORMED_RESPONSE"


class SheetSource(Protocol):
    def fetch_text(self, descriptor: SheetDescriptor) -> str: ...


def _new_cache_token() -> str:
    return uuid.uuid4().hex


def _excerpt(body: str) -> str:
    flat = " ".join(body.split())
    if len(flat) > _BODY_EXCERPT_CHARS:
        return flat[:_BODY_EXCERPT_CHARS] + "..."
    return flat


class CsvExportSource:
    """CSV export by gid, with display-name fallback."""

    def __init__(
        self,
        source_sheet_id: str,
        transport: Fetch,
        *,
        base_url: str = "https://docs.google.com/spreadsheets/d",
        cache_token: Callable[[], str] = _new_cache_token,
    ) -> None:
        if not source_sheet_id or not source_sheet_id.strip():
            raise ValueError("source_sheet_id cannot be empty")
        self._sheet_id = source_sheet_id.strip()
        self._transport = transport
        self._base_url = base_url.rstrip("/")
        self._cache_token = cache_token

    def build_url(self, descriptor: SheetDescriptor) -> str:
        spreadsheet = f"{self._base_url}/{quote(self._sheet_id, safe='')}"
        if descriptor.gid:
            params = {"format": "csv", "gid": descriptor.gid, CACHE_BUSTER_PARAM: self._cache_token()}
            return f"{spreadsheet}/export?{urlencode(params)}"
        params = {"tqx": "out:csv", "sheet": descriptor.name, CACHE_BUSTER_PARAM: self._cache_token()}
        return f"{spreadsheet}/gviz/tq?{urlencode(params, quote_via=quote)}"

    def fetch_text(self, descriptor: SheetDescriptor) -> str:
        url = self.build_url(descriptor)
        logger.info("Fetching %s (by %s)...", descriptor.name, descriptor.addressing)
        try:
            status, body = self._transport(url)
        except TransportError as exc:
            raise SheetFetchError(descriptor, str(exc)) from exc

        if not 200 <= status < 300:
            raise SheetFetchError(descriptor, f"HTTP {status}: {_excerpt(body)}")
        return self._unwrap(descriptor, body)

    @staticmethod
    def _unwrap(descriptor: SheetDescriptor, body: str) -> str:
        head = body.lstrip("\ufeff \t\r\n")[:64]
        if head.lower().startswith(_HTML_PREFIXES):
            raise MalformedResponseError(
                descriptor, "received an HTML page instead of CSV (is the spreadsheet shared publicly?)"
            )
        if any(marker in head for marker in _GVIZ_WRAPPER_MARKERS):
            raise MalformedResponseError(
                descriptor, f"received a query response wrapper instead of CSV: {_excerpt(body)}"
            )
        return body


SOURCE_STRATEGIES: dict[str, type[CsvExportSource]] = {
    "csv_export": CsvExportSource,
}


def build_source(config: SnapshotConfig, transport: Fetch) -> SheetSource:
    """Instantiate the configured fetch strategy on top of ``transport``."""
    try:
        strategy = SOURCE_STRATEGIES[config.fetch.strategy]
    except KeyError:
        raise ValueError(f"unknown fetch strategy: {config.fetch.strategy}") from None
    return strategy(config.source_sheet_id, transport, base_url=config.fetch.base_url)
