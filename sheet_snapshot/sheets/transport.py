"""HTTP transport used to download sheet exports."""

from __future__ import annotations

from typing import Any, Callable

import httpx

__all__ = [
    "Fetch",
    "HttpTransport",
    "TransportError",
]

# fetch(url) -> (status, body_text)
Fetch = Callable[[str], tuple[int, str]]

_NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}


class TransportError(RuntimeError):
    """Raised when a request could not be completed at all (DNS, TLS, timeout...)."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{message} (url={url})")
        self.url = url


class HttpTransport:
    """Thin httpx wrapper exposing the ``fetch(url) -> (status, text)`` contract.

    A single ``httpx.Client`` is shared by every worker thread; the client is
    thread-safe and pools connections to the spreadsheet host. Redirects are
    followed because export URLs answer with a redirect to a content host.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = 30.0,
        client: httpx.Client | None = None,
        **client_kwargs: Any,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        self._owns_client = client is None
        headers = {**_NO_CACHE_HEADERS, **client_kwargs.pop("headers", {})}
        self._client = client or httpx.Client(
            timeout=timeout_seconds,
            follow_redirects=True,
            headers=headers,
            **client_kwargs,
        )

    def __call__(self, url: str) -> tuple[int, str]:
        try:
            response = self._client.get(url)
        except httpx.HTTPError as exc:
            raise TransportError(url, f"request failed: {exc}") from exc
        return response.status_code, response.text

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
