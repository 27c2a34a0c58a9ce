"""
Coda REST API client.

Thin async wrapper over the Coda v1 API. Every call opens its own
httpx.AsyncClient, so concurrent tool calls share nothing but the remote
service. Non-2xx responses raise CodaAPIError.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from .config import CODA_API_BASE, Settings, get_settings

logger = logging.getLogger(__name__)


class CodaAPIError(Exception):
    """Raised when the Coda API answers with a non-success status."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"Coda API error ({status_code}): {message}")


def _segment(value: str) -> str:
    """Encode a single path segment (page names may contain spaces or slashes)."""
    return quote(value, safe="")


_NON_TEXT_MAJOR_TYPES = ("image", "audio", "video", "font")
_NON_TEXT_TYPES = {
    "application/json",
    "application/pdf",
    "application/zip",
    "application/gzip",
}


def _is_non_text(content_type: str) -> bool:
    """True for media types that clearly are not a markdown body. A missing type is accepted."""
    media_type = content_type.split(";", 1)[0].strip().lower()
    if not media_type:
        return False
    return media_type.split("/", 1)[0] in _NON_TEXT_MAJOR_TYPES or media_type in _NON_TEXT_TYPES


def _drop_none(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not params:
        return None
    return {k: v for k, v in params.items() if v is not None}


class CodaClient:
    """Async client for the endpoints the tools need."""

    def __init__(
        self,
        api_key: str,
        base_url: str = CODA_API_BASE,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        }
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "CodaClient":
        settings = settings or get_settings()
        return cls(
            api_key=settings.api_key,
            base_url=settings.api_base,
            timeout=settings.http_timeout,
        )

    def _http(self, **kwargs) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport, **kwargs)

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        async with self._http(base_url=self.base_url, headers=self._headers) as client:
            resp = await client.request(method, path, params=_drop_none(params), json=json)

        if resp.status_code >= 400:
            detail = resp.text
            try:
                detail = resp.json().get("message", detail)
            except Exception:
                pass
            logger.debug(f"{method} {path} failed with {resp.status_code}: {detail}")
            raise CodaAPIError(resp.status_code, detail)

        if not resp.content:
            return None
        return resp.json()

    # ============== Documents ==============

    async def list_docs(self, query: Optional[str] = None) -> Any:
        return await self._request("GET", "/docs", params={"query": query})

    async def resolve_browser_link(self, url: str) -> Any:
        return await self._request("GET", "/resolveBrowserLink", params={"url": url})

    # ============== Pages ==============

    async def list_pages(
        self,
        doc_id: str,
        limit: Optional[int] = None,
        page_token: Optional[str] = None,
    ) -> Any:
        return await self._request(
            "GET",
            f"/docs/{_segment(doc_id)}/pages",
            params={"limit": limit, "pageToken": page_token},
        )

    async def create_page(self, doc_id: str, body: Dict[str, Any]) -> Any:
        return await self._request("POST", f"/docs/{_segment(doc_id)}/pages", json=body)

    async def update_page(self, doc_id: str, page_id_or_name: str, body: Dict[str, Any]) -> Any:
        return await self._request(
            "PUT",
            f"/docs/{_segment(doc_id)}/pages/{_segment(page_id_or_name)}",
            json=body,
        )

    # ============== Content export ==============

    async def begin_page_content_export(
        self,
        doc_id: str,
        page_id_or_name: str,
        output_format: str = "markdown",
    ) -> Any:
        return await self._request(
            "POST",
            f"/docs/{_segment(doc_id)}/pages/{_segment(page_id_or_name)}/export",
            json={"outputFormat": output_format},
        )

    async def get_page_content_export_status(
        self,
        doc_id: str,
        page_id_or_name: str,
        request_id: str,
    ) -> Any:
        return await self._request(
            "GET",
            f"/docs/{_segment(doc_id)}/pages/{_segment(page_id_or_name)}/export/{_segment(request_id)}",
        )

    async def download_text(self, url: str) -> str:
        """GET a download link and return the body as text. No auth header is sent."""
        async with self._http(follow_redirects=True) as client:
            resp = await client.get(url)
        resp.raise_for_status()

        content_type = resp.headers.get("content-type", "")
        if _is_non_text(content_type):
            raise CodaAPIError(resp.status_code, f"Expected a text download, got {content_type}")
        return resp.text
