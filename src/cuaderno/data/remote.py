"""Optional best-effort remote copy of the notebook document.

The remote is a document-store endpoint (Firebase Realtime Database REST
style): the whole document is read with GET and overwritten with PUT at one
fixed path. Every failure is soft: callers get None/False and a log line.
"""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import httpx

from .normalize import is_valid_document

if TYPE_CHECKING:
    from ..config import NotebookConfig

logger = logging.getLogger(__name__)

DEFAULT_REMOTE_PATH = "data.json"


class RemoteMirror(ABC):
    """Interface for a remote copy of the document."""

    @property
    @abstractmethod
    def enabled(self) -> bool:
        """Whether this mirror is configured at all."""
        ...

    @abstractmethod
    async def load(self) -> dict[str, Any] | None:
        """Fetch the document. None when unreachable, empty or invalid."""
        ...

    @abstractmethod
    async def save(self, document: dict[str, Any]) -> bool:
        """Overwrite the remote document. Never raises."""
        ...


class NullRemoteMirror(RemoteMirror):
    """Mirror used when no remote is configured: permanently unreachable."""

    @property
    def enabled(self) -> bool:
        return False

    async def load(self) -> dict[str, Any] | None:
        return None

    async def save(self, document: dict[str, Any]) -> bool:
        return False


class HttpRemoteMirror(RemoteMirror):
    """Remote mirror over HTTP using httpx."""

    def __init__(
        self,
        base_url: str,
        path: str = DEFAULT_REMOTE_PATH,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._path = path.lstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self._base_url)

    @property
    def url(self) -> str:
        return f"{self._base_url}/{self._path}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    async def load(self) -> dict[str, Any] | None:
        try:
            async with self._client() as client:
                response = await client.get(self.url)
        except httpx.TimeoutException:
            logger.warning("Remote load timed out after %ss: %s", self._timeout, self.url)
            return None
        except httpx.HTTPError as e:
            logger.warning("Remote load failed: %s", e)
            return None

        if not response.is_success:
            logger.warning("Remote load returned HTTP %s", response.status_code)
            return None

        try:
            document = response.json()
        except ValueError as e:
            logger.warning("Remote returned a malformed body: %s", e)
            return None

        if not is_valid_document(document):
            logger.info("Remote has no valid document at %s", self.url)
            return None
        return document

    async def save(self, document: dict[str, Any]) -> bool:
        try:
            async with self._client() as client:
                response = await client.put(self.url, json=document)
        except httpx.TimeoutException:
            logger.warning("Remote save timed out after %ss: %s", self._timeout, self.url)
            return False
        except httpx.HTTPError as e:
            logger.warning("Remote save failed: %s", e)
            return False

        if not response.is_success:
            logger.warning("Remote save returned HTTP %s", response.status_code)
            return False
        return True


def build_remote(config: "NotebookConfig") -> RemoteMirror:
    """Create the mirror described by the configuration."""
    if not config.remote_enabled:
        return NullRemoteMirror()
    return HttpRemoteMirror(
        config.remote_url,
        path=config.remote_path,
        timeout=config.remote_timeout,
    )
