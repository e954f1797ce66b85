"""
Injected I/O capabilities.

The engine only needs two things from its environment:
- read bytes from a named local resource (ResourceReader)
- fetch bytes from a URL (Fetcher)

Both are protocols so tests and callers can supply their own implementations.
FileResourceReader keeps every resolved path inside its root directory, the
same way uploaded file paths are checked against the storage root.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Protocol, Union

import httpx

from .errors import NetworkError, NotFoundError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ResourceReader(Protocol):
    """Read-only access to local artifacts."""

    def resolve(self, path: PathLike) -> Path: ...

    def read_bytes(self, path: PathLike) -> bytes: ...

    def exists(self, path: PathLike) -> bool: ...

    def list_files(self, directory: PathLike, pattern: str = "*") -> list[Path]: ...


class Fetcher(Protocol):
    """Fetches a live artifact over the network."""

    def fetch(self, url: str) -> bytes: ...


class FileResourceReader:
    """
    ResourceReader backed by the local filesystem.

    Relative paths are resolved against ``root``. Absolute paths are accepted
    only when they stay inside ``root``.

    Example:
        >>> reader = FileResourceReader("/srv/contracts")
        >>> reader.read_bytes("wsdl/order-service.wsdl")[:5]
        b'<?xml'
    """

    def __init__(self, root: Optional[PathLike] = None) -> None:
        self.root = Path(root or ".").resolve()

    def resolve(self, path: PathLike) -> Path:
        """
        Resolve a path against the root and verify it does not escape it.

        Raises:
            ValueError: If the resolved path is outside the root
        """
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self.root / candidate
        resolved = candidate.resolve()

        if resolved != self.root and not str(resolved).startswith(str(self.root) + os.sep):
            raise ValueError(f"Path traversal detected: {path} escapes {self.root}")
        return resolved

    def read_bytes(self, path: PathLike) -> bytes:
        resolved = self.resolve(path)
        if not resolved.is_file():
            raise NotFoundError(f"Local resource not found: {resolved}")
        logger.debug(f"Reading {resolved}")
        return resolved.read_bytes()

    def exists(self, path: PathLike) -> bool:
        try:
            return self.resolve(path).is_file()
        except ValueError:
            return False

    def list_files(self, directory: PathLike, pattern: str = "*") -> list[Path]:
        resolved = self.resolve(directory)
        if not resolved.is_dir():
            raise NotFoundError(f"Directory not found: {resolved}")
        return sorted(p for p in resolved.glob(pattern) if p.is_file())


class HttpFetcher:
    """
    Fetcher using httpx with a hard timeout.

    A non-2xx response or any transport error raises NetworkError, so a hung
    or unreachable endpoint never blocks or crashes the run.
    """

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._client = client or httpx.Client(
            timeout=timeout_seconds, follow_redirects=True
        )

    def fetch(self, url: str) -> bytes:
        logger.info(f"Fetching live artifact: {url}")
        try:
            response = self._client.get(url)
        except httpx.HTTPError as e:
            raise NetworkError(f"{type(e).__name__}: {e}") from e

        if not response.is_success:
            raise NetworkError(
                f"HTTP {response.status_code}", status_code=response.status_code
            )
        return response.content

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpFetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
