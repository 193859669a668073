"""Dataset sources — fetch the dataset document from a file or over HTTP.

Sources perform no retries or backoff: any transport, decode, or shape
failure is raised as :class:`DatasetLoadError` (chained from the original
exception) for the caller to handle.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from cinemaweb.domain.records import Dataset

logger = logging.getLogger(__name__)


class DatasetLoadError(Exception):
    """The dataset document could not be fetched, decoded, or validated."""

    def __init__(self, location: str, reason: str) -> None:
        super().__init__(f"Cannot load dataset from {location}: {reason}")
        self.location = location
        self.reason = reason


class DatasetSource(Protocol):
    """Anything that can produce a fresh :class:`Dataset` on demand."""

    @property
    def location(self) -> str: ...

    def fetch(self) -> Dataset: ...


def _validate(location: str, document: Any) -> Dataset:
    if not isinstance(document, dict):
        raise DatasetLoadError(location, "document is not a JSON object")
    try:
        return Dataset.from_document(document)
    except ValidationError as exc:
        raise DatasetLoadError(location, f"invalid document: {exc.error_count()} error(s)") from exc


class FileDatasetSource:
    """Read the dataset document from a local JSON file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    @property
    def location(self) -> str:
        return str(self.path)

    def fetch(self) -> Dataset:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise DatasetLoadError(self.location, exc.strerror or str(exc)) from exc
        except UnicodeDecodeError as exc:
            raise DatasetLoadError(self.location, f"invalid UTF-8: {exc.reason}") from exc
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise DatasetLoadError(self.location, f"invalid JSON: {exc.msg}") from exc
        dataset = _validate(self.location, document)
        logger.debug("Loaded dataset from %s (%d works)", self.location, len(dataset.works))
        return dataset


class HttpDatasetSource:
    """GET the dataset document from a URL.

    Parameters:
        url: Absolute ``http(s)://`` URL of the JSON document.
        client: Optional pre-configured ``httpx.Client`` (useful for testing).
        timeout: Request timeout in seconds when no client is given.
    """

    def __init__(self, url: str, *, client: httpx.Client | None = None, timeout: float = 10.0) -> None:
        self.url = url
        self._client = client
        self._timeout = timeout

    @property
    def location(self) -> str:
        return self.url

    def fetch(self) -> Dataset:
        owns_client = self._client is None
        client = self._client or httpx.Client(timeout=self._timeout)
        try:
            response = client.get(self.url)
            response.raise_for_status()
            document = response.json()
        except httpx.HTTPStatusError as exc:
            raise DatasetLoadError(self.url, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise DatasetLoadError(self.url, str(exc) or type(exc).__name__) from exc
        except UnicodeDecodeError as exc:
            raise DatasetLoadError(self.url, f"invalid UTF-8: {exc.reason}") from exc
        except json.JSONDecodeError as exc:
            raise DatasetLoadError(self.url, f"invalid JSON: {exc.msg}") from exc
        finally:
            if owns_client:
                client.close()
        dataset = _validate(self.url, document)
        logger.debug("Fetched dataset from %s (%d works)", self.url, len(dataset.works))
        return dataset


def open_source(
    location: str | Path,
    *,
    client: httpx.Client | None = None,
    timeout: float = 10.0,
) -> DatasetSource:
    """Pick a source for *location*: ``http(s)://`` URLs or a file path."""
    text = str(location)
    if text.startswith(("http://", "https://")):
        return HttpDatasetSource(text, client=client, timeout=timeout)
    return FileDatasetSource(location)
