"""Document backends for the flat JSON stores.

Each store keeps one JSON document (``{"sessions": [...]}`` or
``{"integrations": [...]}``) that is read and rewritten wholesale on every
mutation. Two interchangeable backends implement that contract:

- ``JsonFileBackend`` keeps the document in a file on disk.
- ``MemoryBackend`` keeps it in process memory (tests, ephemeral runs).

Both serialize read-modify-write cycles with a lock, so writers inside one
process never lose each other's updates. Separate processes sharing a file
still race, and the last writer wins.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

logger = logging.getLogger(__name__)


class DocumentBackend:
    """Interface shared by the document backends."""

    def __init__(self) -> None:
        self._lock = threading.RLock()

    def load(self, default: dict[str, Any]) -> dict[str, Any]:
        raise NotImplementedError

    def save(self, document: dict[str, Any]) -> None:
        raise NotImplementedError

    def read(self, default: dict[str, Any]) -> dict[str, Any]:
        """Return a snapshot of the document."""
        with self._lock:
            return self._conform(self.load(default), default)

    @contextmanager
    def transaction(self, default: dict[str, Any]) -> Iterator[dict[str, Any]]:
        """Yield the document for mutation and write it back on success.

        Nothing is written if the block raises.
        """
        with self._lock:
            document = self._conform(self.load(default), default)
            yield document
            self.save(document)

    def _conform(
        self, document: dict[str, Any], default: dict[str, Any]
    ) -> dict[str, Any]:
        """Reset collection keys whose stored value is not a list."""
        for key, value in default.items():
            if not isinstance(document.get(key), list):
                if key in document:
                    logger.warning(
                        "Malformed %r collection in %s, treating as empty",
                        key,
                        self.describe().get("path", type(self).__name__),
                    )
                document[key] = copy.deepcopy(value)
        return document

    def describe(self) -> dict[str, Any]:
        """Return a short status dict for the health endpoint."""
        return {"backend": type(self).__name__}


class MemoryBackend(DocumentBackend):
    """Keeps the document in memory; copies on the way in and out."""

    def __init__(self, document: dict[str, Any] | None = None) -> None:
        super().__init__()
        self._document = copy.deepcopy(document) if document is not None else None

    def load(self, default: dict[str, Any]) -> dict[str, Any]:
        if self._document is None:
            return copy.deepcopy(default)
        return copy.deepcopy(self._document)

    def save(self, document: dict[str, Any]) -> None:
        self._document = copy.deepcopy(document)


class JsonFileBackend(DocumentBackend):
    """Keeps the document in a pretty-printed JSON file.

    A missing file is a first run and yields the default document. A file
    that cannot be parsed, or whose collection is not a list, also yields the
    default document, with a warning, and is overwritten by the next mutation.
    """

    def __init__(self, path: Path | str) -> None:
        super().__init__()
        self.path = Path(path)

    def load(self, default: dict[str, Any]) -> dict[str, Any]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return copy.deepcopy(default)
        except OSError as exc:
            logger.warning("Could not read %s, treating as empty: %s", self.path, exc)
            return copy.deepcopy(default)

        try:
            document = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Corrupt JSON in %s, treating as empty: %s", self.path, exc)
            return copy.deepcopy(default)

        if not isinstance(document, dict):
            logger.warning("Unexpected document type in %s, treating as empty", self.path)
            return copy.deepcopy(default)
        return document

    def save(self, document: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def describe(self) -> dict[str, Any]:
        return {
            "backend": type(self).__name__,
            "path": str(self.path),
            "exists": self.path.exists(),
        }


def valid_entries(
    document: dict[str, Any], key: str, model: type[BaseModel]
) -> list[dict[str, Any]]:
    """Drop entries of ``document[key]`` that do not validate as ``model``.

    The document is modified in place, so a transaction that goes on to save
    it also repairs the stored file.
    """
    kept = []
    for raw in document[key]:
        try:
            model.model_validate(raw)
        except PydanticValidationError as exc:
            logger.warning(
                "Skipping invalid %s entry: %s", key, exc.errors()[0]["msg"]
            )
            continue
        kept.append(raw)
    document[key] = kept
    return kept
