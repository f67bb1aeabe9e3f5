# utils/storage.py
from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional
import json
import logging
import os
import re
import tempfile

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


def _check_key(key: str) -> str:
    if not isinstance(key, str) or not _KEY_RE.match(key):
        raise ValueError(f"Invalid storage key: {key!r}")
    return key


class KeyValueStore(ABC):
    """Durable string key/value storage with JSON helpers on top."""

    @abstractmethod
    def get_raw(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set_raw(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        ...

    def get_json(self, key: str, default: Any = None) -> Any:
        """
        Decode the JSON document stored under `key`.
        Missing keys and malformed documents both yield `default`.
        """
        raw = self.get_raw(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning("Malformed JSON under %r, using default: %s", key, e)
            return default

    def set_json(self, key: str, value: Any) -> None:
        self.set_raw(key, json.dumps(value, ensure_ascii=False))


class MemoryStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get_raw(self, key: str) -> Optional[str]:
        return self._data.get(_check_key(key))

    def set_raw(self, key: str, value: str) -> None:
        self._data[_check_key(key)] = value

    def remove(self, key: str) -> None:
        self._data.pop(_check_key(key), None)

    def keys(self):
        return sorted(self._data)


class JsonFileStore(KeyValueStore):
    """One `<key>.json` file per key inside `directory`."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{_check_key(key)}.json"

    def get_raw(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s, treating as absent: %s", path, e)
            return None

    def set_raw(self, key: str, value: str) -> None:
        path = self._path(key)
        # write-then-rename so readers never see a half-written document
        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp, path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
