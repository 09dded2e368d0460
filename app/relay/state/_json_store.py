"""Whole-document JSON file with atomic replace-on-save."""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from ..errors import StorageFailure

logger = logging.getLogger(__name__)


class JsonStore:
    """A single JSON document on disk, always read and written in full.

    A missing file is created holding *default*. A file that exists but
    is not valid UTF-8 JSON is reported and read as *default*. Any other I/O
    error raises :class:`StorageFailure`.
    """

    def __init__(self, path: Path, default: Any = None) -> None:
        self._path = Path(path)
        self._default = {} if default is None else default

    @property
    def path(self) -> Path:
        return self._path

    def default(self) -> Any:
        return copy.deepcopy(self._default)

    def load(self) -> Any:
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            data = self.default()
            self.save(data)
            return data
        except OSError as exc:
            raise StorageFailure(f"cannot read {self._path}: {exc}") from exc

        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("[store] %s is not valid UTF-8 JSON (%s); treating as empty", self._path, exc)
            return self.default()

    def save(self, data: Any) -> None:
        payload = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
        tmp_name = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent,
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self._path)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageFailure(f"cannot write {self._path}: {exc}") from exc
