# playtube/client/storage.py
"""
Browser-style local storage: string keys and values kept in a JSON file.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from playtube.client.config import client_settings

logger = logging.getLogger(__name__)


class LocalStorage:
    def __init__(self, path: Optional[Path | str] = None):
        self.path = Path(path or client_settings.STORAGE_PATH).expanduser()

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = str(value)
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)

    def clear(self) -> None:
        self._write({})

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as error:
            logger.warning("Ignoring unreadable local storage %s: %s", self.path, error)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(key): str(value) for key, value in data.items()}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)
