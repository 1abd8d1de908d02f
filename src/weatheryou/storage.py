# tiny key-value stores for search state
# the orchestration layer gets one injected, nothing else reads or writes it

from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Dict, Protocol

logger = logging.getLogger(__name__)

LAST_CITY_KEY = "lastCity"
STATE_FILE_ENV = "WEATHERYOU_STATE_FILE"


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    def __init__(self, initial: Dict[str, str] | None = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


def default_state_path() -> Path:
    env = os.getenv(STATE_FILE_ENV)
    if env:
        return Path(env).expanduser()
    return Path.home() / ".weatheryou" / "state.json"


class JsonFileStore:
    # a flat json object on disk, rewritten whole on every set (last write wins)

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path) if path is not None else default_state_path()

    def _load(self) -> Dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            logger.warning("cannot read state file %s: %s", self.path, exc)
            return {}

        try:
            data = json.loads(raw)
        except ValueError as exc:
            logger.warning("ignoring corrupt state file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("ignoring state file %s: expected a JSON object", self.path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
            tmp.replace(self.path)
        except OSError as exc:
            # losing the last city is not worth failing the caller over
            logger.warning("cannot write state file %s: %s", self.path, exc)
            try:
                tmp.unlink(missing_ok=True)
            except OSError:
                logger.debug("cannot remove %s", tmp)
