import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_AUTH_STATE_PATH = os.path.join("data", "auth_state.json")

VERIFIER_KEY = "verifier"
ACCESS_TOKEN_KEY = "access_token"


class AuthStateStore(ABC):
    """Key-value store for PKCE state that must outlive a single run.

    Holds two plain-string keys: ``verifier`` (written on redirect, read on
    exchange) and ``access_token`` (written after exchange, removed on 401).
    Nothing expires locally; absence is the only "not authenticated" signal.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        ...


class MemoryAuthStateStore(AuthStateStore):
    """Dict-backed store; state lives as long as the object."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def snapshot(self) -> Dict[str, str]:
        return dict(self._data)


class JsonFileAuthStateStore(AuthStateStore):
    """Persists auth state as a flat JSON object on disk."""

    def __init__(self, *, path: str = DEFAULT_AUTH_STATE_PATH):
        self.path = path

    def _read(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Auth state file %s is unreadable, treating as empty: %s", self.path, e)
            return {}

        if not isinstance(data, dict):
            logger.warning("Auth state file %s is not a JSON object, treating as empty", self.path)
            return {}

        return {str(k): str(v) for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: Dict[str, str]) -> None:
        parent = os.path.dirname(self.path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = str(value)
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key not in data:
            return
        del data[key]
        self._write(data)
