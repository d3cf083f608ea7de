from __future__ import annotations

import hashlib
import json
import logging
import re
import threading
from pathlib import Path
from typing import Any

from salon_booking.application.ports.client_storage import ClientStoragePort

_SAFE_ID = re.compile(r"[^A-Za-z0-9_.-]")


class JsonClientStorage(ClientStoragePort):
    """Tokens are persisted to one JSON file per client; booking intents live for the process only."""

    def __init__(self, data_dir: str = "./data/clients") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._intents: dict[str, str] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # Lock for managing locks dict
        self._logger = logging.getLogger(__name__)

    def _get_lock(self, client_id: str) -> threading.Lock:
        """Get or create the lock guarding a client's file."""
        key = self._file_stem(client_id)
        with self._lock_lock:
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]

    def _file_stem(self, client_id: str) -> str:
        safe = _SAFE_ID.sub("_", client_id)
        if safe == client_id:
            return safe
        # Lossy ids get a digest suffix.
        digest = hashlib.sha256(client_id.encode("utf-8")).hexdigest()[:12]
        return f"{safe}-{digest}"

    def _get_file_path(self, client_id: str) -> Path:
        return self._data_dir / f"{self._file_stem(client_id)}.json"

    def _load(self, client_id: str) -> dict[str, Any]:
        """Load client data, return defaults if missing or corrupted."""
        file_path = self._get_file_path(client_id)
        if not file_path.exists():
            return {"client_id": client_id, "token": None, "role": None, "version": 1}
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            self._logger.warning("Client file unreadable, using defaults", extra={"client_id": client_id, "error": str(e)})
            return {"client_id": client_id, "token": None, "role": None, "version": 1}
        if not isinstance(data, dict):
            return {"client_id": client_id, "token": None, "role": None, "version": 1}
        data.setdefault("version", 1)
        return data

    def _save(self, client_id: str, data: dict[str, Any]) -> None:
        """Save client data atomically."""
        file_path = self._get_file_path(client_id)
        temp_path = file_path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(file_path)
        except OSError:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise

    def get_token(self, client_id: str) -> str | None:
        with self._get_lock(client_id):
            return self._load(client_id).get("token") or None

    def set_token(self, client_id: str, token: str, role: str = "customer") -> None:
        with self._get_lock(client_id):
            data = self._load(client_id)
            data["token"] = token
            data["role"] = role
            self._save(client_id, data)

    def get_role(self, client_id: str) -> str | None:
        with self._get_lock(client_id):
            return self._load(client_id).get("role") or None

    def clear_token(self, client_id: str) -> None:
        with self._get_lock(client_id):
            data = self._load(client_id)
            data["token"] = None
            data["role"] = None
            self._save(client_id, data)

    def get_booking_intent(self, client_id: str) -> str | None:
        with self._get_lock(client_id):
            return self._intents.get(client_id)

    def set_booking_intent(self, client_id: str, raw_intent: str) -> None:
        with self._get_lock(client_id):
            self._intents[client_id] = raw_intent

    def clear_booking_intent(self, client_id: str) -> None:
        with self._get_lock(client_id):
            self._intents.pop(client_id, None)
