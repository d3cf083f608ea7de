from __future__ import annotations

from salon_booking.application.ports.client_storage import ClientStoragePort


class MemoryClientStorage(ClientStoragePort):
    def __init__(self) -> None:
        self._tokens: dict[str, tuple[str, str]] = {}
        self._intents: dict[str, str] = {}

    def get_token(self, client_id: str) -> str | None:
        entry = self._tokens.get(client_id)
        return entry[0] if entry else None

    def set_token(self, client_id: str, token: str, role: str = "customer") -> None:
        self._tokens[client_id] = (token, role)

    def get_role(self, client_id: str) -> str | None:
        entry = self._tokens.get(client_id)
        return entry[1] if entry else None

    def clear_token(self, client_id: str) -> None:
        self._tokens.pop(client_id, None)

    def get_booking_intent(self, client_id: str) -> str | None:
        return self._intents.get(client_id)

    def set_booking_intent(self, client_id: str, raw_intent: str) -> None:
        self._intents[client_id] = raw_intent

    def clear_booking_intent(self, client_id: str) -> None:
        self._intents.pop(client_id, None)
