from abc import ABC, abstractmethod


class ClientStoragePort(ABC):
    """Per-client storage: a persistent auth token and a session-scoped booking intent."""

    @abstractmethod
    def get_token(self, client_id: str) -> str | None:
        raise NotImplementedError

    @abstractmethod
    def set_token(self, client_id: str, token: str, role: str = "customer") -> None:
        raise NotImplementedError

    @abstractmethod
    def get_role(self, client_id: str) -> str | None:
        raise NotImplementedError

    @abstractmethod
    def clear_token(self, client_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_booking_intent(self, client_id: str) -> str | None:
        """Return the serialized booking intent, or None if nothing was chosen."""
        raise NotImplementedError

    @abstractmethod
    def set_booking_intent(self, client_id: str, raw_intent: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def clear_booking_intent(self, client_id: str) -> None:
        raise NotImplementedError
