from __future__ import annotations

import logging

from salon_booking.application.ports.client_storage import ClientStoragePort
from salon_booking.application.ports.salon_api import SalonApiPort
from salon_booking.domain.entities.auth_session import AuthSession


class AuthUseCase:
    def __init__(self, api: SalonApiPort, storage: ClientStoragePort) -> None:
        self._api = api
        self._storage = storage
        self._logger = logging.getLogger(__name__)

    def login(self, client_id: str, email: str, password: str) -> AuthSession:
        session = self._api.login(email=email, password=password)
        self._storage.set_token(client_id, session.token, session.role)
        self._logger.info("Logged in", extra={"client_id": client_id, "role": session.role})
        return session

    def signup(
        self,
        client_id: str,
        first_name: str,
        last_name: str,
        email: str,
        phone: str,
        password: str,
        confirm_password: str,
    ) -> AuthSession:
        if password != confirm_password:
            raise ValueError("Passwords do not match")
        session = self._api.signup(
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            password=password,
            confirm_password=confirm_password,
        )
        self._storage.set_token(client_id, session.token, session.role)
        self._logger.info("Signed up", extra={"client_id": client_id, "role": session.role})
        return session

    def logout(self, client_id: str) -> None:
        self._storage.clear_token(client_id)
        self._logger.info("Logged out", extra={"client_id": client_id})

    def landing_page(self, client_id: str, session: AuthSession) -> str:
        """Page to show after authenticating; a pending booking intent resumes the wizard."""
        if session.role == "admin":
            return "admin"
        if self._storage.get_booking_intent(client_id):
            return "booking"
        return "profile"
