"""Smart meter credentials persisted in a key-value store."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
import json
import logging

from wienmonitor.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

STORAGE_KEY = "smartmeter_config"
MISSING_FIELDS_MESSAGE = "Bitte geben Sie Benutzername und Passwort ein."
CLEAR_PROMPT = "Möchten Sie die Smart Meter Konfiguration wirklich löschen?"


class CredentialError(ValueError):
    """Raised when credentials cannot be saved."""


@dataclass(frozen=True)
class StoredCredentials:
    """Credentials as stored; `password` is base64, which is encoding and not encryption."""

    username: str
    password: str
    meter_id: str = ""

    @property
    def secret(self) -> str:
        return decode_secret(self.password)

    def to_json(self) -> str:
        return json.dumps(
            {"username": self.username, "password": self.password, "meterId": self.meter_id}
        )


def encode_secret(secret: str) -> str:
    return base64.b64encode(secret.encode("utf-8")).decode("ascii")


def decode_secret(encoded: str) -> str:
    return base64.b64decode(encoded.encode("ascii"), validate=True).decode("utf-8")


class CredentialStore:
    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def load(self) -> StoredCredentials | None:
        """Return stored credentials, or None when unconfigured or unreadable."""
        raw = self._store.get(STORAGE_KEY)
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Stored smart meter config is not valid JSON, treating as unconfigured")
            return None
        if not isinstance(data, dict) or not data.get("username") or not data.get("password"):
            return None
        credentials = StoredCredentials(
            username=str(data["username"]),
            password=str(data["password"]),
            meter_id=str(data.get("meterId") or ""),
        )
        try:
            decode_secret(credentials.password)
        except (binascii.Error, UnicodeError, ValueError):
            logger.warning("Stored smart meter secret cannot be decoded, treating as unconfigured")
            return None
        return credentials

    def save(self, username: str, password: str, meter_id: str = "") -> StoredCredentials:
        username = username.strip()
        meter_id = meter_id.strip()
        if not username or not password:
            raise CredentialError(MISSING_FIELDS_MESSAGE)
        credentials = StoredCredentials(
            username=username,
            password=encode_secret(password),
            meter_id=meter_id,
        )
        self._store.set(STORAGE_KEY, credentials.to_json())
        logger.info("Saved smart meter credentials for %s", username)
        return credentials

    def clear(self, confirmed: bool) -> bool:
        """Delete stored credentials; does nothing unless `confirmed` is true."""
        if not confirmed:
            return False
        self._store.delete(STORAGE_KEY)
        logger.info("Cleared smart meter credentials")
        return True


__all__ = [
    "CredentialError",
    "CredentialStore",
    "StoredCredentials",
    "encode_secret",
    "decode_secret",
    "STORAGE_KEY",
    "CLEAR_PROMPT",
]
