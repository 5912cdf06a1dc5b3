"""Local persisted state."""

from wienmonitor.storage.credentials import (
    CredentialError,
    CredentialStore,
    StoredCredentials,
)
from wienmonitor.storage.kv_store import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    "CredentialError",
    "CredentialStore",
    "StoredCredentials",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
]
