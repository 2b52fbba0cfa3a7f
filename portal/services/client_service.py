"""
Client record use cases: list, lookup, create, update, delete.

Every call re-reads the JSON document and mutating calls write it back in
full. Writers bound to the same file share one lock, so within a process the
load -> mutate -> save sequence is atomic. Separate processes are not
coordinated and still race (last write wins on the whole document).
"""

from __future__ import annotations

import logging
import threading
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

from portal.core.config import get_settings
from portal.domain.clients import (
    Client,
    ClientFields,
    clean_client_fields,
    parse_client_id,
    stored_id_floor,
)
from portal.repositories import json_storage

logger = logging.getLogger(__name__)


class ClientError(Exception):
    """Base exception for client workflows."""


class ClientNotFoundError(ClientError):
    """Raised when no record carries the requested id."""

    def __init__(self, client_id: Any):
        super().__init__(f"Client {client_id} not found")
        self.client_id = client_id


class ClientValidationError(ClientError):
    """Raised when submitted fields violate one or more constraints."""

    def __init__(self, details: list[str]):
        super().__init__("; ".join(details))
        self.details = list(details)


_write_locks: Dict[str, threading.Lock] = {}
_registry_lock = threading.Lock()


def _write_lock_for(path: Path) -> threading.Lock:
    key = str(Path(path).resolve())
    with _registry_lock:
        lock = _write_locks.get(key)
        if lock is None:
            lock = _write_locks[key] = threading.Lock()
        return lock


class ClientService:
    """Owns the client collection document and its id space."""

    def __init__(self, data_file: Path | None = None, today: Callable[[], date] = date.today) -> None:
        self.data_file = Path(data_file) if data_file else get_settings().data_file
        self._today = today
        self._lock = _write_lock_for(self.data_file)

    # -------------------------------------- persistence --------------------------------------
    def _read(self) -> list:
        """Stored entries in order: a Client per usable record, the raw value otherwise."""
        entries: list = []
        for raw in json_storage.load(self.data_file):
            client = Client.from_dict(raw)
            if client is None:
                logger.warning("Keeping unrecognised entry in %s as stored: %r", self.data_file, raw)
                entries.append(raw)
            else:
                entries.append(client)
        return entries

    def _write(self, entries: list) -> None:
        # unrecognised entries go back exactly as they were read
        json_storage.save(
            [e.to_dict() if isinstance(e, Client) else e for e in entries],
            self.data_file,
        )

    @staticmethod
    def _clients(entries: list) -> list[Client]:
        return [e for e in entries if isinstance(e, Client)]

    @staticmethod
    def _next_id(entries: list) -> int:
        highest = 0
        for entry in entries:
            if isinstance(entry, Client):
                highest = max(highest, entry.id)
            elif isinstance(entry, Mapping):
                highest = max(highest, stored_id_floor(entry.get("id")))
        return highest + 1

    @staticmethod
    def _find(entries: list, client_id: Any) -> Optional[Client]:
        wanted = parse_client_id(client_id)
        if wanted is None:
            return None
        for client in ClientService._clients(entries):
            if client.id == wanted:
                return client
        return None

    @staticmethod
    def _fields(fields: ClientFields | Mapping[str, Any]) -> ClientFields:
        if isinstance(fields, ClientFields):
            return fields
        return clean_client_fields(fields)

    # -------------------------------------- reads --------------------------------------
    def list_all(self) -> list[Client]:
        return self._clients(self._read())

    def find_by_id(self, client_id: Any) -> Optional[Client]:
        return self._find(self._read(), client_id)

    def get(self, client_id: Any) -> Client:
        client = self.find_by_id(client_id)
        if client is None:
            raise ClientNotFoundError(client_id)
        return client

    # -------------------------------------- mutations --------------------------------------
    def create(self, fields: ClientFields | Mapping[str, Any]) -> Client:
        cleaned = self._fields(fields)
        with self._lock:
            entries = self._read()
            errors = cleaned.errors()
            if errors:
                raise ClientValidationError(errors)
            client = Client.new(self._next_id(entries), cleaned, today=self._today())
            entries.append(client)
            self._write(entries)
        logger.info("Created client %s", client.id)
        return client

    def update(self, client_id: Any, fields: ClientFields | Mapping[str, Any]) -> Client:
        cleaned = self._fields(fields)
        with self._lock:
            entries = self._read()
            client = self._find(entries, client_id)
            if client is None:
                raise ClientNotFoundError(client_id)
            errors = cleaned.errors()
            if errors:
                raise ClientValidationError(errors)
            client.apply(cleaned)
            self._write(entries)
        logger.info("Updated client %s", client.id)
        return client

    def delete(self, client_id: Any) -> None:
        with self._lock:
            entries = self._read()
            client = self._find(entries, client_id)
            if client is None:
                raise ClientNotFoundError(client_id)
            self._write([e for e in entries if e is not client])
        logger.info("Deleted client %s", client.id)
