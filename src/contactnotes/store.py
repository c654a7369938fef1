"""Record persistence for contacts, notes and legacy check-ins."""

from __future__ import annotations

import base64
import copy
import json
import logging
import os
from dataclasses import asdict
from datetime import date, datetime, timezone
from typing import IO, Callable, Dict, List, Optional, Type, TypeVar, Union

from .models import Contact, LegacyCheckIn, Note, NoteSource

logger = logging.getLogger(__name__)

Record = Union[Contact, Note, LegacyCheckIn]
R = TypeVar("R", Contact, Note, LegacyCheckIn)

_SECTIONS = {
    Contact: "contacts",
    Note: "notes",
    LegacyCheckIn: "legacy_check_ins",
}


class StoreError(RuntimeError):
    """Raised when records or flags cannot be read or written."""


def _dump_datetime(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def _load_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def contact_to_dict(contact: Contact) -> dict:
    data = asdict(contact)
    data["birthday"] = contact.birthday.isoformat() if contact.birthday else None
    data["created_at"] = _dump_datetime(contact.created_at)
    if contact.profile_image is not None:
        data["profile_image"] = base64.b64encode(contact.profile_image).decode("ascii")
    return data


def contact_from_dict(data: dict) -> Contact:
    payload = dict(data)
    if payload.get("birthday"):
        payload["birthday"] = date.fromisoformat(payload["birthday"])
    created_at = _load_datetime(payload.pop("created_at", None))
    if created_at is not None:
        payload["created_at"] = created_at
    if payload.get("profile_image") is not None:
        payload["profile_image"] = base64.b64decode(payload["profile_image"])
    # Older files may lack the transitional field entirely.
    payload.setdefault("legacy_notes", "")
    payload["social_circle_raw"] = payload.get("social_circle_raw") or ""
    return Contact(**payload)


def note_to_dict(note: Note) -> dict:
    data = asdict(note)
    data["created_at"] = _dump_datetime(note.created_at)
    data["updated_at"] = _dump_datetime(note.updated_at)
    data["source"] = NoteSource(note.source).value
    return data


def note_from_dict(data: dict) -> Note:
    payload = dict(data)
    payload["created_at"] = _load_datetime(payload.get("created_at"))
    payload["updated_at"] = _load_datetime(payload.get("updated_at")) or payload["created_at"]
    payload["source"] = NoteSource(payload.get("source", NoteSource.TYPED.value))
    return Note(**payload)


def check_in_to_dict(check_in: LegacyCheckIn) -> dict:
    data = asdict(check_in)
    data["date"] = _dump_datetime(check_in.date)
    return data


def check_in_from_dict(data: dict) -> LegacyCheckIn:
    payload = dict(data)
    payload["date"] = _load_datetime(payload.get("date"))
    payload["title"] = payload.get("title") or ""
    payload["note"] = payload.get("note") or ""
    return LegacyCheckIn(**payload)


_ENCODERS = {
    Contact: contact_to_dict,
    Note: note_to_dict,
    LegacyCheckIn: check_in_to_dict,
}

_DECODERS = {
    Contact: contact_from_dict,
    Note: note_from_dict,
    LegacyCheckIn: check_in_from_dict,
}


class RecordStore:
    """In-memory working set over a JSON records file.

    Inserts and deletes are visible to ``fetch_all`` straight away. ``save``
    writes the whole working set in one atomic replace, ``rollback`` throws away
    everything since the last successful save.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = path
        self._records: Dict[type, Dict[str, Record]] = {kind: {} for kind in _SECTIONS}
        self._committed = copy.deepcopy(self._records)

    @classmethod
    def open(cls, path: str) -> "RecordStore":
        store = cls(path)
        if os.path.exists(path):
            store._records = load_records(path)
            store._committed = copy.deepcopy(store._records)
        return store

    def fetch_all(self, kind: Type[R]) -> List[R]:
        return list(self._records[kind].values())

    def get(self, kind: Type[R], record_id: Optional[str]) -> Optional[R]:
        if record_id is None:
            return None
        return self._records[kind].get(record_id)

    def insert(self, record: Record) -> None:
        self._records[type(record)][record.id] = record

    def delete(self, record: Record) -> None:
        removed = self._records[type(record)].pop(record.id, None)
        if removed is None:
            logger.debug("Delete skipped, %s %s already gone", type(record).__name__, record.id)

    def notes_for(self, contact: Contact) -> List[Note]:
        return [note for note in self.fetch_all(Note) if note.contact_id == contact.id]

    def delete_contact(self, contact: Contact) -> int:
        """Delete a contact together with every note it owns.

        Legacy check-ins that pointed at the contact are left orphaned.
        Returns the number of notes removed.
        """
        notes = self.notes_for(contact)
        for note in notes:
            self.delete(note)
        for check_in in self.fetch_all(LegacyCheckIn):
            if check_in.contact_id == contact.id:
                check_in.contact_id = None
        self.delete(contact)
        return len(notes)

    def clear_all(self) -> None:
        for kind in _SECTIONS:
            self._records[kind].clear()

    def save(self) -> None:
        if self.path:
            save_records(self.path, self._records)
        self._committed = copy.deepcopy(self._records)

    def rollback(self) -> None:
        self._records = copy.deepcopy(self._committed)

    def counts(self) -> Dict[str, int]:
        return {section: len(self._records[kind]) for kind, section in _SECTIONS.items()}


def write_atomic(path: str, dump: Callable[[IO[str]], None]) -> None:
    """Write through a sibling temp file, then swap it into place."""
    tmp_path = f"{path}.tmp"
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    try:
        with open(tmp_path, "w", encoding="utf-8") as handle:
            dump(handle)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def save_records(path: str, records: Dict[type, Dict[str, Record]]) -> None:
    try:
        payload = {
            section: [_ENCODERS[kind](item) for item in records[kind].values()]
            for kind, section in _SECTIONS.items()
        }
        write_atomic(path, lambda handle: json.dump(payload, handle, indent=2))
    except (OSError, TypeError, ValueError) as exc:
        raise StoreError(f"Could not save records to {path}: {exc}") from exc


def load_records(path: str) -> Dict[type, Dict[str, Record]]:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle) or {}
        records: Dict[type, Dict[str, Record]] = {}
        for kind, section in _SECTIONS.items():
            items = [_DECODERS[kind](item) for item in data.get(section, [])]
            records[kind] = {item.id: item for item in items}
    except (OSError, ValueError, TypeError, KeyError) as exc:
        raise StoreError(f"Could not load records from {path}: {exc}") from exc
    return records
