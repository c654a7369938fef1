"""JSON export of the record set."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Optional

from .models import Contact, Note, utc_now
from .store import RecordStore, StoreError


def _iso(value: Optional[datetime]) -> str:
    return value.isoformat() if value else ""


def export_payload(store: RecordStore, now: Optional[datetime] = None) -> dict:
    contacts = sorted(store.fetch_all(Contact), key=lambda c: c.name.lower())
    notes = sorted(store.fetch_all(Note), key=lambda n: n.created_at)
    return {
        "exportDate": _iso(now or utc_now()),
        "storage": "on-device-only",
        "contacts": [
            {
                "id": contact.id,
                "name": contact.name,
                "phoneNumber": contact.phone_number or "",
                "email": contact.email or "",
                "birthday": contact.birthday.isoformat() if contact.birthday else "",
                "birthdayNote": contact.birthday_note,
                "giftIdea": contact.gift_idea,
                "socialCircle": contact.social_circle.value,
                "isFavorite": contact.is_favorite,
                "createdAt": _iso(contact.created_at),
            }
            for contact in contacts
        ],
        "notes": [
            {
                "id": note.id,
                "createdAt": _iso(note.created_at),
                "updatedAt": _iso(note.updated_at),
                "headline": note.headline or "",
                "summary": note.summary or "",
                "body": note.body,
                "source": note.source.value,
                "transcriptLanguage": note.transcript_language or "",
                "audioDurationSec": note.audio_duration_sec or 0,
                "contactId": note.contact_id,
            }
            for note in notes
        ],
    }


def write_export(path: str, payload: dict) -> None:
    try:
        with open(path, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)
    except OSError as exc:
        raise StoreError(f"Could not write export to {path}: {exc}") from exc
