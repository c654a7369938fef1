"""Note timeline operations."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from .models import Contact, Note, NoteSource, SocialCircle, utc_now
from .store import RecordStore

HEADLINE_PREVIEW_CHARS = 60


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def add_note(
    store: RecordStore,
    contact: Contact,
    text: str,
    headline: Optional[str] = None,
    source: NoteSource = NoteSource.TYPED,
    transcript_language: Optional[str] = None,
    audio_duration_sec: Optional[float] = None,
    now: Optional[datetime] = None,
) -> Note:
    headline = _clean(headline)
    body = _clean(text) or headline
    if not body:
        raise ValueError("Note needs a headline or some text.")
    stamp = now or utc_now()
    note = Note(
        contact_id=contact.id,
        body=body,
        created_at=stamp,
        updated_at=stamp,
        source=source,
        headline=headline or None,
        transcript_language=transcript_language,
        audio_duration_sec=audio_duration_sec,
    )
    store.insert(note)
    return note


def edit_note(
    note: Note,
    text: str,
    headline: Optional[str] = None,
    summary: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Note:
    headline = _clean(headline)
    summary = _clean(summary)
    content = _clean(text)
    if not (headline or summary or content):
        raise ValueError("Note needs a headline, summary or some text.")
    note.headline = headline or None
    note.summary = summary or None
    note.body = content or summary or headline
    note.updated_at = now or utc_now()
    return note


def sorted_notes(store: RecordStore, contact: Contact) -> List[Note]:
    return sorted(store.notes_for(contact), key=lambda n: n.created_at, reverse=True)


def display_headline(note: Note) -> str:
    headline = _clean(note.headline)
    if headline:
        return headline
    body = _clean(note.body)
    if body:
        return body[:HEADLINE_PREVIEW_CHARS]
    return "Note"


def search_contacts(
    store: RecordStore,
    query: str = "",
    circle: Optional[SocialCircle] = None,
) -> List[Contact]:
    """Contacts whose name or any note body contains ``query``.

    Favorites sort first, then by name.
    """
    needle = query.strip().lower()
    matches = []
    for contact in store.fetch_all(Contact):
        if circle is not None and contact.social_circle is not circle:
            continue
        if needle and needle not in contact.name.lower():
            if not any(needle in note.body.lower() for note in store.notes_for(contact)):
                continue
        matches.append(contact)
    return sorted(matches, key=lambda c: (not c.is_favorite, c.name.lower()))
