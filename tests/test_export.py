import json
import os
import tempfile
from datetime import datetime, timezone

from contactnotes.export import export_payload, write_export
from contactnotes.models import Contact, Note, NoteSource
from contactnotes.store import RecordStore


def test_export_payload_contains_contacts_and_notes():
    store = RecordStore()
    contact = Contact(name="Ana", social_circle_raw="friend", gift_idea="Book")
    store.insert(contact)
    store.insert(
        Note(contact_id=contact.id, body="Migrated", source=NoteSource.MIGRATED_LEGACY)
    )
    now = datetime(2024, 5, 1, tzinfo=timezone.utc)

    payload = export_payload(store, now)

    assert payload["exportDate"] == now.isoformat()
    assert payload["storage"] == "on-device-only"
    (exported_contact,) = payload["contacts"]
    assert exported_contact["socialCircle"] == "Friends"
    assert exported_contact["giftIdea"] == "Book"
    assert exported_contact["birthday"] == ""
    (exported_note,) = payload["notes"]
    assert exported_note["source"] == "migrated-legacy"
    assert exported_note["contactId"] == contact.id


def test_write_export():
    store = RecordStore()
    store.insert(Contact(name="Ana"))
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "export.json")
        write_export(path, export_payload(store))
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    assert data["contacts"][0]["name"] == "Ana"
