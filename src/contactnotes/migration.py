"""One-time migrations that fold legacy records into the note timeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .circles import normalize_social_circle
from .flags import FlagStore
from .models import Contact, LegacyCheckIn, MigrationState, Note, NoteSource
from .store import RecordStore, StoreError

logger = logging.getLogger(__name__)

FOLD_LEGACY_KEY = "migratedLegacyCheckInsToNotes_v1"
NORMALIZE_CONTACTS_KEY = "normalizedContactDefaults_v2"

DEFAULT_CHECK_IN_TITLE = "check-in"


class MigrationError(RuntimeError):
    """A migration step failed. ``state`` holds the steps that did complete."""

    def __init__(self, message: str, state: MigrationState, step: str) -> None:
        super().__init__(message)
        self.state = state
        self.step = step


@dataclass
class FoldResult:
    notes_created: int = 0
    check_ins_deleted: int = 0
    orphans: int = 0


def merge_check_in_body(title: Optional[str], note: Optional[str]) -> str:
    """Combine a legacy check-in title and note into one note body.

    The default "Check-in" title carries no information and is dropped.
    """
    title = (title or "").strip()
    note = (note or "").strip()
    if not title or title.lower() == DEFAULT_CHECK_IN_TITLE:
        return note
    if not note:
        return title
    return f"{title}\n\n{note}"


def fold_legacy_check_ins(store: RecordStore) -> FoldResult:
    result = FoldResult()
    check_ins = store.fetch_all(LegacyCheckIn)
    for check_in in check_ins:
        contact = store.get(Contact, check_in.contact_id)
        if contact is None:
            result.orphans += 1
        else:
            body = merge_check_in_body(check_in.title, check_in.note)
            if body:
                store.insert(
                    Note(
                        contact_id=contact.id,
                        body=body,
                        created_at=check_in.date,
                        updated_at=check_in.date,
                        source=NoteSource.MIGRATED_LEGACY,
                    )
                )
                result.notes_created += 1
        store.delete(check_in)
        result.check_ins_deleted += 1
    logger.info(
        "Folded %s legacy check-ins into %s notes (%s orphaned)",
        result.check_ins_deleted,
        result.notes_created,
        result.orphans,
    )
    return result


def extract_legacy_plain_text(store: RecordStore) -> int:
    created = 0
    for contact in store.fetch_all(Contact):
        text = (contact.legacy_notes or "").strip()
        if not text:
            continue
        store.insert(
            Note(
                contact_id=contact.id,
                body=text,
                created_at=contact.created_at,
                updated_at=contact.created_at,
                source=NoteSource.MIGRATED_LEGACY,
            )
        )
        contact.legacy_notes = ""
        created += 1
    logger.info("Moved legacy plain-text notes for %s contacts", created)
    return created


def normalize_contact_fields(store: RecordStore) -> int:
    changed = 0
    for contact in store.fetch_all(Contact):
        dirty = False
        canonical = normalize_social_circle(contact.social_circle_raw).value
        if contact.social_circle_raw != canonical:
            contact.social_circle_raw = canonical
            dirty = True
        if contact.birthday_note and not contact.birthday_note.strip():
            contact.birthday_note = ""
            dirty = True
        if dirty:
            changed += 1
    logger.info("Normalized fields on %s contacts", changed)
    return changed


def _fold_legacy_records(store: RecordStore) -> None:
    fold_legacy_check_ins(store)
    extract_legacy_plain_text(store)


def _normalize_contacts(store: RecordStore) -> None:
    normalize_contact_fields(store)


STEPS: List[Tuple[str, Callable[[RecordStore], None]]] = [
    (FOLD_LEGACY_KEY, _fold_legacy_records),
    (NORMALIZE_CONTACTS_KEY, _normalize_contacts),
]


def run_migrations(
    store: RecordStore,
    state: MigrationState,
    on_step_done: Optional[Callable[[str], None]] = None,
) -> MigrationState:
    """Run every pending step in order and return the updated state.

    A step only counts as done once ``store.save()`` has returned, at which
    point ``on_step_done`` is called with its key. On failure the step's
    unsaved work is rolled back and ``MigrationError`` is raised.
    """
    for key, step in STEPS:
        if state.is_done(key):
            logger.debug("Migration %s already applied", key)
            continue
        logger.info("Running migration %s", key)
        try:
            step(store)
            store.save()
        except Exception as exc:
            store.rollback()
            logger.exception("Migration %s failed", key)
            raise MigrationError(
                f"Could not update your saved data ({exc}). It will be retried next launch.",
                state=state,
                step=key,
            ) from exc
        state = state.with_done(key)
        if on_step_done is not None:
            on_step_done(key)
    return state


def migrate_if_needed(store: RecordStore, flags: FlagStore) -> MigrationState:
    # Each flag is persisted right after its step commits, so a crash in a
    # later step cannot lose an earlier one.
    return run_migrations(store, flags.load_state(), lambda key: flags.set_bool(key, True))


class MigrationRunner:
    """Runs migrations once per process during startup.

    Failures are logged and returned as a message; they never stop startup.
    """

    def __init__(self, store: RecordStore, flags: FlagStore) -> None:
        self.store = store
        self.flags = flags
        self.attempted = False

    def run_once(self) -> Optional[str]:
        if self.attempted:
            return None
        self.attempted = True
        try:
            migrate_if_needed(self.store, self.flags)
        except (MigrationError, StoreError) as exc:
            logger.error("Startup migration failed: %s", exc)
            return str(exc)
        return None
