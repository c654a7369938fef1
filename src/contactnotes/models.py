"""Data models for contactnotes."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Dict, Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class SocialCircle(str, Enum):
    PERSONAL = "Personal"
    FAMILY = "Family"
    FRIENDS = "Friends"
    WORK = "Work"
    OTHER = "Other"


class NoteSource(str, Enum):
    TYPED = "typed"
    VOICE = "voice"
    MIGRATED_LEGACY = "migrated-legacy"


@dataclass
class Contact:
    name: str
    id: str = field(default_factory=new_id)
    phone_number: Optional[str] = None
    email: Optional[str] = None
    birthday: Optional[date] = None
    birthday_note: str = ""
    gift_idea: str = ""
    social_circle_raw: str = SocialCircle.PERSONAL.value
    is_favorite: bool = False
    profile_image: Optional[bytes] = None
    contact_identifier: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    # Pre-timeline free text. Empty once migrated.
    legacy_notes: str = ""

    @property
    def social_circle(self) -> SocialCircle:
        from .circles import normalize_social_circle

        return normalize_social_circle(self.social_circle_raw)

    @social_circle.setter
    def social_circle(self, value: SocialCircle) -> None:
        self.social_circle_raw = SocialCircle(value).value


@dataclass
class Note:
    contact_id: str
    body: str
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    source: NoteSource = NoteSource.TYPED
    headline: Optional[str] = None
    summary: Optional[str] = None
    transcript_language: Optional[str] = None
    audio_duration_sec: Optional[float] = None


@dataclass
class LegacyCheckIn:
    date: datetime
    title: str = ""
    note: str = ""
    contact_id: Optional[str] = None
    id: str = field(default_factory=new_id)


@dataclass
class MigrationState:
    completed: Dict[str, bool] = field(default_factory=dict)

    def is_done(self, key: str) -> bool:
        return bool(self.completed.get(key, False))

    def with_done(self, key: str) -> "MigrationState":
        completed = dict(self.completed)
        completed[key] = True
        return MigrationState(completed=completed)
