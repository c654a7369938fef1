"""Social circle normalization and user preferences."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .models import SocialCircle

_ALIASES = {
    "personal": SocialCircle.PERSONAL,
    "family": SocialCircle.FAMILY,
    "friends": SocialCircle.FRIENDS,
    "friend": SocialCircle.FRIENDS,
    "work": SocialCircle.WORK,
    "professional": SocialCircle.WORK,
    "": SocialCircle.PERSONAL,
    "unknown": SocialCircle.PERSONAL,
}


def normalize_social_circle(raw: Optional[str]) -> SocialCircle:
    """Map a stored circle string onto the closed set of circles.

    Matching is case-insensitive on the trimmed value. Missing values and
    ``unknown`` fall back to Personal, anything unrecognized becomes Other.
    Canonical values map to themselves.
    """
    key = (raw or "").strip().lower()
    return _ALIASES.get(key, SocialCircle.OTHER)


def _default_order() -> Dict[str, int]:
    return {circle.value: index for index, circle in enumerate(SocialCircle)}


@dataclass
class CirclePreferences:
    order: Dict[str, int] = field(default_factory=_default_order)
    disabled: List[str] = field(default_factory=list)

    def position(self, circle: SocialCircle) -> int:
        return self.order.get(circle.value, len(self.order) + list(SocialCircle).index(circle))

    def is_enabled(self, circle: SocialCircle) -> bool:
        return circle.value not in self.disabled

    def enabled_circles(self) -> List[SocialCircle]:
        enabled = [circle for circle in SocialCircle if self.is_enabled(circle)]
        return sorted(enabled, key=self.position)

    def disable(self, circle: SocialCircle) -> None:
        # Personal is the fallback circle and always stays visible.
        if circle is SocialCircle.PERSONAL:
            return
        if circle.value not in self.disabled:
            self.disabled.append(circle.value)

    def enable(self, circle: SocialCircle) -> None:
        if circle.value in self.disabled:
            self.disabled.remove(circle.value)

    def move(self, circle: SocialCircle, index: int) -> None:
        ordered = sorted(SocialCircle, key=self.position)
        ordered.remove(circle)
        index = min(max(index, 0), len(ordered))
        ordered.insert(index, circle)
        self.order = {item.value: pos for pos, item in enumerate(ordered)}
