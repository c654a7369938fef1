import pytest

from contactnotes.circles import CirclePreferences, normalize_social_circle
from contactnotes.models import Contact, SocialCircle


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Professional", SocialCircle.WORK),
        ("FRIEND", SocialCircle.FRIENDS),
        ("", SocialCircle.PERSONAL),
        ("unrecognized-value", SocialCircle.OTHER),
        ("family", SocialCircle.FAMILY),
        ("  Unknown ", SocialCircle.PERSONAL),
        (None, SocialCircle.PERSONAL),
    ],
)
def test_normalize_social_circle(raw, expected):
    assert normalize_social_circle(raw) is expected


def test_canonical_values_are_fixed_points():
    for circle in SocialCircle:
        assert normalize_social_circle(circle.value) is circle


def test_contact_reads_normalize_and_writes_store_canonical():
    contact = Contact(name="Ana", social_circle_raw="professional")
    assert contact.social_circle is SocialCircle.WORK

    contact.social_circle = SocialCircle.FAMILY
    assert contact.social_circle_raw == "Family"


def test_enabled_circles_follow_order():
    prefs = CirclePreferences()
    prefs.move(SocialCircle.WORK, 0)
    prefs.disable(SocialCircle.OTHER)

    assert prefs.enabled_circles() == [
        SocialCircle.WORK,
        SocialCircle.PERSONAL,
        SocialCircle.FAMILY,
        SocialCircle.FRIENDS,
    ]


def test_personal_cannot_be_disabled():
    prefs = CirclePreferences()
    prefs.disable(SocialCircle.PERSONAL)
    assert prefs.is_enabled(SocialCircle.PERSONAL)


def test_enable_restores_circle():
    prefs = CirclePreferences()
    prefs.disable(SocialCircle.FAMILY)
    prefs.enable(SocialCircle.FAMILY)
    assert SocialCircle.FAMILY in prefs.enabled_circles()
