# coachhub/policy/visibility.py
"""
Redacted player profiles.

A player hides whole field groups (phone, email, address, social, age,
stats) through `privacy_settings` on their profile. The player and their
accepted coaches always see everything; anyone else gets the
always-visible fields plus every group the player left visible.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from coachhub.errors import ValidationError
from coachhub.policy.relationships import Relationship

ALWAYS_VISIBLE: Tuple[str, ...] = (
    "id",
    "display_name",
    "role",
    "photo_url",
    "position",
    "jersey_number",
)

FIELD_GROUPS: Dict[str, Tuple[str, ...]] = {
    "phone": ("phone",),
    "email": ("email",),
    "address": ("address_line1", "address_line2", "city", "state", "zip_code", "country"),
    "social": ("instagram_handle", "twitter_handle"),
    "age": ("date_of_birth", "age"),
    "stats": ("stats", "skill_level", "years_experience", "shoots", "height_inches", "weight_lbs"),
}


def _flag_key(group: str) -> str:
    return f"hide_{group}"


@dataclass(frozen=True)
class PrivacyPolicy:
    hidden: FrozenSet[str] = frozenset()

    def is_hidden(self, group: str) -> bool:
        return group in self.hidden

    @staticmethod
    def from_settings(raw: Optional[Mapping[str, Any]]) -> "PrivacyPolicy":
        """
        Read stored `privacy_settings`. Absent or non-true flags mean visible.
        """
        raw = raw or {}
        return PrivacyPolicy(
            hidden=frozenset(g for g in FIELD_GROUPS if raw.get(_flag_key(g)) is True)
        )

    @staticmethod
    def parse_update(payload: Optional[Mapping[str, Any]]) -> "PrivacyPolicy":
        """Strict parse of a client-supplied flag map."""
        payload = payload or {}
        allowed = {_flag_key(g): g for g in FIELD_GROUPS}
        hidden = set()
        for key, value in payload.items():
            if key not in allowed:
                raise ValidationError(f"Unknown privacy setting: {key!r}")
            if not isinstance(value, bool):
                raise ValidationError(f"Privacy setting {key!r} must be true or false")
            if value:
                hidden.add(allowed[key])
        return PrivacyPolicy(hidden=frozenset(hidden))

    def to_settings(self) -> Dict[str, bool]:
        return {_flag_key(g): g in self.hidden for g in FIELD_GROUPS}


def visible_fields(policy: PrivacyPolicy) -> Tuple[str, ...]:
    fields = list(ALWAYS_VISIBLE)
    for group, members in FIELD_GROUPS.items():
        if not policy.is_hidden(group):
            fields.extend(members)
    return tuple(fields)


def project(
    profile: Mapping[str, Any],
    relationship: Relationship,
    policy: Optional[PrivacyPolicy] = None,
) -> Dict[str, Any]:
    """
    Pure: the output depends only on the arguments. `policy` defaults to
    the one stored on the profile.
    """
    if relationship.sees_everything:
        return dict(profile)

    if policy is None:
        policy = PrivacyPolicy.from_settings(profile.get("privacy_settings"))

    return {f: profile[f] for f in visible_fields(policy) if f in profile}


# ---------- loading ----------
PROFILE_FIELDS: Tuple[str, ...] = ALWAYS_VISIBLE[1:] + tuple(
    f for members in FIELD_GROUPS.values() for f in members if f != "age"
) + (
    "emergency_contact_name",
    "emergency_contact_phone",
    "emergency_contact_relationship",
    "parent_name",
    "parent_email",
    "parent_phone",
    "medical_notes",
)


def _as_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def age_on(dob: Optional[date], today: date) -> Optional[int]:
    if dob is None:
        return None
    years = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        years -= 1
    return years


def profile_from_doc(doc: Mapping[str, Any], *, today: date) -> Dict[str, Any]:
    """
    Flatten a stored profile into the dict `project` works on. `age` is
    derived here against `today`, so projection never reads the clock.
    """
    out: Dict[str, Any] = {"id": str(doc.get("user_id"))}
    for f in PROFILE_FIELDS:
        if f in doc:
            out[f] = doc[f]
    dob = _as_date(doc.get("date_of_birth"))
    if dob is not None:
        out["date_of_birth"] = dob.isoformat()
        out["age"] = age_on(dob, today)
    out["privacy_settings"] = PrivacyPolicy.from_settings(doc.get("privacy_settings")).to_settings()
    return out
