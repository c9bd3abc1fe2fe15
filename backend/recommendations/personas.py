from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Persona(str, Enum):
    family = "Family"
    business = "Business"
    luxury = "Luxury"
    solo = "Solo"
    couple = "Couple"


@dataclass(frozen=True)
class PersonaProfile:
    query: str = ""
    bonus_keywords: tuple[str, ...] = field(default_factory=tuple)


PERSONA_PROFILES: dict[Persona, PersonaProfile] = {
    Persona.family: PersonaProfile(
        query="family friendly kids children pool playground safe amenities",
        bonus_keywords=("family", "kids", "children", "pool", "playground"),
    ),
    Persona.business: PersonaProfile(
        query="business meeting conference wifi executive professional",
        bonus_keywords=("business", "meeting", "conference", "executive", "wifi"),
    ),
    Persona.luxury: PersonaProfile(
        query="luxury premium spa fine dining exceptional service",
        bonus_keywords=("luxury", "spa", "fine", "premium", "exceptional"),
    ),
    Persona.solo: PersonaProfile(
        query="safe secure central location convenient transportation",
        bonus_keywords=("safe", "secure", "central", "convenient", "transport"),
    ),
    Persona.couple: PersonaProfile(
        query="romantic intimate spa dining views peaceful quiet",
        bonus_keywords=("romantic", "intimate", "peaceful", "quiet", "views"),
    ),
}

_EMPTY_PROFILE = PersonaProfile()


def get_profile(persona: str | Persona) -> PersonaProfile:
    """Look up a persona profile; unknown personas get an empty profile."""
    try:
        return PERSONA_PROFILES[Persona(persona)]
    except ValueError:
        return _EMPTY_PROFILE
