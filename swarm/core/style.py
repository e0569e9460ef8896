"""Voice style transform.

``stylize`` is pure: the same role, text and seed always give the same
output. Randomness is confined to the ``random.Random`` that produces seeds.
"""

from __future__ import annotations

import random
from collections.abc import Mapping

from swarm.models import AgentProfile, VoiceStyle

SEED_RANGE = 10_000

INTROS: tuple[str, ...] = (
    "Alright, listen up.",
    "Boom!",
    "This is actually insane.",
    "Let me tell you something.",
    "This is exactly what we need.",
    "No cap,",
    "Real talk,",
    "Yo,",
    "Straight up,",
)

ENDINGS: tuple[str, ...] = (
    " Let's go!",
    " That's fire!",
    " Clean code, boys!",
    " Ship it!",
    " We're cooking!",
    " This slaps!",
)


def energetic(text: str, style_seed: int) -> str:
    """Add an intro and/or ending phrase, each with a 30% chance.

    Seed digits: units pick whether to add an intro, tens pick which one,
    hundreds pick whether to add an ending, thousands pick which one.
    """
    seed = abs(style_seed)
    if seed % 10 < 3:
        text = f"{INTROS[(seed // 10) % len(INTROS)]} {text}"
    if (seed // 100) % 10 < 3:
        text = f"{text}{ENDINGS[(seed // 1000) % len(ENDINGS)]}"
    return text


def stylize(
    role: str,
    text: str,
    style_seed: int,
    profiles: Mapping[str, AgentProfile] | None = None,
) -> str:
    """Apply the role's voice style to ``text``.

    Roles without a profile, or with the plain style, are returned unchanged.
    """
    profile = (profiles or {}).get(role)
    if profile is None or profile.voice.style != VoiceStyle.ENERGETIC:
        return text
    return energetic(text, style_seed)


def next_seed(rng: random.Random) -> int:
    return rng.randrange(SEED_RANGE)
