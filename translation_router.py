"""Destination language selection for detected clipboard text."""

from __future__ import annotations

from typing import Optional

ENGLISH = "en"


def route_target_language(detected_language: str, configured_target: str) -> Optional[str]:
    """Return the language to translate into, or ``None`` to skip.

    Foreign text always goes to English. English text goes to the configured
    target language. When that leaves nothing to translate the result is
    ``None``.
    """

    destination = ENGLISH if detected_language != ENGLISH else configured_target
    if destination == detected_language:
        return None
    return destination
