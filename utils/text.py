"""
Text helpers for identifiers and names coming out of game telemetry.
"""

from typing import Any


def normalize_uid(uid: Any) -> str:
    """
    Normalize an in-game uid for comparison.

    Uids arrive as numbers from some clients and strings from others, so both
    sides of every comparison go through here.

    Examples:
        >>> normalize_uid(5123456789)
        '5123456789'
        >>> normalize_uid(" 5123456789 ")
        '5123456789'
    """
    if uid is None:
        return ""
    return str(uid).strip()


def decode_game_text(text: str | None) -> str:
    """
    Repair a name whose UTF-8 bytes were read one byte per character.

    The game client and older uploads store names like "Ã©quipe"; reading the
    code points back as bytes recovers "équipe". Text that is already clean
    (any code point above 0xFF, or bytes that are not valid UTF-8) is
    returned unchanged.

    Examples:
        >>> decode_game_text("Ã©quipe")
        'équipe'
        >>> decode_game_text("Team Soul")
        'Team Soul'
    """
    if not text:
        return ""
    try:
        return text.encode("latin-1").decode("utf-8")
    except UnicodeError:
        return text
