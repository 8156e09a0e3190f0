"""
Save File - Named sections wrapping the game-state codec.

A save file is a section count followed by `name / blob` pairs:

    3
    ascent.engine
    +chaos
    ascent.game_state
    <game state blob>
    ascent.log
    <one game log line per line>

Any line starting with ``ascent.`` opens a new section. There is no
version field; the codec is strict instead.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import random

from ..engine_core.state import GameState
from ..engine_core.game_log import GameLog
from ..modifiers import Modifier, parse_modifier
from .codec import (
    NEWLINE,
    INNER_KEY,
    SECTION_PREFIX,
    SaveFormatError,
    encode_game_state,
    decode_game_state,
    parse_int,
)

logger = logging.getLogger(__name__)

ENGINE_SECTION = "ascent.engine"
GAME_STATE_SECTION = "ascent.game_state"
LOG_SECTION = "ascent.log"

REQUIRED_SECTIONS = (ENGINE_SECTION, GAME_STATE_SECTION)
ENCODING = "utf-8"


@dataclass
class SavedGame:
    """Everything a save file restores."""
    state: GameState
    modifier: Modifier | None = None
    game_log: GameLog = field(default_factory=GameLog)


# =============================================================================
# Sections
# =============================================================================

def write_sections(sections: dict[str, str]) -> str:
    parts = [f"{len(sections)}{NEWLINE}"]
    for name, blob in sections.items():
        parts.append(f"{name}{NEWLINE}")
        parts.append(blob if blob.endswith(NEWLINE) or not blob else blob + NEWLINE)
    return "".join(parts)


def read_sections(text: str) -> dict[str, str]:
    """Split save text into its named sections, checking the declared count."""
    lines = text.splitlines()
    if not lines:
        raise SaveFormatError("Save file is empty")

    declared = parse_int(lines[0], "section count")

    sections: dict[str, list[str]] = {}
    current = None
    for line in lines[1:]:
        if line.startswith(SECTION_PREFIX):
            current = line.strip()
            if current in sections:
                raise SaveFormatError(f"Duplicate section: {current}")
            sections[current] = []
        elif current is not None:
            sections[current].append(line)
        elif line.strip():
            raise SaveFormatError(f"Data before the first section: {line!r}")

    if len(sections) != declared:
        raise SaveFormatError(f"Save declares {declared} sections but contains {len(sections)}")
    for name in REQUIRED_SECTIONS:
        if name not in sections:
            raise SaveFormatError(f"Missing section: {name}")
    return {name: NEWLINE.join(body) for name, body in sections.items()}


# =============================================================================
# Engine section
# =============================================================================

def encode_engine(modifier: Modifier | None) -> str:
    name = modifier.name if modifier is not None else ""
    return f"{INNER_KEY}{name}{NEWLINE}"


def decode_engine(text: str, rng: random.Random | None = None) -> Modifier | None:
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    if len(lines) != 1 or not lines[0].startswith(INNER_KEY):
        raise SaveFormatError(f"Invalid engine section: {text!r}")
    name = lines[0][len(INNER_KEY):]
    if not name:
        return None
    return parse_modifier(name, rng=rng)


# =============================================================================
# Log section
# =============================================================================

def encode_log(game_log: GameLog | None) -> str:
    if game_log is None:
        return ""
    for entry in game_log.entries:
        if entry.startswith(SECTION_PREFIX) or entry.splitlines() != [entry]:
            raise SaveFormatError(f"Log line cannot be saved: {entry!r}")
    return game_log.save()


# =============================================================================
# Whole files
# =============================================================================

def save_game(
    state: GameState,
    modifier: Modifier | None = None,
    game_log: GameLog | None = None,
) -> str:
    """Serialize a game to save-file text."""
    sections = {
        ENGINE_SECTION: encode_engine(modifier),
        GAME_STATE_SECTION: encode_game_state(state),
        LOG_SECTION: encode_log(game_log),
    }
    return write_sections(sections)


def load_game(text: str, rng: random.Random | None = None) -> SavedGame:
    """
    Parse save-file text into a fresh game.

    Raises:
        SaveFormatError: if any section is malformed
    """
    sections = read_sections(text)
    modifier = decode_engine(sections[ENGINE_SECTION], rng=rng)
    state = decode_game_state(sections[GAME_STATE_SECTION])
    game_log = GameLog.load(sections.get(LOG_SECTION, ""))
    logger.debug(
        "Loaded game: turn %d, %d players, modifier %s",
        state.turn_number, state.num_players, modifier,
    )
    return SavedGame(state=state, modifier=modifier, game_log=game_log)


def save_to_bytes(
    state: GameState,
    modifier: Modifier | None = None,
    game_log: GameLog | None = None,
) -> bytes:
    return save_game(state, modifier, game_log).encode(ENCODING)


def load_from_bytes(data: bytes, rng: random.Random | None = None) -> SavedGame:
    try:
        text = data.decode(ENCODING)
    except UnicodeDecodeError as e:
        raise SaveFormatError(f"Save file is not valid {ENCODING}: {e}") from None
    return load_game(text, rng=rng)
