"""
Codec - Plain-text encoding of a full GameState.

Layout of a game-state blob:

    <turn_number>$<current_player_index>
    +board
    <width>$<height>
    <h>,<fogged>$<h>,<fogged>$...        one line per board row
    +players
    <player_count>$<workers_per_player>
    <name>$<power_name>$<has_acted>      one line per player...
    (<x>,<y>)                            ...followed by one line per worker

Decoding is strict: any count, number or flag that does not parse, or a
missing block, raises SaveFormatError. Unknown power names are not an
error; the player simply has no power.
"""

from __future__ import annotations

from ..engine_core.board import Board
from ..engine_core.state import GameState, Player, Position, Tower, Worker
from ..powers import parse_power

NEWLINE = "\n"
DELIMITER = "$"
INNER_KEY = "+"
COMMA = ","
SECTION_PREFIX = "ascent."

BOARD_KEY = "board"
PLAYERS_KEY = "players"


class SaveFormatError(ValueError):
    """Raised when saved text cannot be turned back into a game."""


# =============================================================================
# Primitive fields
# =============================================================================

def parse_int(text: str, what: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        raise SaveFormatError(f"Invalid {what}: {text!r}") from None


def parse_bool(text: str, what: str) -> bool:
    value = text.strip().lower()
    if value == "true":
        return True
    if value == "false":
        return False
    raise SaveFormatError(f"Invalid {what}: {text!r}")


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def encode_position(position: Position) -> str:
    return f"({position.x}{COMMA}{position.y})"


def decode_position(text: str) -> Position:
    text = text.strip()
    if not (text.startswith("(") and text.endswith(")")):
        raise SaveFormatError(f"Invalid position: {text!r}")
    parts = text[1:-1].split(COMMA)
    if len(parts) != 2:
        raise SaveFormatError(f"Invalid position: {text!r}")
    return Position(parse_int(parts[0], "x coordinate"), parse_int(parts[1], "y coordinate"))


def split_fields(line: str, expected: int, what: str) -> list[str]:
    """Split a delimited line, tolerating one trailing delimiter."""
    fields = line.strip().split(DELIMITER)
    if fields and fields[-1] == "" and len(fields) == expected + 1:
        fields = fields[:-1]
    if len(fields) != expected:
        raise SaveFormatError(f"Expected {expected} fields in {what}, got {len(fields)}: {line!r}")
    return fields


# =============================================================================
# Board
# =============================================================================

def encode_board(board: Board) -> str:
    lines = [f"{board.width}{DELIMITER}{board.height}"]
    for y in range(board.height):
        cells = []
        for x in range(board.width):
            tower = board.tower_at(Position(x, y))
            cells.append(f"{tower.height}{COMMA}{format_bool(tower.fogged)}")
        lines.append(DELIMITER.join(cells))
    return NEWLINE.join(lines) + NEWLINE


def _decode_tower(text: str) -> Tower:
    parts = text.split(COMMA)
    if len(parts) != 2:
        raise SaveFormatError(f"Invalid tower: {text!r}")
    height = parse_int(parts[0], "tower height")
    if not 0 <= height <= Tower.MAXIMUM_HEIGHT:
        raise SaveFormatError(f"Tower height out of range: {height}")
    tower = Tower()
    for _ in range(height):
        tower.build_floor()
    tower.fogged = parse_bool(parts[1], "fog flag")
    return tower


def decode_board(text: str) -> Board:
    lines = [line for line in text.strip().splitlines() if line.strip()]
    if not lines:
        raise SaveFormatError("Board block is empty")

    width_text, height_text = split_fields(lines[0], 2, "board dimensions")
    width = parse_int(width_text, "board width")
    height = parse_int(height_text, "board height")
    if width <= 0 or height <= 0:
        raise SaveFormatError(f"Invalid board dimensions: {width}x{height}")
    if len(lines) - 1 != height:
        raise SaveFormatError(f"Expected {height} board rows, got {len(lines) - 1}")

    board = Board(width, height)
    for y in range(height):
        cells = split_fields(lines[y + 1], width, f"board row {y}")
        for x, cell in enumerate(cells):
            decoded = _decode_tower(cell)
            tower = board.tower_at(Position(x, y))
            tower.floors = decoded.floors
            tower.fogged = decoded.fogged
    return board


# =============================================================================
# Players
# =============================================================================

def player_name_problem(name: str) -> str | None:
    """
    Why a player name cannot be stored in a save, or None if it can.

    Names sit unquoted at the start of lines, in both the player block
    and the game log, so they must survive being split on the delimiter
    and must not look like a block or section header.
    """
    if not name:
        return "Player name is empty"
    if name != name.strip():
        return f"Player name {name!r} has leading or trailing whitespace"
    if DELIMITER in name or name.splitlines() != [name]:
        return f"Player name {name!r} cannot contain {DELIMITER!r} or line breaks"
    if name.startswith(INNER_KEY):
        return f"Player name {name!r} cannot start with {INNER_KEY!r}"
    if name.startswith(SECTION_PREFIX):
        return f"Player name {name!r} cannot start with {SECTION_PREFIX!r}"
    return None


def encode_player(player: Player) -> str:
    has_acted = not player.can_select_worker
    return DELIMITER.join([player.name, player.power_name, format_bool(has_acted)])


def decode_player(line: str) -> Player:
    name, power_name, has_acted = split_fields(line, 3, "player line")
    if not name:
        raise SaveFormatError("Player name is empty")
    return Player(
        name=name,
        power=parse_power(power_name),
        can_select_worker=not parse_bool(has_acted, "player turn flag"),
    )


def encode_players(state: GameState) -> str:
    workers_per_player = len(state.players[0].workers) if state.players else 0
    lines = [f"{state.num_players}{DELIMITER}{workers_per_player}"]
    for player in state.players:
        if len(player.workers) != workers_per_player:
            raise SaveFormatError(f"{player} has a different number of workers than player 1")
        problem = player_name_problem(player.name)
        if problem:
            raise SaveFormatError(problem)
        lines.append(encode_player(player))
        for worker in player.workers:
            position = state.board.position_of(worker)
            if position is None:
                raise SaveFormatError(f"{worker} of {player} is not on the board")
            lines.append(encode_position(position))
    return NEWLINE.join(lines) + NEWLINE


def decode_players(text: str, board: Board) -> list[Player]:
    lines = [line for line in text.strip().splitlines() if line.strip()]
    if not lines:
        raise SaveFormatError("Player block is empty")

    count_text, workers_text = split_fields(lines[0], 2, "player header")
    number_of_players = parse_int(count_text, "player count")
    number_of_workers = parse_int(workers_text, "workers per player")
    if number_of_players < 1 or number_of_workers < 0:
        raise SaveFormatError(
            f"Invalid player header: {number_of_players} players, {number_of_workers} workers"
        )

    expected_lines = 1 + number_of_players * (number_of_workers + 1)
    if len(lines) != expected_lines:
        raise SaveFormatError(f"Expected {expected_lines} player block lines, got {len(lines)}")

    players = []
    next_worker_id = 0
    for i in range(number_of_players):
        player_line = 1 + i * (number_of_workers + 1)
        player = decode_player(lines[player_line])
        for j in range(number_of_workers):
            position = decode_position(lines[player_line + j + 1])
            if not board.is_valid_position(position):
                raise SaveFormatError(f"Worker position {position} is off the board")
            if board.is_occupied(position):
                raise SaveFormatError(f"Two workers saved at {position}")
            worker = Worker(worker_id=next_worker_id, label=f"P{i + 1}W{j + 1}")
            next_worker_id += 1
            player.add_worker(worker)
            board.add_worker(position, worker)
        players.append(player)
    return players


# =============================================================================
# Game state
# =============================================================================

def encode_game_state(state: GameState) -> str:
    """Serialize turn counters, board and players."""
    parts = [
        f"{state.turn_number}{DELIMITER}{state.current_player_index}{NEWLINE}",
        f"{INNER_KEY}{BOARD_KEY}{NEWLINE}",
        encode_board(state.board),
        f"{INNER_KEY}{PLAYERS_KEY}{NEWLINE}",
        encode_players(state),
    ]
    return "".join(parts)


def split_inner_blocks(text: str) -> dict[str, str]:
    """Group the lines following each `+key` marker line."""
    blocks: dict[str, str] = {}
    key = None
    collected: list[str] = []
    for line in text.splitlines():
        if line.startswith(INNER_KEY):
            if key is not None:
                blocks[key] = NEWLINE.join(collected)
            key = line[len(INNER_KEY):].strip()
            if key in blocks:
                raise SaveFormatError(f"Duplicate block: {key}")
            collected = []
        elif key is not None:
            collected.append(line)
    if key is not None:
        blocks[key] = NEWLINE.join(collected)
    return blocks


def decode_game_state(text: str) -> GameState:
    """
    Rebuild a GameState from its blob.

    The loaded game resumes at the start of the saved player's turn.
    """
    lines = text.strip().splitlines()
    if not lines:
        raise SaveFormatError("Game state is empty")

    turn_text, index_text = split_fields(lines[0], 2, "game state header")
    turn_number = parse_int(turn_text, "turn number")
    current_player_index = parse_int(index_text, "current player index")

    blocks = split_inner_blocks(text)
    for key in (BOARD_KEY, PLAYERS_KEY):
        if key not in blocks:
            raise SaveFormatError(f"Missing {key} block")

    board = decode_board(blocks[BOARD_KEY])
    players = decode_players(blocks[PLAYERS_KEY], board)

    if turn_number < 0:
        raise SaveFormatError(f"Invalid turn number: {turn_number}")
    if not 0 <= current_player_index < len(players):
        raise SaveFormatError(f"Current player index {current_player_index} out of range")

    return GameState(
        board=board,
        players=players,
        current_player_index=current_player_index,
        turn_number=turn_number,
    )
