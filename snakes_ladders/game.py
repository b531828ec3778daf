"""Game setup, state and the runner that plays a game to its end."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from snakes_ladders.board import (
    DEFAULT_LADDERS,
    DEFAULT_SNAKES,
    START_CELL,
    Board,
    Position,
    Tile,
    generate,
)

if TYPE_CHECKING:
    from snakes_ladders.engine import TurnEngine

MIN_PLAYERS = 2
MAX_PLAYERS = 4
MAX_NAME_LENGTH = 25

# Seat colours in the order the setup menu hands them out.
DEFAULT_COLORS = ("red", "green", "blue", "yellow")


class ConfigError(ValueError):
    """The game configuration is outside what the engine supports."""


class Mode(str, Enum):
    """How a landing player interacts with players already on the cell."""

    FRIENDLY = "friendly"
    BUMP = "bump"
    SWAP = "swap"


# ── Configuration ────────────────────────────────────────────────────

@dataclass
class PlayerConfig:
    name: str
    color: str | None = None


@dataclass
class GameConfig:
    """Everything needed to start a game."""

    players: list[PlayerConfig] = field(default_factory=list)
    mode: Mode | str = Mode.FRIENDLY
    snake_count: int = DEFAULT_SNAKES
    ladder_count: int = DEFAULT_LADDERS

    def validate(self) -> GameConfig:
        """Return a normalised copy, or raise ConfigError.

        Names are stripped and cut to 25 characters, colours are lower-cased,
        missing colours are filled from the default palette and string modes
        are coerced. Players may be given as ``{"name": ..., "color": ...}``
        mappings.
        """
        if not isinstance(self.players, (list, tuple)):
            raise ConfigError(f"Players must be a list, got {type(self.players).__name__}")
        if not MIN_PLAYERS <= len(self.players) <= MAX_PLAYERS:
            raise ConfigError(
                f"Need {MIN_PLAYERS}–{MAX_PLAYERS} players, got {len(self.players)}"
            )

        for label, count in (("snake_count", self.snake_count), ("ladder_count", self.ladder_count)):
            if not isinstance(count, int) or isinstance(count, bool) or count < 0:
                raise ConfigError(f"{label} must be a non-negative integer, got {count!r}")

        try:
            mode = Mode(self.mode.lower() if isinstance(self.mode, str) else self.mode)
        except ValueError:
            raise ConfigError(f"Unknown mode: {self.mode!r}") from None

        entries = [_coerce_player(i, p) for i, p in enumerate(self.players)]
        taken = {p.color for p in entries if p.color}
        palette = [c for c in DEFAULT_COLORS if c not in taken]
        players: list[PlayerConfig] = []
        seen_colors: set[str] = set()
        for i, p in enumerate(entries):
            color = p.color
            if not color:
                if not palette:
                    raise ConfigError(f"No colour left for player {i + 1}")
                color = palette.pop(0)
            if color in seen_colors:
                raise ConfigError(f"Colour {color!r} is used by more than one player")
            seen_colors.add(color)
            players.append(PlayerConfig(name=p.name, color=color))

        return GameConfig(
            players=players,
            mode=mode,
            snake_count=self.snake_count,
            ladder_count=self.ladder_count,
        )


def _coerce_player(i: int, entry: PlayerConfig | dict) -> PlayerConfig:
    """Check one player entry and return it with a clean name and colour."""
    if isinstance(entry, dict):
        name, color = entry.get("name"), entry.get("color")
    elif isinstance(entry, PlayerConfig):
        name, color = entry.name, entry.color
    else:
        raise ConfigError(f"Player {i + 1} must be a PlayerConfig or mapping, got {entry!r}")

    if not isinstance(name, str) or not name.strip():
        raise ConfigError(f"Player {i + 1} has an empty name")
    if color is not None and not isinstance(color, str):
        raise ConfigError(f"Player {i + 1} has an invalid colour: {color!r}")
    color = color.strip().lower() if color else None
    return PlayerConfig(name=name.strip()[:MAX_NAME_LENGTH], color=color or None)


# ── State ────────────────────────────────────────────────────────────

@dataclass
class Player:
    name: str
    color: str
    position: Position = field(default_factory=lambda: Position.from_index(START_CELL))

    @property
    def cell(self) -> int:
        return self.position.index


@dataclass(frozen=True)
class PlayerView:
    name: str
    color: str
    position: Position

    @property
    def cell(self) -> int:
        return self.position.index


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only copy of a game for display code."""

    tiles: tuple[Tile, ...]
    players: tuple[PlayerView, ...]
    mode: Mode
    dice_value: int
    current_turn_index: int
    ended: bool
    winner: int | None


@dataclass
class GameState:
    """Mutable state of one game. Only TurnEngine changes it after setup."""

    board: Board
    players: list[Player]
    mode: Mode = Mode.FRIENDLY
    current_turn_index: int = 0
    dice_value: int = 0  # 0 until the first roll
    ended: bool = False
    winner: int | None = None
    turn_number: int = 0

    @property
    def current_player(self) -> Player:
        return self.players[self.current_turn_index]

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            tiles=self.board.tiles,
            players=tuple(PlayerView(p.name, p.color, p.position) for p in self.players),
            mode=self.mode,
            dice_value=self.dice_value,
            current_turn_index=self.current_turn_index,
            ended=self.ended,
            winner=self.winner,
        )


def new_game(config: GameConfig, rng: random.Random) -> GameState:
    """Validate *config*, generate a board and seat everyone on cell 0.

    Raises ConfigError for a bad config and GenerationError if the board
    cannot be built.
    """
    cfg = config.validate()
    board = generate(rng, snake_count=cfg.snake_count, ladder_count=cfg.ladder_count)
    players = [Player(name=p.name, color=p.color or "") for p in cfg.players]
    return GameState(board=board, players=players, mode=Mode(cfg.mode))


def ranking(state: GameState | GameSnapshot) -> list[tuple[int, Player | PlayerView]]:
    """Players by descending progress. Ties keep their seating order."""
    ordered = sorted(state.players, key=lambda p: p.position.index, reverse=True)
    return [(rank, p) for rank, p in enumerate(ordered, start=1)]


# ── Runner ───────────────────────────────────────────────────────────

@dataclass
class GameResult:
    winner: int | None  # player index, None if the turn cap was hit
    reason: str  # "win" | "max_turns"
    turns: int = 0


class GameRunner:
    """Roll turns until somebody wins or the turn cap is reached."""

    def __init__(self, state: GameState, engine: TurnEngine, max_turns: int = 1000):
        self.state = state
        self.engine = engine
        self.max_turns = max_turns

    def play(self) -> GameResult:
        while not self.state.ended:
            if self.state.turn_number >= self.max_turns:
                return GameResult(
                    winner=None, reason="max_turns", turns=self.state.turn_number,
                )
            self.engine.roll_turn(self.state)

        return GameResult(
            winner=self.state.winner, reason="win", turns=self.state.turn_number,
        )
