"""Board layout and randomized snake/ladder placement."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)

BOARD_SIZE = 10
CELL_COUNT = BOARD_SIZE * BOARD_SIZE
START_CELL = 0
WIN_CELL = CELL_COUNT - 1

DEFAULT_SNAKES = 8
DEFAULT_LADDERS = 8
MAX_TOTAL_ATTEMPTS = 10_000
MAX_EXIT_ATTEMPTS = 50  # exit picks per start candidate


class GenerationError(RuntimeError):
    """The requested snakes and ladders could not be placed."""


# ── Cells ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Position:
    """Grid coordinates of a cell. Row 0 holds cells 0–9."""

    row: int
    column: int

    @property
    def index(self) -> int:
        return self.row * BOARD_SIZE + self.column

    @classmethod
    def from_index(cls, index: int) -> Position:
        if not 0 <= index < CELL_COUNT:
            raise ValueError(f"Cell index out of range: {index}")
        return cls(row=index // BOARD_SIZE, column=index % BOARD_SIZE)


def row_of(index: int) -> int:
    return index // BOARD_SIZE


# ── Tiles ────────────────────────────────────────────────────────────

class TileKind(str, Enum):
    NONE = "none"
    SNAKE = "snake"
    LADDER = "ladder"
    TARGET = "target"  # winning cell, also marks taken exit cells


@dataclass(frozen=True)
class Tile:
    kind: TileKind = TileKind.NONE
    exit: int | None = None

    @property
    def is_free(self) -> bool:
        return self.kind is TileKind.NONE

    @property
    def is_jump(self) -> bool:
        return self.kind in (TileKind.SNAKE, TileKind.LADDER)


EMPTY = Tile()
TARGET = Tile(TileKind.TARGET)


def snake(exit: int) -> Tile:
    return Tile(TileKind.SNAKE, exit)


def ladder(exit: int) -> Tile:
    return Tile(TileKind.LADDER, exit)


# ── Board ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Board:
    """Immutable 100-cell board indexed by linear cell index."""

    tiles: tuple[Tile, ...]

    def __post_init__(self) -> None:
        if len(self.tiles) != CELL_COUNT:
            raise ValueError(f"A board needs {CELL_COUNT} tiles, got {len(self.tiles)}")
        if self.tiles[START_CELL].kind is not TileKind.NONE:
            raise ValueError("The start cell must stay empty")
        if self.tiles[WIN_CELL].kind is not TileKind.TARGET:
            raise ValueError("The win cell must be a target")

        exits: set[int] = set()
        for start, tile in enumerate(self.tiles):
            if not tile.is_jump:
                continue
            end = tile.exit
            if end is None or not START_CELL < end < WIN_CELL:
                raise ValueError(f"Jump at {start} has an invalid exit {end!r}")
            if tile.kind is TileKind.SNAKE and not row_of(end) < row_of(start):
                raise ValueError(f"Snake {start} → {end} must lead to a lower row")
            if tile.kind is TileKind.LADDER and not row_of(end) > row_of(start):
                raise ValueError(f"Ladder {start} → {end} must lead to a higher row")
            if end in exits or self.tiles[end].kind is not TileKind.TARGET:
                raise ValueError(f"Exit {end} of the jump at {start} overlaps another tile")
            exits.add(end)

    @classmethod
    def from_jumps(
        cls,
        snakes: dict[int, int] | None = None,
        ladders: dict[int, int] | None = None,
    ) -> Board:
        """Build a board from explicit start → exit mappings.

        Raises ValueError if two jumps share a cell or a jump breaks the
        board rules.
        """
        jumps = [(start, end, snake) for start, end in (snakes or {}).items()]
        jumps += [(start, end, ladder) for start, end in (ladders or {}).items()]
        cells = [cell for start, end, _ in jumps for cell in (start, end)]
        if len(cells) != len(set(cells)):
            raise ValueError("Snakes and ladders must not share cells")
        if any(not 0 <= cell < CELL_COUNT for cell in cells):
            raise ValueError("Jump cells must be on the board")

        tiles = [EMPTY] * CELL_COUNT
        tiles[WIN_CELL] = TARGET
        for start, end, make_tile in jumps:
            tiles[start] = make_tile(end)
            if end != WIN_CELL:
                tiles[end] = TARGET
        return cls(tuple(tiles))

    def tile_at(self, index: int) -> Tile:
        return self.tiles[index]

    def _jumps(self, kind: TileKind) -> dict[int, int]:
        return {
            i: tile.exit
            for i, tile in enumerate(self.tiles)
            if tile.kind is kind and tile.exit is not None
        }

    def snakes(self) -> dict[int, int]:
        return self._jumps(TileKind.SNAKE)

    def ladders(self) -> dict[int, int]:
        return self._jumps(TileKind.LADDER)


# ── Generation ───────────────────────────────────────────────────────

# Start ranges exclude the start cell 0 and the win cell 99. Exit ranges are
# derived from the start so the direction constraint holds by construction.
SNAKE_STARTS = range(BOARD_SIZE, WIN_CELL)
LADDER_STARTS = range(1, CELL_COUNT - BOARD_SIZE)


def _snake_exits(start: int) -> range:
    return range(1, row_of(start) * BOARD_SIZE)


def _ladder_exits(start: int) -> range:
    return range((row_of(start) + 1) * BOARD_SIZE, WIN_CELL)


def _try_place(
    tiles: list[Tile],
    rng: random.Random,
    starts: range,
    exits_for: Callable[[int], range],
    make_tile: Callable[[int], Tile],
) -> bool:
    """Try one start candidate. Returns True if a jump was written."""
    start = rng.choice(starts)
    if not tiles[start].is_free:
        return False

    exits = exits_for(start)
    for _ in range(MAX_EXIT_ATTEMPTS):
        end = rng.choice(exits)
        if tiles[end].is_free:
            tiles[start] = make_tile(end)
            tiles[end] = TARGET
            return True
    return False


def generate(
    rng: random.Random,
    snake_count: int = DEFAULT_SNAKES,
    ladder_count: int = DEFAULT_LADDERS,
    max_attempts: int = MAX_TOTAL_ATTEMPTS,
) -> Board:
    """Place *snake_count* snakes then *ladder_count* ladders at random.

    *max_attempts* caps the number of start candidates tried across the whole
    call. Raises GenerationError if the counts are impossible or the budget
    runs out.
    """
    if snake_count < 0 or ladder_count < 0:
        raise GenerationError(
            f"Counts must be non-negative, got {snake_count} snakes and {ladder_count} ladders"
        )
    usable = CELL_COUNT - 2
    if 2 * (snake_count + ladder_count) > usable:
        raise GenerationError(
            f"{snake_count} snakes and {ladder_count} ladders need "
            f"{2 * (snake_count + ladder_count)} cells, only {usable} are usable"
        )

    tiles = [EMPTY] * CELL_COUNT
    tiles[WIN_CELL] = TARGET
    attempts = 0

    plan = (
        ("snake", snake_count, SNAKE_STARTS, _snake_exits, snake),
        ("ladder", ladder_count, LADDER_STARTS, _ladder_exits, ladder),
    )
    for label, count, starts, exits_for, make_tile in plan:
        placed = 0
        while placed < count:
            if attempts >= max_attempts:
                logger.warning(
                    "Gave up after %d attempts with %d/%d %ss placed",
                    attempts, placed, count, label,
                )
                raise GenerationError(
                    f"Could not place {count} {label}s within {max_attempts} attempts "
                    f"({placed} placed)"
                )
            attempts += 1
            if _try_place(tiles, rng, starts, exits_for, make_tile):
                placed += 1

    logger.debug(
        "Generated board: %d snakes, %d ladders in %d attempts",
        snake_count, ladder_count, attempts,
    )
    return Board(tuple(tiles))
