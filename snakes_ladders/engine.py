"""Turn resolution: dice, movement, win detection and player interaction."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Protocol

from snakes_ladders.board import START_CELL, WIN_CELL, Position, TileKind
from snakes_ladders.game import GameState, Mode

logger = logging.getLogger(__name__)

DICE_SIDES = 6


# ── Structured types ────────────────────────────────────────────────

@dataclass
class TurnRecord:
    """What happened during one call to roll_turn."""

    turn_number: int
    player: int
    dice_value: int
    start: int
    target: int
    end: int
    tile: TileKind | None = None  # snake/ladder taken, if any
    overshoot: bool = False
    won: bool = False
    bonus_roll: bool = False
    relocated: dict[int, int] = field(default_factory=dict)  # player index → new cell


# ── Observer ────────────────────────────────────────────────────────

class TurnObserver(Protocol):
    """Receives a record for every resolved turn."""

    def on_turn(self, record: TurnRecord) -> None: ...


@dataclass
class ListObserver:
    """Default observer: collects records into a list."""

    records: list[TurnRecord] = field(default_factory=list)

    def on_turn(self, record: TurnRecord) -> None:
        self.records.append(record)


# ── Engine ───────────────────────────────────────────────────────────

class TurnEngine:
    """The only thing that mutates a GameState once the game has started."""

    def __init__(self, rng: random.Random, observer: TurnObserver | None = None):
        self.rng = rng
        self.observer = observer or ListObserver()

    def roll_die(self) -> int:
        return self.rng.randint(1, DICE_SIDES)

    def roll_turn(self, state: GameState) -> GameState:
        """Play one full turn for the current player.

        Does nothing once the game has ended; the last dice value stays.
        """
        if state.ended:
            return state

        dice = self.roll_die()
        state.dice_value = dice
        state.turn_number += 1

        mover_idx = state.current_turn_index
        mover = state.current_player
        start = mover.cell
        target = start + dice

        # A six keeps the turn; otherwise pass it on before moving.
        bonus = dice == DICE_SIDES
        if not bonus:
            state.current_turn_index = (mover_idx + 1) % len(state.players)

        record = TurnRecord(
            turn_number=state.turn_number,
            player=mover_idx,
            dice_value=dice,
            start=start,
            target=target,
            end=start,
            bonus_roll=bonus,
        )

        if target > WIN_CELL:
            record.overshoot = True
        elif target == WIN_CELL:
            mover.position = Position.from_index(WIN_CELL)
            state.ended = True
            state.winner = mover_idx
            record.end = WIN_CELL
            record.won = True
            logger.info("%s wins on turn %d", mover.name, state.turn_number)
        else:
            tile = state.board.tile_at(target)
            end = target
            if tile.is_jump and tile.exit is not None:
                end = tile.exit
                record.tile = tile.kind
            mover.position = Position.from_index(end)
            record.end = end
            record.relocated = self._interact(state, mover_idx, start)

        logger.debug(
            "Turn %d: %s rolled %d, %d → %d%s",
            record.turn_number, mover.name, dice, start, record.end,
            " (overshoot)" if record.overshoot else "",
        )
        self.observer.on_turn(record)
        return state

    def _interact(self, state: GameState, mover_idx: int, old_cell: int) -> dict[int, int]:
        """Apply the game mode to players sharing the mover's new cell."""
        landed = state.players[mover_idx].position
        moved: dict[int, int] = {}
        if state.mode is Mode.FRIENDLY:
            return moved

        for i, other in enumerate(state.players):
            if i == mover_idx or other.position != landed:
                continue
            if state.mode is Mode.BUMP:
                other.position = Position.from_index(START_CELL)
                moved[i] = START_CELL
            elif state.mode is Mode.SWAP:
                # Only the first occupant in seating order trades places.
                other.position = Position.from_index(old_cell)
                moved[i] = old_cell
                break
        return moved
