"""Batch simulation and per-seat statistics."""

from __future__ import annotations

import random
from dataclasses import dataclass, field

from snakes_ladders.engine import TurnEngine
from snakes_ladders.game import GameConfig, GameResult, GameRunner, new_game


@dataclass
class SeatStats:
    """Aggregate outcome of many games played with the same seating."""

    names: list[str]
    colors: list[str] = field(default_factory=list)
    games: int = 0
    wins: list[int] = field(default_factory=list)
    unfinished: int = 0
    turns: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.wins:
            self.wins = [0] * len(self.names)

    def add(self, result: GameResult) -> None:
        self.games += 1
        self.turns.append(result.turns)
        if result.winner is None:
            self.unfinished += 1
        else:
            self.wins[result.winner] += 1

    def win_rates(self) -> dict[str, float]:
        """Win share per seat, keyed by ``"<seat>. <name>"``."""
        if self.games == 0:
            return {}
        return {
            f"{i + 1}. {name}": self.wins[i] / self.games
            for i, name in enumerate(self.names)
        }

    @property
    def mean_turns(self) -> float:
        return sum(self.turns) / len(self.turns) if self.turns else 0.0


def simulate(
    config: GameConfig,
    games: int,
    seed: int | None = None,
    max_turns: int = 1000,
) -> SeatStats:
    """Play *games* games from *config*, each on a freshly generated board.

    A single ``random.Random(seed)`` drives every board and every roll, so the
    same seed reproduces the same statistics.
    """
    cfg = config.validate()
    rng = random.Random(seed)
    stats = SeatStats(
        names=[p.name for p in cfg.players],
        colors=[p.color or "" for p in cfg.players],
    )

    for _ in range(games):
        state = new_game(cfg, rng)
        result = GameRunner(state, TurnEngine(rng), max_turns=max_turns).play()
        stats.add(result)
    return stats
