"""CLI entry point: python -m snakes_ladders {play,simulate,chart}."""

from __future__ import annotations

import argparse
import logging
import random
import sys

from snakes_ladders.board import GenerationError, TileKind
from snakes_ladders.chart import make_win_rate_chart
from snakes_ladders.engine import TurnEngine, TurnRecord
from snakes_ladders.game import (
    ConfigError,
    GameConfig,
    GameRunner,
    GameState,
    Mode,
    PlayerConfig,
    new_game,
    ranking,
)
from snakes_ladders.stats import simulate


def _parse_player(text: str) -> PlayerConfig:
    """``"Alice"`` or ``"Alice:red"``."""
    name, _, color = text.partition(":")
    return PlayerConfig(name=name, color=color or None)


def _config_from_args(args: argparse.Namespace) -> GameConfig:
    return GameConfig(
        players=[_parse_player(p) for p in args.players],
        mode=args.mode,
        snake_count=args.snakes,
        ladder_count=args.ladders,
    )


def _cell_label(cell: int) -> str:
    # Squares are shown 1–100, the engine counts 0–99.
    return str(cell + 1)


class PrintObserver:
    """Prints one line per turn."""

    def __init__(self, state: GameState):
        self.state = state

    def on_turn(self, record: TurnRecord) -> None:
        name = self.state.players[record.player].name
        line = f"  {record.turn_number:4d}. {name} rolled {record.dice_value}: "
        if record.overshoot:
            line += f"stays on {_cell_label(record.start)} (overshoot)"
        else:
            line += f"{_cell_label(record.start)} → {_cell_label(record.target)}"
            if record.tile is TileKind.SNAKE:
                line += f", snake down to {_cell_label(record.end)}"
            elif record.tile is TileKind.LADDER:
                line += f", ladder up to {_cell_label(record.end)}"
        for idx, cell in record.relocated.items():
            line += f"; {self.state.players[idx].name} → {_cell_label(cell)}"
        if record.won:
            line += ", wins!"
        elif record.bonus_roll:
            line += " (rolls again)"
        print(line)


# ── play ─────────────────────────────────────────────────────────────

def cmd_play(args: argparse.Namespace) -> None:
    """Auto-roll one game and print every turn."""
    rng = random.Random(args.seed)
    state = new_game(_config_from_args(args), rng)

    board = state.board
    print(f"Mode: {state.mode.value}")
    print("Snakes:  " + ", ".join(
        f"{_cell_label(s)}→{_cell_label(e)}" for s, e in sorted(board.snakes().items())
    ))
    print("Ladders: " + ", ".join(
        f"{_cell_label(s)}→{_cell_label(e)}" for s, e in sorted(board.ladders().items())
    ))
    print()

    engine = TurnEngine(rng, observer=PrintObserver(state))
    result = GameRunner(state, engine, max_turns=args.max_turns).play()

    print()
    if result.winner is None:
        print(f"No winner after {result.turns} turns.")
    print("Ranking")
    print("=" * 40)
    for rank, player in ranking(state):
        print(f"  {rank}. {player.name:25s} {player.color:8s} {_cell_label(player.cell):>4s}")


# ── simulate / chart ─────────────────────────────────────────────────

def _run_simulation(args: argparse.Namespace):
    stats = simulate(
        _config_from_args(args),
        games=args.games,
        seed=args.seed,
        max_turns=args.max_turns,
    )
    print(f"\n{stats.games} games, {stats.mean_turns:.1f} turns on average, "
          f"{stats.unfinished} unfinished")
    print("=" * 40)
    for label, rate in stats.win_rates().items():
        print(f"  {label:30s} {rate * 100:5.1f}%")
    return stats


def cmd_simulate(args: argparse.Namespace) -> None:
    """Play many games and print win rates per seat."""
    _run_simulation(args)


def cmd_chart(args: argparse.Namespace) -> None:
    """Play many games and save a win-rate chart."""
    stats = _run_simulation(args)
    out = args.output or "win_rates.png"
    make_win_rate_chart(stats.win_rates(), output_path=out, colors=stats.colors)
    print(f"Chart saved to {out}")


# ── main ─────────────────────────────────────────────────────────────

def _add_game_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--players", nargs="+", default=["Player 1", "Player 2"],
                   help="2–4 player names, optionally NAME:COLOR")
    p.add_argument("--mode", choices=[m.value for m in Mode], default=Mode.FRIENDLY.value)
    p.add_argument("--seed", type=int, default=None, help="Seed for reproducible games")
    p.add_argument("--snakes", type=int, default=8, help="Number of snakes (default 8)")
    p.add_argument("--ladders", type=int, default=8, help="Number of ladders (default 8)")
    p.add_argument("--max-turns", type=int, default=1000, help="Max turns per game")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="snakes_ladders",
        description="Snakes & Ladders for 2–4 players",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    p_play = sub.add_parser("play", help="Play one game and print each turn")
    _add_game_options(p_play)

    p_sim = sub.add_parser("simulate", help="Simulate many games")
    _add_game_options(p_sim)
    p_sim.add_argument("--games", type=int, default=1000, help="Games to play (default 1000)")

    p_chart = sub.add_parser("chart", help="Simulate many games and chart win rates")
    _add_game_options(p_chart)
    p_chart.add_argument("--games", type=int, default=1000, help="Games to play (default 1000)")
    p_chart.add_argument("--output", "-o", help="Output PNG path")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    commands = {"play": cmd_play, "simulate": cmd_simulate, "chart": cmd_chart}
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        return

    try:
        command(args)
    except (ConfigError, GenerationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
