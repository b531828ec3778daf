"""Tests for snakes_ladders.engine (turn resolution)."""

from snakes_ladders.board import Board, Position, TileKind
from snakes_ladders.engine import ListObserver, TurnEngine
from snakes_ladders.game import GameState, Mode, Player


class ScriptedDice:
    """Deterministic stand-in for random.Random that returns scripted rolls."""

    def __init__(self, rolls: list[int]):
        self.rolls = list(rolls)

    def randint(self, a: int, b: int) -> int:
        value = self.rolls.pop(0)
        assert a <= value <= b
        return value


def _state(cells: list[int], mode: Mode = Mode.FRIENDLY, board: Board | None = None) -> GameState:
    players = [
        Player(name=name, color=color, position=Position.from_index(cell))
        for name, color, cell in zip("ABCD", ("red", "green", "blue", "yellow"), cells)
    ]
    return GameState(board=board or Board.from_jumps(), players=players, mode=mode)


def _cells(state: GameState) -> list[int]:
    return [p.cell for p in state.players]


# ── basic movement ───────────────────────────────────────────────────

def test_plain_move():
    state = _state([10, 0])
    TurnEngine(ScriptedDice([4])).roll_turn(state)
    assert _cells(state) == [14, 0]
    assert state.dice_value == 4
    assert state.current_turn_index == 1


def test_snake_takes_player_down():
    board = Board.from_jumps(snakes={40: 12})
    state = _state([37, 0], board=board)
    TurnEngine(ScriptedDice([3])).roll_turn(state)
    assert state.players[0].cell == 12


def test_ladder_takes_player_up():
    board = Board.from_jumps(ladders={5: 37})
    state = _state([2, 0], board=board)
    TurnEngine(ScriptedDice([3])).roll_turn(state)
    assert state.players[0].cell == 37


def test_landing_on_exit_cell_stays():
    board = Board.from_jumps(snakes={40: 12})
    state = _state([10, 0], board=board)
    TurnEngine(ScriptedDice([2])).roll_turn(state)
    assert state.players[0].cell == 12


# ── turn order ───────────────────────────────────────────────────────

def test_turn_order_cycles_without_sixes():
    state = _state([0, 0, 0])
    engine = TurnEngine(ScriptedDice([1, 2, 3, 4, 5, 1]))
    seen = []
    for _ in range(6):
        seen.append(state.current_turn_index)
        engine.roll_turn(state)
    assert seen == [0, 1, 2, 0, 1, 2]
    assert state.current_turn_index == 0


def test_six_keeps_the_turn():
    state = _state([0, 0])
    engine = TurnEngine(ScriptedDice([6, 6, 2]))
    engine.roll_turn(state)
    assert state.current_turn_index == 0
    engine.roll_turn(state)
    assert state.current_turn_index == 0
    assert state.players[0].cell == 12
    engine.roll_turn(state)
    assert state.current_turn_index == 1
    assert state.players[0].cell == 14


# ── end of board ─────────────────────────────────────────────────────

def test_exact_landing_on_99_wins():
    state = _state([95, 0])
    obs = ListObserver()
    TurnEngine(ScriptedDice([4]), observer=obs).roll_turn(state)
    assert state.ended
    assert state.winner == 0
    assert state.players[0].cell == 99
    assert obs.records[-1].won


def test_win_skips_bump():
    state = _state([95, 99], mode=Mode.BUMP)
    TurnEngine(ScriptedDice([4])).roll_turn(state)
    assert state.ended
    assert _cells(state) == [99, 99]


def test_overshoot_stays_put():
    state = _state([96, 0])
    obs = ListObserver()
    TurnEngine(ScriptedDice([5]), observer=obs).roll_turn(state)
    assert state.players[0].cell == 96
    assert not state.ended
    assert state.dice_value == 5
    assert state.current_turn_index == 1
    assert obs.records[-1].overshoot


def test_overshoot_with_six_keeps_turn():
    state = _state([97, 0])
    TurnEngine(ScriptedDice([6])).roll_turn(state)
    assert state.players[0].cell == 97
    assert state.current_turn_index == 0


def test_ended_game_is_unchanged():
    state = _state([95, 30])
    engine = TurnEngine(ScriptedDice([4]))
    engine.roll_turn(state)
    before = (_cells(state), state.ended, state.current_turn_index, state.dice_value)

    # No dice left in the script: a roll here would fail
    engine.roll_turn(state)
    engine.roll_turn(state)
    assert (_cells(state), state.ended, state.current_turn_index, state.dice_value) == before


# ── modes ────────────────────────────────────────────────────────────

def test_friendly_shares_cell():
    state = _state([50, 52], mode=Mode.FRIENDLY)
    TurnEngine(ScriptedDice([2])).roll_turn(state)
    assert _cells(state) == [52, 52]


def test_bump_sends_occupant_home():
    state = _state([50, 52], mode=Mode.BUMP)
    obs = ListObserver()
    TurnEngine(ScriptedDice([2]), observer=obs).roll_turn(state)
    assert _cells(state) == [52, 0]
    assert obs.records[-1].relocated == {1: 0}


def test_bump_hits_every_occupant():
    state = _state([50, 52, 52, 30], mode=Mode.BUMP)
    TurnEngine(ScriptedDice([2])).roll_turn(state)
    assert _cells(state) == [52, 0, 0, 30]


def test_swap_exchanges_places():
    state = _state([10, 13], mode=Mode.SWAP)
    TurnEngine(ScriptedDice([3])).roll_turn(state)
    assert _cells(state) == [13, 10]


def test_swap_only_first_occupant():
    state = _state([20, 13, 10, 13], mode=Mode.SWAP)
    state.current_turn_index = 2
    TurnEngine(ScriptedDice([3])).roll_turn(state)
    assert _cells(state) == [20, 10, 13, 13]


def test_swap_after_ladder_uses_pre_move_cell():
    board = Board.from_jumps(ladders={5: 37})
    state = _state([2, 37], mode=Mode.SWAP, board=board)
    TurnEngine(ScriptedDice([3])).roll_turn(state)
    assert _cells(state) == [37, 2]


# ── observer ─────────────────────────────────────────────────────────

def test_records_snake_tile():
    board = Board.from_jumps(snakes={40: 12})
    state = _state([37, 0], board=board)
    obs = ListObserver()
    TurnEngine(ScriptedDice([3]), observer=obs).roll_turn(state)
    record = obs.records[0]
    assert record.turn_number == 1
    assert record.player == 0
    assert (record.start, record.target, record.end) == (37, 40, 12)
    assert record.tile is TileKind.SNAKE
