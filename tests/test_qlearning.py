import pytest

from pacman_agents.config import RewardWeights
from pacman_agents.game import PacManGame
from pacman_agents.maze import Maze
from pacman_agents.models import Move
from pacman_agents.qlearning import (
    CumulativeReward,
    DifferentialReward,
    LearnerState,
    QTable,
    RewardTrace,
)


def test_q_table_defaults_and_updates():
    table = QTable()
    assert table.get("s", Move.UP) == 0.0
    assert ("s", Move.UP) not in table

    new_value = table.update("s", Move.UP, reward=2.0, next_max=1.0,
                             learning_rate=0.5, discount_factor=0.9)

    assert new_value == pytest.approx(0.5 * (2.0 + 0.9))
    assert table.get("s", Move.UP) == pytest.approx(1.45)
    assert len(table) == 1


def test_best_action_prefers_first_on_ties():
    table = QTable()
    assert table.best_action(3, [Move.RIGHT, Move.LEFT]) == Move.RIGHT

    table.set(3, Move.LEFT, 0.5)
    assert table.best_action(3, [Move.RIGHT, Move.LEFT]) == Move.LEFT
    assert table.max_value(3, [Move.RIGHT, Move.LEFT]) == 0.5
    assert table.max_value(3, []) == 0.0


def test_best_action_with_negative_values():
    table = QTable()
    table.set(1, Move.UP, -2.0)
    table.set(1, Move.DOWN, -1.0)
    assert table.best_action(1, [Move.UP, Move.DOWN]) == Move.DOWN


@pytest.fixture
def pill_game():
    maze = Maze(["WWWWWW", "WP...W", "WWWWWW"])
    return PacManGame(maze, ghosts=(), lives=2, seed=0)


def test_cumulative_reward_counts_game_progress(pill_game):
    reward = CumulativeReward()
    assert reward(pill_game) == pytest.approx(-25.0)

    pill_game.eat_pill(0)
    pill_game.eat_pill(1)

    assert reward(pill_game) == pytest.approx(2 * 1.0 - 25.0)


def test_cumulative_reward_charges_time(pill_game):
    reward = CumulativeReward(RewardWeights(tick=-1.0, initial_lives=2))
    pill_game.advance(Move.NEUTRAL)
    pill_game.advance(Move.NEUTRAL)
    assert reward(pill_game) == pytest.approx(-2.0)


def test_differential_reward(pill_game):
    reward = DifferentialReward(CumulativeReward())

    assert reward(pill_game) == 0.0
    pill_game.eat_pill(0)
    assert reward(pill_game) == pytest.approx(1.0)
    assert reward(pill_game) == 0.0

    reward.reset()
    assert reward(pill_game) == 0.0


def test_reward_trace_summary():
    trace = RewardTrace()
    assert trace.summary()["count"] == 0

    for value in (1.0, -3.0, 5.0):
        trace.append(value)

    summary = trace.summary()
    assert summary["count"] == 3
    assert summary["mean"] == pytest.approx(1.0)
    assert summary["min"] == -3.0
    assert summary["max"] == 5.0
    assert summary["last"] == 5.0
    assert list(trace) == [1.0, -3.0, 5.0]


def test_learner_state_episode_boundaries():
    state = LearnerState()
    state.q_table.set(1, Move.UP, 1.0)
    state.last_state, state.last_move = 1, Move.UP
    state.rewards.append(3.0)

    state.end_episode()
    assert state.last_state is None and state.last_move is None
    assert len(state.q_table) == 1

    state.reset()
    assert len(state.q_table) == 0
    assert len(state.rewards) == 0
