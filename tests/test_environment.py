"""
Unit tests for the gymnasium Snake environment
"""

import pytest
import numpy as np
from core.environment import SnakeEnv
from core.errors import InvalidActionError
from core.snake_game import GameState, ACTION_LEFT, ACTION_RIGHT, ACTION_UP, ACTION_DOWN


class TestSnakeEnv:
    """Test cases for SnakeEnv"""

    def test_spaces(self):
        """Test action and observation spaces"""
        env = SnakeEnv(height=8, width=10)
        assert env.action_space.n == 4
        assert env.observation_space.shape == (8, 10, 2)

    def test_reset(self):
        """Test environment reset"""
        env = SnakeEnv(height=10, width=10, seed=42)
        obs, info = env.reset(seed=42)

        assert isinstance(obs, np.ndarray)
        assert obs.shape == (10, 10, 2)
        assert env.observation_space.contains(obs)
        assert info == {'score': 0, 'steps': 0, 'snake_length': 4}

    def test_observation_matches_game(self):
        """Test observation is the game state tensor"""
        env = SnakeEnv(seed=3)
        obs, _ = env.reset(seed=3)

        np.testing.assert_array_equal(obs, env.game.get_state_tensor())

    def test_step(self):
        """Test step return types"""
        env = SnakeEnv(height=10, width=10, seed=42)
        env.reset(seed=42)
        env.game.restore_state(GameState(snake=((4, 4), (4, 3)), fruits=((0, 0),)))

        obs, reward, terminated, truncated, info = env.step(ACTION_RIGHT)

        assert isinstance(obs, np.ndarray)
        assert isinstance(reward, float)
        assert terminated is False
        assert truncated is False
        assert info['steps'] == 1

    def test_wall_collision(self):
        """Test that hitting wall terminates episode"""
        env = SnakeEnv(height=10, width=10, seed=42)
        env.reset(seed=42)

        terminated = False
        for _ in range(20):
            obs, reward, terminated, truncated, info = env.step(ACTION_UP)
            if terminated:
                break

        assert terminated
        assert reward == 0.0

    def test_fruit_consumption(self):
        """Test that eating fruit increases score without growth"""
        env = SnakeEnv(height=6, width=6, init_len=2, seed=1)
        env.reset(seed=1)
        env.game.restore_state(GameState(snake=((2, 2), (2, 1)), fruits=((2, 3),)))

        obs, reward, terminated, truncated, info = env.step(ACTION_RIGHT)

        assert reward == 1.0
        assert info['score'] == 1
        assert info['snake_length'] == 2

    def test_max_steps_truncation(self):
        """Test that episode truncates at max steps"""
        env = SnakeEnv(height=10, width=10, init_len=2, max_steps=4, seed=0)
        env.reset(seed=0)
        env.game.restore_state(GameState(snake=((5, 5), (5, 4)), fruits=((0, 0),)))

        # Walk in a small square
        results = [env.step(a) for a in (ACTION_DOWN, ACTION_LEFT, ACTION_UP, ACTION_RIGHT)]

        assert not any(r[3] for r in results[:3])
        _, _, terminated, truncated, _ = results[-1]
        assert not terminated
        assert truncated

    @pytest.mark.parametrize('action', [1.5, 2.9, -0.5])
    def test_invalid_float_action(self, action):
        """Test fractional actions are rejected instead of truncated"""
        env = SnakeEnv(height=10, width=10, init_len=2, seed=0)
        env.reset(seed=0)
        env.game.restore_state(GameState(snake=((5, 5), (5, 4)), fruits=((0, 0),)))
        before = env.game.get_state()

        with pytest.raises(InvalidActionError):
            env.step(action)

        assert env.steps == 0
        assert env.game.get_state() == before

    def test_sampled_actions_accepted(self):
        """Test numpy integers from the action space are valid"""
        env = SnakeEnv(height=10, width=10, init_len=2, seed=0)
        env.reset(seed=0)
        env.game.restore_state(GameState(snake=((5, 5), (5, 4)), fruits=((0, 0),)))

        _, _, terminated, _, info = env.step(np.int64(ACTION_UP))

        assert not terminated
        assert info['steps'] == 1

    def test_step_after_done(self):
        """Test stepping a finished episode raises"""
        env = SnakeEnv(height=10, width=10, init_len=2, seed=0)
        env.reset(seed=0)
        env.game.restore_state(GameState(snake=((0, 5), (0, 4)), fruits=((9, 9),)))

        _, _, terminated, _, _ = env.step(ACTION_UP)
        assert terminated

        with pytest.raises(RuntimeError):
            env.step(ACTION_LEFT)

        env.reset()
        env.step(ACTION_DOWN)

    def test_reproducibility(self):
        """Test that same seed produces same behavior"""
        env1 = SnakeEnv(seed=42)
        env2 = SnakeEnv(seed=42)

        obs1, _ = env1.reset(seed=42)
        obs2, _ = env2.reset(seed=42)

        assert np.array_equal(obs1, obs2)
        assert env1.game.get_state() == env2.game.get_state()

    def test_render_ansi(self):
        """Test ansi rendering returns the board"""
        env = SnakeEnv(height=3, width=3, init_len=2, render_mode='ansi', seed=0)
        env.reset(seed=0)

        board = env.render()
        assert board.count('H') == 1
        assert len(board.splitlines()) == 5


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
