"""
Snake Environment - Gymnasium Compatible

Wraps SnakeGame in the gymnasium API so it can be driven by generic RL
tooling:
- Absolute action space (4): LEFT, UP, RIGHT, DOWN
- Grid observation (H x W x 2) from SnakeGame.get_state_tensor()
- Truncation after max_steps
"""

import numpy as np
import gymnasium as gym
from gymnasium import spaces
from typing import Tuple, Dict, Optional

from core.snake_game import SnakeGame, SnakeGameConfig, NUM_ACTIONS


class SnakeEnv(gym.Env):
    """
    Single Snake Environment

    Observation:
        float32 grid (height x width x 2)
        - Channel 0: 0 empty, 1 body, 2 head
        - Channel 1: 1 where a fruit is

    Actions:
        4 absolute actions (LEFT=0, UP=1, RIGHT=2, DOWN=3)

    Reward:
        - Fruit: +1
        - Anything else (including death): 0
    """

    metadata = {'render_modes': ['human', 'ansi']}

    def __init__(
        self,
        height: int = 16,
        width: int = 16,
        num_fruits: int = 1,
        init_len: int = 4,
        max_steps: int = 1000,
        render_mode: Optional[str] = None,
        seed: Optional[int] = None
    ):
        super().__init__()

        self.config = SnakeGameConfig(
            height=height,
            width=width,
            num_fruits=num_fruits,
            init_len=init_len
        )
        self.max_steps = max_steps
        self.render_mode = render_mode

        self.game = SnakeGame(self.config, seed=seed)

        self.action_space = spaces.Discrete(NUM_ACTIONS)
        self.observation_space = spaces.Box(
            low=0, high=2,
            shape=(height, width, 2),
            dtype=np.float32
        )

        self.steps = 0
        self.score = 0
        self.done = False

    def reset(
        self,
        seed: Optional[int] = None,
        options: Optional[dict] = None
    ) -> Tuple[np.ndarray, Dict]:
        """Reset environment to initial state"""
        super().reset(seed=seed)

        self.game.reset(seed=seed)

        self.steps = 0
        self.score = 0
        self.done = False

        return self.game.get_state_tensor(), self._get_info()

    def step(self, action: int) -> Tuple[np.ndarray, float, bool, bool, Dict]:
        """
        Execute one step in the environment

        Returns:
            observation, reward, terminated, truncated, info
        """
        if self.done:
            raise RuntimeError("Episode is done. Call reset() to start a new episode.")

        result = self.game.step(action)

        self.steps += 1
        if result.fruit_eaten:
            self.score += 1

        terminated = result.done
        truncated = not terminated and self.steps >= self.max_steps
        self.done = terminated or truncated

        obs = self.game.get_state_tensor()
        return obs, float(result.reward), terminated, truncated, self._get_info()

    def _get_info(self) -> Dict:
        return {
            'score': self.score,
            'steps': self.steps,
            'snake_length': len(self.game.snake)
        }

    def render(self):
        """Render the board as text"""
        board = self.game.render()
        if self.render_mode == 'ansi':
            return board

        print(board)
        print(f"Score: {self.score}, Steps: {self.steps}")
        return None
