"""
Core Snake DQN Components

This package contains the foundational components for the snake DQN example:
- Snake game simulator
- Bounded replay memory
- Gymnasium environment wrapper
- Deep Q-network architecture
- Utility functions
"""

from core.errors import (
    InvalidConfigurationError,
    InvalidActionError,
    EmptyBufferError,
    GameOverError
)
from core.snake_game import (
    SnakeGame,
    SnakeGameConfig,
    GameState,
    StepResult,
    Action,
    ACTION_LEFT,
    ACTION_UP,
    ACTION_RIGHT,
    ACTION_DOWN,
    ALL_ACTIONS,
    NUM_ACTIONS,
    FRUIT_REWARD,
    NO_FRUIT_REWARD,
    get_state_tensor
)
from core.replay_memory import ReplayMemory
from core.environment import SnakeEnv
from core.networks import SnakeDQN, create_deep_q_network, copy_weights, count_parameters

__all__ = [
    'InvalidConfigurationError',
    'InvalidActionError',
    'EmptyBufferError',
    'GameOverError',
    'SnakeGame',
    'SnakeGameConfig',
    'GameState',
    'StepResult',
    'Action',
    'ACTION_LEFT',
    'ACTION_UP',
    'ACTION_RIGHT',
    'ACTION_DOWN',
    'ALL_ACTIONS',
    'NUM_ACTIONS',
    'FRUIT_REWARD',
    'NO_FRUIT_REWARD',
    'get_state_tensor',
    'ReplayMemory',
    'SnakeEnv',
    'SnakeDQN',
    'create_deep_q_network',
    'copy_weights',
    'count_parameters'
]
