"""
Snake Game Simulator

Deterministic, fully observable grid-world snake game used as the
environment of the DQN example:
- Four absolute actions (LEFT, UP, RIGHT, DOWN)
- Configurable board size, fruit count and initial snake length
- Image-like state encoding of shape (H x W x 2)

The snake never grows: eating a fruit yields a reward and respawns the
fruit somewhere else on the board.
"""

import dataclasses
from dataclasses import dataclass
from enum import IntEnum
from typing import List, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np
from gymnasium.utils import seeding

from core.errors import (
    GameOverError,
    InvalidActionError,
    InvalidConfigurationError,
    assert_positive_integer,
)


DEFAULT_HEIGHT = 16
DEFAULT_WIDTH = 16
DEFAULT_NUM_FRUITS = 1
DEFAULT_INIT_LEN = 4

NO_FRUIT_REWARD = 0
FRUIT_REWARD = 1


class Action(IntEnum):
    """Absolute movement directions of the snake head"""
    LEFT = 0
    UP = 1
    RIGHT = 2
    DOWN = 3


ACTION_LEFT = Action.LEFT
ACTION_UP = Action.UP
ACTION_RIGHT = Action.RIGHT
ACTION_DOWN = Action.DOWN

ALL_ACTIONS = tuple(Action)
NUM_ACTIONS = len(ALL_ACTIONS)

# (row, col)
Cell = Tuple[int, int]

_ACTION_DELTAS = {
    Action.LEFT: (0, -1),
    Action.UP: (-1, 0),
    Action.RIGHT: (0, 1),
    Action.DOWN: (1, 0),
}


class StepResult(NamedTuple):
    """Outcome of a single game step"""
    reward: int
    done: bool
    fruit_eaten: bool


class GameState(NamedTuple):
    """Immutable snapshot of the board: snake cells (head first) and fruit cells"""
    snake: Tuple[Cell, ...]
    fruits: Tuple[Cell, ...]


@dataclass
class SnakeGameConfig:
    """Board configuration of a SnakeGame"""
    height: int = DEFAULT_HEIGHT
    width: int = DEFAULT_WIDTH
    num_fruits: int = DEFAULT_NUM_FRUITS
    init_len: int = DEFAULT_INIT_LEN

    def validate(self):
        """Raise InvalidConfigurationError if any field is unusable"""
        for field in dataclasses.fields(self):
            assert_positive_integer(getattr(self, field.name), field.name)

        # The initial snake is laid out horizontally
        if self.init_len > self.width:
            raise InvalidConfigurationError(
                f"Expected init_len ({self.init_len}) to be at most "
                f"width ({self.width})"
            )


class SnakeGame:
    """
    Single snake game

    State:
        snake: list of (row, col) cells, head at index 0
        fruits: list of (row, col) cells, disjoint from the snake

    Actions:
        0 - LEFT, 1 - UP, 2 - RIGHT, 3 - DOWN

    Reward:
        - FRUIT_REWARD (1) when the new head lands on a fruit
        - NO_FRUIT_REWARD (0) otherwise, including the terminal step

    The game ends when the head would leave the board or run into the
    body. A terminal step does not modify the board.
    """

    def __init__(
        self,
        config: Optional[SnakeGameConfig] = None,
        seed: Optional[int] = None,
        **overrides
    ):
        """
        Initialize the game and place snake and fruits

        Args:
            config: Board configuration (defaults to a 16x16 board,
                1 fruit, snake of length 4)
            seed: Random seed for snake and fruit placement
            **overrides: Individual config fields, e.g. height=4
        """
        if config is None:
            config = SnakeGameConfig()
        if overrides:
            config = dataclasses.replace(config, **overrides)
        config.validate()

        self.config = config
        self._height = int(config.height)
        self._width = int(config.width)
        self._num_fruits = int(config.num_fruits)
        self._init_len = int(config.init_len)

        self._snake: List[Cell] = []
        self._fruits: List[Cell] = []
        self._done = False

        self.np_random = None
        self.seed(seed)

        self._initialize_snake()
        self._make_fruits()

    def seed(self, seed: Optional[int] = None):
        """Set random seed for reproducibility"""
        self.np_random, seed = seeding.np_random(seed)
        return [seed]

    def reset(self, seed: Optional[int] = None) -> GameState:
        """Start a new episode with freshly placed snake and fruits"""
        if seed is not None:
            self.seed(seed)

        self._snake = []
        self._fruits = []
        self._done = False

        self._initialize_snake()
        self._make_fruits()

        return self.get_state()

    def step(self, action: Union[Action, int]) -> StepResult:
        """
        Perform a step of the game

        Args:
            action: One of Action.LEFT, UP, RIGHT, DOWN (or 0-3)

        Returns:
            StepResult(reward, done, fruit_eaten)

        Raises:
            InvalidActionError: action is not one of the four directions
            GameOverError: the game has already terminated
        """
        action = _to_action(action)
        if self._done:
            raise GameOverError("Game is over. Call reset() to start a new game.")

        head_row, head_col = self._snake[0]
        d_row, d_col = _ACTION_DELTAS[action]
        new_head = (head_row + d_row, head_col + d_col)

        # The tail has not moved yet, so running into it also ends the game
        if not self._is_within_bounds(new_head) or new_head in self._snake:
            self._done = True
            return StepResult(reward=0, done=True, fruit_eaten=False)

        self._snake.insert(0, new_head)
        self._snake.pop()

        if new_head in self._fruits:
            self._fruits.remove(new_head)
            self._make_fruits()
            return StepResult(reward=FRUIT_REWARD, done=False, fruit_eaten=True)

        return StepResult(reward=NO_FRUIT_REWARD, done=False, fruit_eaten=False)

    def get_state(self) -> GameState:
        """Snapshot of the current snake and fruit cells"""
        return GameState(snake=tuple(self._snake), fruits=tuple(self._fruits))

    def restore_state(self, state: GameState):
        """
        Replace the board with a snapshot and mark the game as active

        Raises:
            InvalidConfigurationError: cells out of bounds, overlapping,
                or an empty snake
        """
        snake = [self._as_cell(cell, 'snake') for cell in state.snake]
        fruits = [self._as_cell(cell, 'fruit') for cell in state.fruits]

        if not snake:
            raise InvalidConfigurationError("Snake must occupy at least one cell")
        if len(set(snake)) != len(snake):
            raise InvalidConfigurationError("Snake cells must be distinct")
        if len(set(fruits)) != len(fruits):
            raise InvalidConfigurationError("Fruit cells must be distinct")
        if set(snake) & set(fruits):
            raise InvalidConfigurationError("Fruit cells must not overlap the snake")

        self._snake = snake
        self._fruits = fruits
        self._done = False

    def get_state_tensor(self) -> np.ndarray:
        """
        Get the current state as an image-like array

        Returns:
            float32 array of shape (height, width, 2)
            - Channel 0 marks the snake: 0 empty, 1 body, 2 head
            - Channel 1 marks the fruits: 0 absent, 1 present
        """
        buffer = np.zeros((self._height, self._width, 2), dtype=np.float32)
        _fill_state(buffer, self._snake, self._fruits)
        return buffer

    @property
    def height(self) -> int:
        return self._height

    @property
    def width(self) -> int:
        return self._width

    @property
    def num_fruits(self) -> int:
        return self._num_fruits

    @property
    def init_len(self) -> int:
        return self._init_len

    @property
    def snake(self) -> List[Cell]:
        return list(self._snake)

    @property
    def fruits(self) -> List[Cell]:
        return list(self._fruits)

    @property
    def done(self) -> bool:
        return self._done

    def render(self) -> str:
        """Text rendering of the board"""
        grid = [[' ' for _ in range(self._width)] for _ in range(self._height)]

        for row, col in self._fruits:
            grid[row][col] = 'F'
        for i, (row, col) in enumerate(self._snake):
            grid[row][col] = 'H' if i == 0 else 'o'

        border = '+' + '-' * self._width + '+'
        lines = [border]
        lines.extend('|' + ''.join(row) + '|' for row in grid)
        lines.append(border)
        return '\n'.join(lines)

    def _initialize_snake(self):
        """Place a straight horizontal snake with its head on the right"""
        row = get_random_integer(self.np_random, 0, self._height)
        col = get_random_integer(self.np_random, self._init_len - 1, self._width)
        self._snake = [(row, col - i) for i in range(self._init_len)]

    def _make_fruits(self):
        """Top up the fruits to num_fruits on random unoccupied cells"""
        num_new = self._num_fruits - len(self._fruits)
        if num_new <= 0:
            return

        occupied = set(self._snake)
        occupied.update(self._fruits)
        empty_cells = [
            (row, col)
            for row in range(self._height)
            for col in range(self._width)
            if (row, col) not in occupied
        ]

        # A nearly full board holds fewer fruits than requested
        for _ in range(min(num_new, len(empty_cells))):
            index = get_random_integer(self.np_random, 0, len(empty_cells))
            self._fruits.append(empty_cells.pop(index))

    def _is_within_bounds(self, cell: Cell) -> bool:
        row, col = cell
        return 0 <= row < self._height and 0 <= col < self._width

    def _as_cell(self, cell, kind: str) -> Cell:
        try:
            is_pair = len(cell) == 2
        except TypeError:
            is_pair = False
        if not is_pair or not all(
            isinstance(v, (int, np.integer)) and not isinstance(v, bool) for v in cell
        ):
            raise InvalidConfigurationError(
                f"Expected {kind} cell to be a (row, col) pair of integers, but received {cell!r}"
            )

        row, col = int(cell[0]), int(cell[1])
        if not self._is_within_bounds((row, col)):
            raise InvalidConfigurationError(
                f"{kind} cell {(row, col)} lies outside the "
                f"{self._height}x{self._width} board"
            )
        return row, col


def get_random_integer(rng: np.random.Generator, low: int, high: int) -> int:
    """Random integer >= low and < high"""
    return int(rng.integers(low, high))


def get_state_tensor(
    states: Union[GameState, Sequence[GameState]],
    height: int,
    width: int
) -> np.ndarray:
    """
    Encode one or more game snapshots as a batch

    Args:
        states: A GameState or a sequence of them
        height: Board height
        width: Board width

    Returns:
        float32 array of shape (N, height, width, 2)
    """
    if isinstance(states, GameState):
        states = [states]

    buffer = np.zeros((len(states), height, width, 2), dtype=np.float32)
    for i, state in enumerate(states):
        _fill_state(buffer[i], state.snake, state.fruits)
    return buffer


def _fill_state(buffer: np.ndarray, snake: Sequence[Cell], fruits: Sequence[Cell]):
    for i, (row, col) in enumerate(snake):
        buffer[row, col, 0] = 2 if i == 0 else 1
    for row, col in fruits:
        buffer[row, col, 1] = 1


def _to_action(action) -> Action:
    if isinstance(action, bool):
        raise InvalidActionError(f"Invalid action {action!r}")
    try:
        return Action(action)
    except (ValueError, TypeError):
        raise InvalidActionError(
            f"Invalid action {action!r}; expected one of "
            f"{[int(a) for a in ALL_ACTIONS]}"
        ) from None
