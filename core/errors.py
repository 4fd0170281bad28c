"""
Exceptions raised by the snake game and the replay memory
"""

import numpy as np


class InvalidConfigurationError(ValueError):
    """A construction parameter is not a positive integer or cannot fit the board"""


class InvalidActionError(ValueError):
    """Action is not one of LEFT, UP, RIGHT, DOWN"""


class EmptyBufferError(RuntimeError):
    """Sampling was requested from a replay memory holding no items"""


class GameOverError(RuntimeError):
    """The game has terminated; call reset() before stepping again"""


def assert_positive_integer(value, name: str):
    """
    Raise InvalidConfigurationError unless value is a positive integer

    Booleans are rejected even though they are ints in Python.
    """
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidConfigurationError(
            f"Expected {name} to be an integer, but received {value!r}"
        )
    if value <= 0:
        raise InvalidConfigurationError(
            f"Expected {name} to be a positive number, but received {value!r}"
        )
