"""
Replay Memory for DQN

Fixed-capacity rolling window over a stream of items with uniform random
sampling, used to decorrelate consecutive training examples.
"""

from collections import deque
from typing import Deque, Generic, Iterator, List, Optional, TypeVar

import numpy as np
from gymnasium.utils import seeding

from core.errors import EmptyBufferError, assert_positive_integer


T = TypeVar('T')


class ReplayMemory(Generic[T]):
    """
    Bounded replay memory

    Once max_length items are stored, every append evicts the oldest one.
    Sampling is uniform and with replacement, so a batch may be larger
    than the number of stored items.
    """

    def __init__(self, max_length: int, seed: Optional[int] = None):
        """
        Initialize replay memory

        Args:
            max_length: Maximum number of items to store
            seed: Random seed for reproducible sampling
        """
        assert_positive_integer(max_length, 'max_length')

        self._max_length = int(max_length)
        self.buffer: Deque[T] = deque(maxlen=self._max_length)

        self.np_random: np.random.Generator = None
        self.seed(seed)

    def seed(self, seed: Optional[int] = None):
        """Set random seed for sampling"""
        self.np_random, seed = seeding.np_random(seed)
        return [seed]

    def append(self, item: T):
        """Add an item, evicting the oldest one when full"""
        self.buffer.append(item)

    def sample(self, batch_size: int) -> List[T]:
        """
        Sample items uniformly at random with replacement

        Args:
            batch_size: Number of items to draw

        Returns:
            List of batch_size items

        Raises:
            EmptyBufferError: memory holds no items
        """
        if isinstance(batch_size, bool) or not isinstance(batch_size, (int, np.integer)):
            raise ValueError(f"Expected batch_size to be an integer, but received {batch_size!r}")
        if batch_size < 0:
            raise ValueError(f"Expected batch_size to be non-negative, but received {batch_size}")
        if not self.buffer:
            raise EmptyBufferError("Cannot sample from an empty replay memory")

        indices = self.np_random.integers(0, len(self.buffer), size=batch_size)
        return [self.buffer[i] for i in indices]

    def is_ready(self, min_size: int) -> bool:
        """Check if memory has enough items to start training"""
        return len(self.buffer) >= min_size

    def clear(self):
        self.buffer.clear()

    @property
    def length(self) -> int:
        return len(self.buffer)

    @property
    def max_length(self) -> int:
        return self._max_length

    def __len__(self) -> int:
        return len(self.buffer)

    def __iter__(self) -> Iterator[T]:
        return iter(self.buffer)
