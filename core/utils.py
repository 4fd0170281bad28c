"""
Utility Functions for Snake DQN

Includes:
- Seeding and device helpers
- Linear epsilon schedule for epsilon-greedy exploration
- Moving averages for training progress
"""

import random
from collections import deque
from typing import Optional

import numpy as np
import torch


class LinearEpsilonSchedule:
    """
    Epsilon-greedy exploration schedule

    Linearly interpolates from epsilon_init to epsilon_final over
    decay_frames frames, then stays at epsilon_final.
    """

    def __init__(
        self,
        epsilon_init: float = 0.5,
        epsilon_final: float = 0.01,
        decay_frames: int = 100000
    ):
        """
        Initialize epsilon schedule

        Args:
            epsilon_init: Epsilon at frame 0
            epsilon_final: Epsilon once decay_frames frames have been played
            decay_frames: Number of frames over which epsilon decays
        """
        if decay_frames <= 0:
            raise ValueError(f"decay_frames must be positive, got {decay_frames}")

        self.epsilon_init = epsilon_init
        self.epsilon_final = epsilon_final
        self.decay_frames = decay_frames
        self.increment = (epsilon_final - epsilon_init) / decay_frames

    def value(self, frame: int) -> float:
        """Epsilon for the given frame count"""
        if frame >= self.decay_frames:
            return self.epsilon_final
        return self.epsilon_init + self.increment * frame


class MovingAverager:
    """Average of the most recent buffer_length values"""

    def __init__(self, buffer_length: int):
        if buffer_length <= 0:
            raise ValueError(f"buffer_length must be positive, got {buffer_length}")
        self.buffer = deque(maxlen=buffer_length)

    def append(self, x: float):
        self.buffer.append(x)

    def average(self) -> float:
        if not self.buffer:
            return 0.0
        return float(np.mean(self.buffer))

    def __len__(self) -> int:
        return len(self.buffer)


def set_seed(seed: int, strict_determinism: bool = False):
    """
    Set random seeds for reproducibility

    Args:
        seed: Random seed value
        strict_determinism: If True, enable strict deterministic mode
                           (may raise errors for non-deterministic ops)
    """
    import os

    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)
    if torch.cuda.is_available():
        torch.cuda.manual_seed_all(seed)
        torch.backends.cudnn.deterministic = True
        torch.backends.cudnn.benchmark = False

    if strict_determinism:
        torch.use_deterministic_algorithms(True)
        os.environ['CUBLAS_WORKSPACE_CONFIG'] = ':4096:8'


def get_device(verbose: bool = True) -> torch.device:
    """
    Get PyTorch device (CUDA if available, otherwise CPU)

    Returns:
        torch.device
    """
    if torch.cuda.is_available():
        device = torch.device('cuda')
        if verbose:
            print(f"Using GPU: {torch.cuda.get_device_name(0)}", flush=True)
    else:
        device = torch.device('cpu')
        if verbose:
            print("Using CPU", flush=True)

    return device


def resolve_device(device: Optional[str] = None) -> torch.device:
    """Turn an optional device name into a torch.device, auto-detecting if None"""
    if device is None:
        return get_device(verbose=False)
    return torch.device(device)
