"""
Neural Network Architectures for Snake DQN

Implements:
- Convolutional deep Q-network over the (H x W x 2) game state
- Weight copying from the online network to the target network
"""

import torch
import torch.nn as nn
import torch.nn.functional as F
from typing import Tuple

from core.snake_game import NUM_ACTIONS


# Three unpadded 3x3 convolutions shrink each side by 6
_CONV_SHRINK = 6


class SnakeDQN(nn.Module):
    """
    Deep Q-Network with Convolutional Neural Network

    For grid-based state representation (H x W x 2)
    """

    def __init__(
        self,
        height: int,
        width: int,
        num_actions: int = NUM_ACTIONS,
        input_channels: int = 2,
        filters: Tuple[int, int, int] = (128, 256, 256),
        hidden_dim: int = 100,
        dropout: float = 0.25
    ):
        """
        Initialize DQN CNN

        Args:
            height: Board height
            width: Board width
            num_actions: Number of actions
            input_channels: Number of state channels
            filters: Output channels of the three convolutions
            hidden_dim: Size of the dense hidden layer
            dropout: Dropout rate before the output layer
        """
        super().__init__()

        if height <= _CONV_SHRINK or width <= _CONV_SHRINK:
            raise ValueError(
                f"Board {height}x{width} is too small for the Q-network; "
                f"both sides must be greater than {_CONV_SHRINK}"
            )

        self.height = height
        self.width = width
        self.num_actions = num_actions

        self.conv1 = nn.Conv2d(input_channels, filters[0], kernel_size=3)
        self.bn1 = nn.BatchNorm2d(filters[0])
        self.conv2 = nn.Conv2d(filters[0], filters[1], kernel_size=3)
        self.bn2 = nn.BatchNorm2d(filters[1])
        self.conv3 = nn.Conv2d(filters[1], filters[2], kernel_size=3)

        conv_output_size = (height - _CONV_SHRINK) * (width - _CONV_SHRINK) * filters[2]

        self.fc1 = nn.Linear(conv_output_size, hidden_dim)
        self.dropout = nn.Dropout(dropout)
        self.fc2 = nn.Linear(hidden_dim, num_actions)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        """
        Forward pass

        Args:
            x: (batch_size, height, width, channels) grid tensor

        Returns:
            (batch_size, num_actions) Q-values
        """
        # Reshape from (B, H, W, C) to (B, C, H, W)
        x = x.permute(0, 3, 1, 2)

        x = self.bn1(F.relu(self.conv1(x)))
        x = self.bn2(F.relu(self.conv2(x)))
        x = F.relu(self.conv3(x))

        x = x.reshape(x.size(0), -1)

        x = F.relu(self.fc1(x))
        x = self.dropout(x)
        return self.fc2(x)


def create_deep_q_network(height: int, width: int, num_actions: int = NUM_ACTIONS) -> SnakeDQN:
    """
    Create a deep Q-network for a board of the given size

    Raises:
        ValueError: a dimension is not a positive integer
    """
    for name, value in (('height', height), ('width', width), ('num_actions', num_actions)):
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            raise ValueError(f"Expected {name} to be a positive integer, but received {value!r}")

    return SnakeDQN(height=height, width=width, num_actions=num_actions)


def copy_weights(dest: nn.Module, src: nn.Module):
    """
    Copy the weights of src into dest

    dest is left in eval mode: the target network is never trained directly.
    """
    dest.load_state_dict(src.state_dict())
    dest.eval()


def count_parameters(model: nn.Module) -> int:
    """Count trainable parameters in model"""
    return sum(p.numel() for p in model.parameters() if p.requires_grad)
