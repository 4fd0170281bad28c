"""
DQN Agent for the Snake Game

Plays a SnakeGame with an epsilon-greedy policy over a convolutional
Q-network and learns from a replay memory of past transitions.

Key features:
- Online network trained on replayed batches
- Target network for the bootstrapped Q targets, synced on demand
- Linearly decaying epsilon
"""

import random
from typing import NamedTuple, Optional

import numpy as np
import torch
import torch.nn as nn
import torch.optim as optim

from core.networks import create_deep_q_network, copy_weights
from core.replay_memory import ReplayMemory
from core.snake_game import SnakeGame, GameState, Action, ALL_ACTIONS, NUM_ACTIONS, get_state_tensor
from core.utils import LinearEpsilonSchedule, resolve_device


class Transition(NamedTuple):
    """One step of experience stored in the replay memory"""
    state: GameState
    action: int
    reward: float
    done: bool
    next_state: GameState


class SnakeGameAgent:
    """
    Epsilon-greedy DQN agent playing a single SnakeGame

    Every call to play_step() advances the game by one frame and stores
    the transition; finished games are reset automatically.
    """

    def __init__(
        self,
        game: SnakeGame,
        replay_buffer_size: int = 10000,
        epsilon_init: float = 0.5,
        epsilon_final: float = 0.01,
        epsilon_decay_frames: int = 100000,
        learning_rate: float = 0.001,
        device: Optional[str] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize agent.

        Args:
            game: Game to play (reset by the agent)
            replay_buffer_size: Replay memory capacity
            epsilon_init: Initial exploration rate
            epsilon_final: Final exploration rate
            epsilon_decay_frames: Frames over which epsilon decays linearly
            learning_rate: Learning rate for the default Adam optimizer
            device: Device to use (cuda/cpu)
            seed: Random seed for action and replay sampling
        """
        self.game = game
        self.replay_buffer_size = replay_buffer_size

        self.epsilon_schedule = LinearEpsilonSchedule(
            epsilon_init=epsilon_init,
            epsilon_final=epsilon_final,
            decay_frames=epsilon_decay_frames
        )
        self.epsilon = epsilon_init

        self.device = resolve_device(device)
        self.rng = random.Random(seed)

        # Networks
        self.online_network = create_deep_q_network(game.height, game.width, NUM_ACTIONS).to(self.device)
        self.target_network = create_deep_q_network(game.height, game.width, NUM_ACTIONS).to(self.device)
        copy_weights(self.target_network, self.online_network)
        for param in self.target_network.parameters():
            param.requires_grad_(False)

        self.optimizer = optim.Adam(self.online_network.parameters(), lr=learning_rate)
        self.loss_fn = nn.MSELoss()

        self.replay_memory: ReplayMemory[Transition] = ReplayMemory(replay_buffer_size, seed=seed)

        self.frame_count = 0
        self.cumulative_reward = 0.0
        self.fruits_eaten = 0
        self.reset()

    def reset(self):
        """Start a new game and clear per-episode stats"""
        self.cumulative_reward = 0.0
        self.fruits_eaten = 0
        self.game.reset()

    def select_action(self, state: GameState, epsilon: float) -> Action:
        """
        Select action using epsilon-greedy policy.

        Args:
            state: Current game snapshot
            epsilon: Probability of a uniformly random action

        Returns:
            Selected action
        """
        if self.rng.random() < epsilon:
            return self.rng.choice(ALL_ACTIONS)

        # Exploitation: choose action with highest Q-value
        self.online_network.eval()
        with torch.no_grad():
            state_tensor = self._to_tensor(get_state_tensor(state, self.game.height, self.game.width))
            q_values = self.online_network(state_tensor)
            action = q_values.argmax(dim=1).item()

        return Action(action)

    def play_step(self) -> dict:
        """
        Play one frame of the game and store the transition

        Returns:
            Dictionary with the action taken, the episode's cumulative
            reward and fruits eaten so far, and whether the episode ended
        """
        self.epsilon = self.epsilon_schedule.value(self.frame_count)
        self.frame_count += 1

        state = self.game.get_state()
        action = self.select_action(state, self.epsilon)
        result = self.game.step(action)
        next_state = self.game.get_state()

        self.replay_memory.append(
            Transition(state, int(action), float(result.reward), result.done, next_state)
        )

        self.cumulative_reward += result.reward
        if result.fruit_eaten:
            self.fruits_eaten += 1

        output = {
            'action': action,
            'cumulative_reward': self.cumulative_reward,
            'done': result.done,
            'fruits_eaten': self.fruits_eaten
        }

        if result.done:
            self.reset()

        return output

    def train_on_replay_batch(
        self,
        batch_size: int,
        gamma: float,
        optimizer: Optional[optim.Optimizer] = None
    ) -> float:
        """
        Perform one gradient step on a batch sampled from replay memory.

        Args:
            batch_size: Number of transitions to sample
            gamma: Discount factor
            optimizer: Optimizer to use (defaults to the agent's Adam)

        Returns:
            Loss value
        """
        if optimizer is None:
            optimizer = self.optimizer

        batch = self.replay_memory.sample(batch_size)
        height, width = self.game.height, self.game.width

        states = self._to_tensor(get_state_tensor([t.state for t in batch], height, width))
        next_states = self._to_tensor(get_state_tensor([t.next_state for t in batch], height, width))
        actions = torch.LongTensor([t.action for t in batch]).to(self.device)
        rewards = torch.FloatTensor([t.reward for t in batch]).to(self.device)
        dones = torch.FloatTensor([float(t.done) for t in batch]).to(self.device)

        # Compute current Q values
        self.online_network.train()
        current_q_values = self.online_network(states).gather(1, actions.unsqueeze(1)).squeeze(1)

        # Compute target Q values
        with torch.no_grad():
            next_q_values = self.target_network(next_states).max(dim=1)[0]
            target_q_values = rewards + (1 - dones) * gamma * next_q_values

        loss = self.loss_fn(current_q_values, target_q_values)

        optimizer.zero_grad()
        loss.backward()
        optimizer.step()

        return loss.item()

    def sync_target_network(self):
        """Copy online network weights into the target network"""
        copy_weights(self.target_network, self.online_network)

    def _to_tensor(self, array: np.ndarray) -> torch.Tensor:
        return torch.from_numpy(array).to(self.device)
