"""
DQN Training Script

Trains a SnakeGameAgent with:
- Replay memory warm-up before the first update
- One replayed training batch per played frame
- Periodic target network sync
- 100-episode moving averages for progress reporting and stopping
"""

import sys
from pathlib import Path
sys.path.append(str(Path(__file__).parent.parent.parent))

import time
from typing import Optional

import torch

from agents.dqn_agent import SnakeGameAgent
from core.snake_game import SnakeGame, SnakeGameConfig
from core.utils import MovingAverager, set_seed, get_device


class DQNTrainer:
    """DQN Training Manager"""

    def __init__(
        self,
        # Game config
        height: int = 9,
        width: int = 9,
        num_fruits: int = 1,
        init_len: int = 2,

        # Training config
        batch_size: int = 64,
        gamma: float = 0.99,
        learning_rate: float = 0.001,
        replay_buffer_size: int = 10000,

        # Exploration config
        epsilon_init: float = 0.5,
        epsilon_final: float = 0.01,
        epsilon_decay_frames: int = 100000,

        # Stopping config
        cumulative_reward_threshold: float = 100.0,
        max_num_frames: int = 1000000,
        sync_every_frames: int = 1000,
        averaging_window: int = 100,

        # Other
        seed: int = 42,
        device: Optional[torch.device] = None
    ):
        """Initialize DQN trainer"""
        set_seed(seed)

        self.device = device if device else get_device()

        self.batch_size = batch_size
        self.gamma = gamma
        self.cumulative_reward_threshold = cumulative_reward_threshold
        self.max_num_frames = max_num_frames
        self.sync_every_frames = sync_every_frames

        self.game = SnakeGame(
            SnakeGameConfig(
                height=height,
                width=width,
                num_fruits=num_fruits,
                init_len=init_len
            ),
            seed=seed
        )

        self.agent = SnakeGameAgent(
            self.game,
            replay_buffer_size=replay_buffer_size,
            epsilon_init=epsilon_init,
            epsilon_final=epsilon_final,
            epsilon_decay_frames=epsilon_decay_frames,
            learning_rate=learning_rate,
            device=str(self.device),
            seed=seed
        )
        self.optimizer = self.agent.optimizer

        self.reward_averager = MovingAverager(averaging_window)
        self.eaten_averager = MovingAverager(averaging_window)

        # Training state
        self.episode = 0
        self.best_average_reward = float('-inf')
        self.losses = []

    def warm_up(self):
        """Fill the replay memory before the first training batch"""
        for _ in range(self.agent.replay_buffer_size):
            self.agent.play_step()

    def train(self, verbose: bool = True) -> dict:
        """Main training loop"""

        if verbose:
            print("Starting DQN Training...", flush=True)
            print(f"Device: {self.device}", flush=True)
            print(f"Board: {self.game.height}x{self.game.width}, fruits: {self.game.num_fruits}", flush=True)
            print(f"Replay memory: {self.agent.replay_buffer_size}", flush=True)
            print(flush=True)

        self.warm_up()

        start_time = time.time()
        t_prev = start_time
        frame_count_prev = self.agent.frame_count

        while True:
            loss = self.agent.train_on_replay_batch(self.batch_size, self.gamma, self.optimizer)
            self.losses.append(loss)

            step = self.agent.play_step()

            if step['done']:
                self.episode += 1

                t_now = time.time()
                elapsed = t_now - t_prev
                fps = (self.agent.frame_count - frame_count_prev) / elapsed if elapsed > 0 else 0
                t_prev = t_now
                frame_count_prev = self.agent.frame_count

                self.reward_averager.append(step['cumulative_reward'])
                self.eaten_averager.append(step['fruits_eaten'])
                average_reward = self.reward_averager.average()
                average_eaten = self.eaten_averager.average()

                if verbose:
                    print(
                        f"Frame #{self.agent.frame_count}: "
                        f"cumulativeReward100={average_reward:.1f}; "
                        f"eaten100={average_eaten:.2f} "
                        f"(epsilon={self.agent.epsilon:.3f}) "
                        f"({fps:.1f} frames/s)",
                        flush=True
                    )

                if average_reward > self.best_average_reward:
                    self.best_average_reward = average_reward

                if average_reward >= self.cumulative_reward_threshold:
                    if verbose:
                        print(f"Reached reward threshold {self.cumulative_reward_threshold}", flush=True)
                    break

            if self.agent.frame_count >= self.max_num_frames:
                if verbose:
                    print(f"Reached max frames {self.max_num_frames}", flush=True)
                break

            if self.agent.frame_count % self.sync_every_frames == 0:
                self.agent.sync_target_network()
                if verbose:
                    print("Synced weights from online network to target network", flush=True)

        if verbose:
            print("Training complete!", flush=True)
            print(f"Training finished after {self.episode} episodes", flush=True)

        return {
            'episodes': self.episode,
            'frames': self.agent.frame_count,
            'average_reward': self.reward_averager.average(),
            'average_eaten': self.eaten_averager.average(),
            'best_average_reward': self.best_average_reward,
            'elapsed': time.time() - start_time
        }


if __name__ == '__main__':
    trainer = DQNTrainer(
        height=9,
        width=9,
        num_fruits=1,
        init_len=2,
        batch_size=64,
        gamma=0.99,
        learning_rate=0.001,
        replay_buffer_size=10000,
        sync_every_frames=1000
    )
    trainer.train(verbose=True)
