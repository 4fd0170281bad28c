"""
Reproducibility test module for Snake DQN

Tests to verify reproducibility:
- Same seed produces same random streams
- Same seed produces same games, replay samples and agent rollouts
"""
