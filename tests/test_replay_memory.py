"""
Tests for ReplayMemory
"""
import pytest
import numpy as np
from core.errors import EmptyBufferError, InvalidConfigurationError
from core.replay_memory import ReplayMemory


class TestReplayMemory:
    """Test ReplayMemory functionality"""

    def test_initialization(self):
        """Test memory initializes empty"""
        memory = ReplayMemory(10)
        assert len(memory) == 0
        assert memory.length == 0
        assert memory.max_length == 10

    @pytest.mark.parametrize('max_length', [0, -1, 2.5, None, '3', True])
    def test_invalid_max_length(self, max_length):
        """Test capacity must be a positive integer"""
        with pytest.raises(InvalidConfigurationError):
            ReplayMemory(max_length)

    def test_not_going_over_limit(self):
        """Test sampling under capacity draws from stored items only"""
        memory = ReplayMemory(10, seed=0)
        memory.append(10)
        memory.append(20)
        memory.append(30)
        assert memory.length == 3

        for _ in range(10):
            batch = memory.sample(4)
            assert len(batch) == 4
            assert all(x in (10, 20, 30) for x in batch)

    def test_going_over_limit(self):
        """Test oldest item is evicted once capacity is reached"""
        memory = ReplayMemory(3, seed=0)
        for x in (10, 20, 30, 40):
            memory.append(x)
        assert memory.length == 3

        for _ in range(50):
            batch = memory.sample(4)
            assert len(batch) == 4
            assert all(x in (20, 30, 40) for x in batch)

    def test_fifo_order(self):
        """Test resident items keep insertion order"""
        memory = ReplayMemory(4)
        for i in range(10):
            memory.append(i)
            assert len(memory) == min(i + 1, 4)

        assert list(memory) == [6, 7, 8, 9]

    def test_sample_from_empty(self):
        """Test sampling an empty memory fails"""
        memory = ReplayMemory(5)

        with pytest.raises(EmptyBufferError):
            memory.sample(1)

    def test_sample_after_clear(self):
        """Test clear empties the memory"""
        memory = ReplayMemory(5)
        memory.append('a')
        memory.clear()

        assert len(memory) == 0
        with pytest.raises(EmptyBufferError):
            memory.sample(2)

    def test_sample_with_replacement(self):
        """Test batch may be larger than the memory"""
        memory = ReplayMemory(5, seed=1)
        memory.append('only')

        assert memory.sample(8) == ['only'] * 8

    def test_sample_covers_all_items(self):
        """Test sampling is spread over every stored item"""
        memory = ReplayMemory(4, seed=2)
        for x in 'abcd':
            memory.append(x)

        assert set(memory.sample(400)) == set('abcd')

    def test_sample_zero(self):
        """Test an empty batch is allowed"""
        memory = ReplayMemory(3)
        memory.append(1)

        assert memory.sample(0) == []

    @pytest.mark.parametrize('batch_size', [-1, 1.5, '2'])
    def test_invalid_batch_size(self, batch_size):
        """Test batch size must be a non-negative integer"""
        memory = ReplayMemory(3)
        memory.append(1)

        with pytest.raises(ValueError):
            memory.sample(batch_size)

    def test_arbitrary_item_types(self):
        """Test items are stored as given"""
        memory = ReplayMemory(2, seed=0)
        transition = (np.zeros(3), 1, 0.5, np.ones(3), False)
        memory.append(transition)

        sampled = memory.sample(1)[0]
        assert sampled is transition

    def test_is_ready(self):
        """Test is_ready check"""
        memory = ReplayMemory(100)

        assert not memory.is_ready(10)
        for i in range(10):
            memory.append(i)

        assert memory.is_ready(10)
        assert not memory.is_ready(20)


class TestReplayMemoryReproducibility:
    """Test reproducibility with seeds"""

    def test_seeded_sampling(self):
        """Test same seed and appends give the same samples"""
        memory1 = ReplayMemory(50, seed=42)
        memory2 = ReplayMemory(50, seed=42)

        for i in range(30):
            memory1.append(i)
            memory2.append(i)

        for _ in range(5):
            assert memory1.sample(16) == memory2.sample(16)

    def test_reseed(self):
        """Test reseeding restarts the sample sequence"""
        memory = ReplayMemory(20, seed=7)
        for i in range(20):
            memory.append(i)

        first = memory.sample(10)
        memory.seed(7)
        assert memory.sample(10) == first


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
