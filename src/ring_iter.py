"""Double-ended iterators shared by the fixed and hybrid deques."""

from ring_index import wrap_add, wrap_sub


class DequeIter:
    """Iterator that can be consumed from either end.

    ``len()`` is always the number of elements not yet yielded from either
    end. Once both ends meet the iterator stays exhausted.
    """

    def __init__(self, remaining):
        self._remaining = remaining

    def _take_front(self):
        raise NotImplementedError

    def _take_back(self):
        raise NotImplementedError

    def __iter__(self):
        return self

    def __next__(self):
        if self._remaining == 0:
            raise StopIteration
        self._remaining -= 1
        return self._take_front()

    def next_back(self):
        if self._remaining == 0:
            raise StopIteration
        self._remaining -= 1
        return self._take_back()

    def reversed(self):
        """Drain the remaining elements back to front."""
        while self._remaining:
            yield self.next_back()

    def __len__(self):
        return self._remaining

    def __length_hint__(self):
        return self._remaining


class RingIter(DequeIter):
    def __init__(self, storage, tail, length):
        super().__init__(length)
        self._storage = storage
        self._size = len(storage)
        self._front = tail
        self._back = wrap_add(tail, length, self._size)

    def _take_front(self):
        value = self._storage[self._front]
        self._front = wrap_add(self._front, 1, self._size)
        return value

    def _take_back(self):
        self._back = wrap_sub(self._back, 1, self._size)
        return self._storage[self._back]


class SequenceIter(DequeIter):
    """Walks a reversible sequence such as a ``collections.deque`` from both ends.

    Uses the sequence's own forward and reverse iterators, so each step is
    O(1) even where indexing the middle is not. The shared remaining count
    keeps the two ends from crossing.
    """

    def __init__(self, seq):
        super().__init__(len(seq))
        self._forward = iter(seq)
        self._backward = reversed(seq)

    def _take_front(self):
        return next(self._forward)

    def _take_back(self):
        return next(self._backward)
