"""Deque that starts on a fixed ring and spills to a growable deque on overflow.

A ``HybridDeque`` is in exactly one of two states. While "stacked" it
delegates to a ``FixedRingBuffer``. The first push that the ring rejects
moves every element, in order, into a ``GrowableDeque`` and the deque stays
there for the rest of its life.
"""

import logging
from collections import deque
from typing import TypeVar, Generic, Iterable, Iterator, Optional, Tuple

from fixed_ring_buffer import FixedRingBuffer, FullError, SlotRef, check_item
from ring_iter import DequeIter, SequenceIter

logger = logging.getLogger(__name__)

T = TypeVar('T')


class DequeView:
    """Live view over a ``collections.deque``, the heap-side slice.

    Integer indexing, iteration and ``len`` read the deque in place. Slicing
    returns a new ``list`` holding the selected elements.
    """

    def __init__(self, data, writeable=False, dtype=object):
        self._data = data
        self._writeable = writeable
        self._dtype = dtype

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self._data[i] for i in range(*index.indices(len(self._data)))]
        return self._data[index]

    def __setitem__(self, index, value):
        if not self._writeable:
            raise TypeError("DequeView is read-only")
        self._data[index] = check_item(value, self._dtype)

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)

    def tolist(self):
        return list(self._data)

    def __repr__(self):
        return "DequeView(%r)" % (list(self._data),)


_EMPTY = ()


class GrowableDeque(Generic[T]):
    """The heap arm: ``collections.deque`` shaped like ``FixedRingBuffer``."""

    def __init__(self, items: Iterable[T] = (), dtype=object) -> None:
        self._dtype = dtype
        self._data = deque(check_item(item, dtype) for item in items)

    def push_back(self, item: T) -> None:
        self._data.append(check_item(item, self._dtype))

    def push_front(self, item: T) -> None:
        self._data.appendleft(check_item(item, self._dtype))

    def pop_back(self) -> Optional[T]:
        if not self._data:
            return None
        return self._data.pop()

    def pop_front(self) -> Optional[T]:
        if not self._data:
            return None
        return self._data.popleft()

    def get(self, index: int) -> Optional[T]:
        if index < 0 or index >= len(self._data):
            return None
        return self._data[index]

    def get_mut(self, index: int) -> Optional[SlotRef]:
        if index < 0 or index >= len(self._data):
            return None
        return SlotRef(self._data, index, self._dtype)

    def front(self) -> Optional[T]:
        return self.get(0)

    def back(self) -> Optional[T]:
        if not self._data:
            return None
        return self._data[-1]

    def len(self) -> int:
        return len(self._data)

    def is_empty(self) -> bool:
        return not self._data

    def truncate(self, new_len: int) -> None:
        if new_len < 0:
            raise ValueError("new_len must be non-negative")
        while len(self._data) > new_len:
            self._data.pop()

    def clear(self) -> None:
        self.truncate(0)

    def as_slices(self) -> Tuple[DequeView, DequeView]:
        return DequeView(self._data), DequeView(_EMPTY)

    def as_mut_slices(self) -> Tuple[DequeView, DequeView]:
        return DequeView(self._data, writeable=True, dtype=self._dtype), DequeView(_EMPTY)

    def contains(self, item) -> bool:
        return item in self._data

    def iter(self) -> SequenceIter:
        return SequenceIter(self._data)

    def copy(self) -> 'GrowableDeque[T]':
        return GrowableDeque(self._data, self._dtype)

    def __len__(self) -> int:
        return len(self._data)


class HybridIter(DequeIter):
    """Forwards to whichever arm's iterator was live when it was created."""

    def __init__(self, inner):
        super().__init__(len(inner))
        self._inner = inner

    def _take_front(self):
        return next(self._inner)

    def _take_back(self):
        return self._inner.next_back()


class HybridDeque(Generic[T]):
    def __init__(self, capacity: int, dtype=object) -> None:
        self._stack: Optional[FixedRingBuffer[T]] = FixedRingBuffer(capacity, dtype)
        self._capacity = self._stack.capacity()
        self._dtype = dtype
        self._heap: Optional[GrowableDeque[T]] = None

    @classmethod
    def with_capacity(cls, capacity: int, hint: int, dtype=object) -> 'HybridDeque[T]':
        """Start on the heap right away when ``hint`` will not fit in ``capacity`` slots."""
        hd: HybridDeque[T] = cls(capacity, dtype)
        if hint > capacity:
            hd._stack = None
            hd._heap = GrowableDeque(dtype=dtype)
        return hd

    @classmethod
    def from_iterable(cls, iterable: Iterable[T], capacity: int, dtype=object) -> 'HybridDeque[T]':
        items = list(iterable)
        hd: HybridDeque[T] = cls.with_capacity(capacity, len(items), dtype)
        hd.extend(items)
        return hd

    def _arm(self):
        if self._heap is not None:
            return self._heap
        return self._stack

    def is_spilled(self) -> bool:
        return self._heap is not None

    def capacity(self) -> int:
        """Fixed slot count of the stack arm, whichever arm is active."""
        return self._capacity

    def push_back(self, item: T) -> None:
        if self._heap is not None:
            self._heap.push_back(item)
            return
        try:
            self._stack.try_push_back(item)
        except FullError as rejected:
            self._spill().push_back(rejected.item)

    def push_front(self, item: T) -> None:
        if self._heap is not None:
            self._heap.push_front(item)
            return
        try:
            self._stack.try_push_front(item)
        except FullError as rejected:
            self._spill().push_front(rejected.item)

    def _spill(self) -> GrowableDeque[T]:
        stack = self._stack
        moved = len(stack)
        heap: GrowableDeque[T] = GrowableDeque(dtype=self._dtype)
        while not stack.is_empty():
            heap.push_back(stack.pop_front())
        self._heap = heap
        self._stack = None
        logger.debug("spilled %d elements from fixed capacity %d", moved, self._capacity)
        return heap

    def pop_back(self) -> Optional[T]:
        return self._arm().pop_back()

    def pop_front(self) -> Optional[T]:
        return self._arm().pop_front()

    def get(self, index: int) -> Optional[T]:
        return self._arm().get(index)

    def get_mut(self, index: int) -> Optional[SlotRef]:
        return self._arm().get_mut(index)

    def front(self) -> Optional[T]:
        return self._arm().front()

    def back(self) -> Optional[T]:
        return self._arm().back()

    def truncate(self, new_len: int) -> None:
        self._arm().truncate(new_len)

    def clear(self) -> None:
        self.truncate(0)

    def as_slices(self):
        return self._arm().as_slices()

    def as_mut_slices(self):
        return self._arm().as_mut_slices()

    def len(self) -> int:
        return len(self._arm())

    def is_empty(self) -> bool:
        return self._arm().is_empty()

    def contains(self, item) -> bool:
        return self._arm().contains(item)

    def extend(self, iterable: Iterable[T]) -> None:
        for item in iterable:
            self.push_back(item)

    def iter(self) -> HybridIter:
        return HybridIter(self._arm().iter())

    def to_list(self) -> list:
        return list(self.iter())

    def copy(self) -> 'HybridDeque[T]':
        clone: HybridDeque[T] = HybridDeque.__new__(HybridDeque)
        clone._capacity = self._capacity
        clone._dtype = self._dtype
        clone._stack = self._stack.copy() if self._stack is not None else None
        clone._heap = self._heap.copy() if self._heap is not None else None
        return clone

    def __contains__(self, item) -> bool:
        return self.contains(item)

    def __iter__(self) -> Iterator[T]:
        return self.iter()

    def __reversed__(self) -> Iterator[T]:
        return self.iter().reversed()

    def __repr__(self):
        state = "heap" if self.is_spilled() else "stack"
        return "HybridDeque(%r, capacity=%d, state=%s)" % (self.to_list(), self._capacity, state)

    def __len__(self) -> int:
        return len(self._arm())

    def __bool__(self) -> bool:
        return not self.is_empty()
