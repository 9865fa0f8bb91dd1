"""Fixed-capacity double-ended queue over a ring of numpy slots.

The backing array is allocated once and never resized. ``_length`` is what
tells an empty ring from a full one, since both have ``head == tail``.
"""

import operator
from typing import TypeVar, Generic, Iterable, Iterator, Optional, Tuple

import numpy as np

from ring_index import wrap_add, wrap_sub, is_contiguous, ring_slices
from ring_iter import RingIter

T = TypeVar('T')


class CapacityError(Exception):
    """A push or append was rejected because it would exceed capacity."""


class FullError(CapacityError):
    def __init__(self, item):
        super().__init__("push onto a full buffer")
        self.item = item


class CapacityExceededError(CapacityError):
    def __init__(self, needed, capacity):
        super().__init__(
            "append needs room for %d elements but capacity is %d" % (needed, capacity)
        )
        self.needed = needed
        self.capacity = capacity


class DequeOverflowError(OverflowError):
    """Raised by the non-fallible pushes. Callers are expected to check capacity first."""


class SlotRef:
    """Writable handle on a single slot of some indexable storage."""

    def __init__(self, storage, index, dtype=object):
        self._storage = storage
        self._index = index
        self._dtype = dtype

    def get(self):
        return self._storage[self._index]

    def set(self, value):
        self._storage[self._index] = check_item(value, self._dtype)

    value = property(get, set)


def _allocate(capacity, dtype):
    dtype = np.dtype(dtype)
    if dtype.kind == 'O':
        return np.full(capacity, None, dtype=object), None
    storage = np.zeros(capacity, dtype=dtype)
    return storage, dtype.type(0)


def _check_capacity(capacity):
    if isinstance(capacity, bool):
        raise ValueError("capacity must be a non-negative integer")
    try:
        capacity = operator.index(capacity)
    except TypeError:
        raise ValueError("capacity must be a non-negative integer") from None
    if capacity < 0:
        raise ValueError("capacity must be a non-negative integer")
    return capacity


def check_item(item, dtype):
    """Convert ``item`` to ``dtype`` the way a storage write would, or raise ``ValueError``.

    Object storage takes anything as is. For any other dtype the converted
    value must compare equal to ``item``, so a write never silently truncates
    or rounds (``2.7`` into an int buffer, ``"abcd"`` into ``U3``).
    """
    dtype = np.dtype(dtype)
    if dtype.kind == 'O':
        return item
    cell = np.zeros((), dtype=dtype)
    try:
        cell[()] = item
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValueError("%r cannot be stored as %s" % (item, dtype)) from exc
    value = cell[()]
    try:
        same = bool(value == item) or bool(value != value and item != item)
    except (TypeError, ValueError):
        same = False
    if not same:
        raise ValueError("%r would be stored as %r in a %s buffer" % (item, value, dtype))
    return value


class FixedRingBuffer(Generic[T]):
    def __init__(self, capacity: int, dtype=object) -> None:
        capacity = _check_capacity(capacity)
        self._storage, self._neutral = _allocate(capacity, dtype)
        self._capacity = capacity
        self._head = 0
        self._tail = 0
        self._length = 0

    @classmethod
    def from_iterable(cls, iterable: Iterable[T], capacity: int, dtype=object) -> 'FixedRingBuffer[T]':
        buf: FixedRingBuffer[T] = cls(capacity, dtype)
        buf.extend(iterable)
        return buf

    def capacity(self) -> int:
        return self._capacity

    def len(self) -> int:
        return self._length

    def is_empty(self) -> bool:
        return self._length == 0

    def is_full(self) -> bool:
        return self._length == self._capacity

    def try_push_back(self, item: T) -> None:
        """Push onto the back, raising ``FullError`` (carrying ``item``) if full."""
        value = check_item(item, self._storage.dtype)
        if self.is_full():
            raise FullError(item)
        self._storage[self._head] = value
        self._head = wrap_add(self._head, 1, self._capacity)
        self._length += 1

    def try_push_front(self, item: T) -> None:
        """Push onto the front, raising ``FullError`` (carrying ``item``) if full."""
        value = check_item(item, self._storage.dtype)
        if self.is_full():
            raise FullError(item)
        tail = wrap_sub(self._tail, 1, self._capacity)
        self._storage[tail] = value
        self._tail = tail
        self._length += 1

    def push_back(self, item: T) -> None:
        try:
            self.try_push_back(item)
        except FullError as exc:
            raise DequeOverflowError(
                "push_back onto a full FixedRingBuffer of capacity %d" % self._capacity
            ) from exc

    def push_front(self, item: T) -> None:
        try:
            self.try_push_front(item)
        except FullError as exc:
            raise DequeOverflowError(
                "push_front onto a full FixedRingBuffer of capacity %d" % self._capacity
            ) from exc

    def pop_back(self) -> Optional[T]:
        if self._length == 0:
            return None
        self._head = wrap_sub(self._head, 1, self._capacity)
        self._length -= 1
        return self._take(self._head)

    def pop_front(self) -> Optional[T]:
        if self._length == 0:
            return None
        tail = self._tail
        self._tail = wrap_add(self._tail, 1, self._capacity)
        self._length -= 1
        return self._take(tail)

    def get(self, index: int) -> Optional[T]:
        if index < 0 or index >= self._length:
            return None
        return self._storage[wrap_add(self._tail, index, self._capacity)]

    def get_mut(self, index: int) -> Optional[SlotRef]:
        if index < 0 or index >= self._length:
            return None
        return SlotRef(
            self._storage, wrap_add(self._tail, index, self._capacity), self._storage.dtype
        )

    def front(self) -> Optional[T]:
        return self.get(0)

    def back(self) -> Optional[T]:
        if self._length == 0:
            return None
        return self.get(self._length - 1)

    def is_contiguous(self) -> bool:
        return is_contiguous(self._tail, self._length, self._capacity)

    def as_slices(self) -> Tuple[np.ndarray, np.ndarray]:
        """Read-only views whose concatenation is the front-to-back contents."""
        first, second = ring_slices(self._storage, self._tail, self._length)
        first.flags.writeable = False
        second.flags.writeable = False
        return first, second

    def as_mut_slices(self) -> Tuple[np.ndarray, np.ndarray]:
        return ring_slices(self._storage, self._tail, self._length)

    def truncate(self, new_len: int) -> None:
        """Keep the first ``new_len`` elements and release the rest, back first."""
        if new_len < 0:
            raise ValueError("new_len must be non-negative")
        if new_len >= self._length:
            return
        drop = self._length - new_len
        first, second = self.as_mut_slices()
        from_second = min(drop, len(second))
        if from_second:
            second[len(second) - from_second:] = self._neutral
        from_first = drop - from_second
        if from_first:
            first[len(first) - from_first:] = self._neutral
        self._length = new_len
        self._head = wrap_sub(self._head, drop, self._capacity)

    def clear(self) -> None:
        self.truncate(0)

    def append(self, other) -> None:
        """Move every element of ``other`` onto the back, leaving ``other`` empty.

        Raises ``CapacityExceededError`` if the combined length would not fit,
        or ``ValueError`` if an element of ``other`` cannot be stored in this
        buffer's dtype. Either way neither side is touched.
        """
        if other is self:
            raise ValueError("cannot append a buffer to itself")
        needed = self._length + len(other)
        if needed > self._capacity:
            raise CapacityExceededError(needed, self._capacity)
        values = [check_item(item, self._storage.dtype) for item in other.iter()]
        for value in values:
            self.try_push_back(value)
        other.clear()

    def extend(self, iterable: Iterable[T]) -> None:
        for item in iterable:
            self.push_back(item)

    def contains(self, item) -> bool:
        for view in self.as_slices():
            for value in view:
                if value == item:
                    return True
        return False

    def iter(self) -> RingIter:
        return RingIter(self._storage, self._tail, self._length)

    def to_list(self) -> list:
        first, second = self.as_slices()
        return first.tolist() + second.tolist()

    def copy(self) -> 'FixedRingBuffer[T]':
        """Return a shallow copy with the same physical layout."""
        clone: FixedRingBuffer[T] = FixedRingBuffer(self._capacity, self._storage.dtype)
        clone._storage = self._storage.copy()
        clone._head = self._head
        clone._tail = self._tail
        clone._length = self._length
        return clone

    def _take(self, index):
        value = self._storage[index]
        self._storage[index] = self._neutral
        return value

    def __contains__(self, item) -> bool:
        return self.contains(item)

    def __iter__(self) -> Iterator[T]:
        return self.iter()

    def __reversed__(self) -> Iterator[T]:
        return self.iter().reversed()

    def __eq__(self, other):
        if not isinstance(other, FixedRingBuffer):
            return NotImplemented
        if self._capacity != other._capacity or self._length != other._length:
            return False
        return all(a == b for a, b in zip(self, other))

    def __repr__(self):
        return "FixedRingBuffer(%r, capacity=%d)" % (self.to_list(), self._capacity)

    def __len__(self) -> int:
        return self._length

    def __bool__(self) -> bool:
        return self._length > 0
