"""Circular index arithmetic and ring slice splitting.

Every index handed around by the ring deques is a physical slot number in
``[0, size)``. These helpers keep it there. Python integers never overflow,
so the only degenerate input is ``size == 0``, which maps every index to 0
rather than dividing by zero.
"""


def wrap_index(index, size):
    if size == 0:
        return 0
    return index % size


def wrap_add(index, delta, size):
    return wrap_index(index + delta, size)


def wrap_sub(index, delta, size):
    return wrap_index(index - delta, size)


def count(tail, length, size):
    """Physical index one past the last of ``length`` elements starting at ``tail``."""
    return wrap_add(tail, length, size)


def is_contiguous(tail, length, size):
    return tail + length <= size


def ring_slices(buf, tail, length):
    """Split the live run of ``buf`` into at most two ordered slices.

    Returns ``(first, second)`` such that ``first`` followed by ``second`` is
    the logical front-to-back contents. When the run does not wrap, ``second``
    is empty. Slicing a numpy array yields views, so nothing is copied.
    """
    size = len(buf)
    if is_contiguous(tail, length, size):
        return buf[tail:tail + length], buf[0:0]
    head = count(tail, length, size)
    return buf[tail:size], buf[0:head]
