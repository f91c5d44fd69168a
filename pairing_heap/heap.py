# Persistent pairing heap with min/max and comparator orderings.

import logging
from collections import namedtuple
from . import node as nodes
from .node import Element
from .ordering import ASCENDING, ordered_predicate, describe

logger = logging.getLogger(__name__)

Popped = namedtuple('Popped', ['key', 'value', 'heap'])


class ModeMismatch(ValueError): pass


class Heap(object):
    """Immutable priority queue.

    Every "update" (put, pop, merge, extend) returns a new Heap;
    the heap it was called on stays valid and shares its
    untouched subtrees with the new one.

    Elements are `(key, value)` pairs. A pair put with the same
    key as the current root replaces it as the root, so it is
    popped before the old root.
    """

    __slots__ = ['_root', '_nelems', '_mode', '_ordered']

    def __init__(self, mode=ASCENDING, pairs=None):
        self._root = None
        self._nelems = 0
        self._mode = mode
        self._ordered = ordered_predicate(mode)

        if pairs is not None:
            heap = self.extend(pairs)
            self._root, self._nelems = heap._root, heap._nelems

    @classmethod
    def empty(cls, mode=ASCENDING):
        return cls(mode)

    @classmethod
    def from_pairs(cls, mode, pairs):
        """Build a heap by putting each `(key, value)` pair in order."""
        return cls.empty(mode).extend(pairs)

    def _derive(self, root, nelems):
        # keeps the predicate of this heap rather than deriving a new one
        heap = object.__new__(type(self))
        heap._root = root
        heap._nelems = nelems
        heap._mode = self._mode
        heap._ordered = self._ordered
        return heap

    @property
    def mode(self):
        return self._mode

    @property
    def size(self):
        return self._nelems

    @property
    def root(self):
        return self._root

    def is_empty(self):
        return self._root is None

    def put(self, key, value):
        """Return a new heap with `(key, value)` added. O(1)."""
        new = nodes.leaf(Element(key, value))
        if self._root is None:
            return self._derive(new, 1)

        # the new leaf goes first so it wins ties with the root
        return self._derive(nodes.meld(new, self._root, self._ordered), self._nelems + 1)

    def extend(self, pairs):
        """Return a new heap with every `(key, value)` in `pairs` put, in order."""
        heap = self
        n = 0
        for key, value in pairs:
            heap = heap.put(key, value)
            n += 1
        logger.debug('Put {} pairs, size now {}'.format(n, heap._nelems))
        return heap

    def peek(self):
        """The root element, or None if the heap is empty."""
        if self._root is None:
            return None
        return self._root.element

    def pop(self):
        """Remove the root.

        Returns `Popped(key, value, heap)` with the remaining heap,
        or None if the heap is empty. O(log n) amortized.
        """
        root = self._root
        if root is None:
            return None

        key, value = root.element
        if not root.children:
            rest = self._derive(None, 0)
        else:
            rest = self._derive(
                nodes.consolidate(nodes.children(root), self._ordered),
                self._nelems - 1)
        return Popped(key, value, rest)

    def drain(self, n):
        """Pop up to `n` elements.

        Returns the popped elements in heap order and
        the remaining heap, which is empty if there were
        fewer than `n` elements."""
        if not isinstance(n, int) or n < 0:
            raise ValueError('Drain count must be a non-negative integer, got {!r}'.format(n))

        elements = []
        heap = self
        while len(elements) < n:
            popped = heap.pop()
            if popped is None:
                break
            elements.append(Element(popped.key, popped.value))
            heap = popped.heap
        return elements, heap

    def merge(self, other):
        """Meld two heaps with the same mode. O(1).

        Raises ModeMismatch if the modes (including
        any comparator) differ."""
        if self._mode != other._mode:
            logger.debug('Refusing to merge {} heap with {} heap'.format(
                describe(self._mode), describe(other._mode)))
            raise ModeMismatch('Cannot merge heaps with different modes: {} and {}'.format(
                describe(self._mode), describe(other._mode)))

        if other._root is None:
            return self
        if self._root is None:
            return other

        root = nodes.consolidate([self._root, other._root], self._ordered)
        return self._derive(root, self._nelems + other._nelems)

    @staticmethod
    def merge_all(heaps):
        """Merge a non-empty sequence of heaps.

        Pairs the heaps up the same way node consolidation
        pairs up siblings: merge the first two, merge all of
        the rest, then merge the two results."""
        heaps = list(heaps)
        if not heaps:
            raise ValueError('merge_all needs at least one heap')

        mode = heaps[0]._mode
        for h in heaps[1:]:
            if h._mode != mode:
                logger.debug('Refusing to merge {} heap with {} heap'.format(
                    describe(mode), describe(h._mode)))
                raise ModeMismatch('Cannot merge heaps with different modes: {} and {}'.format(
                    describe(mode), describe(h._mode)))

        pairs = []
        for i in range(0, len(heaps), 2):
            if i + 1 < len(heaps):
                pairs.append(heaps[i].merge(heaps[i+1]))
            else:
                pairs.append(heaps[i])

        merged = pairs.pop()
        while pairs:
            merged = pairs.pop().merge(merged)
        logger.debug('Merged {} heaps, size {}'.format(len(heaps), merged._nelems))
        return merged

    def contains(self, key, value):
        """Check if the exact `(key, value)` pair is in the heap."""
        if self._root is None:
            return False
        return nodes.contains(self._root, Element(key, value), self._ordered)

    def __contains__(self, pair):
        try:
            key, value = pair
        except (TypeError, ValueError):
            return False
        return self.contains(key, value)

    def __iter__(self):
        """Yield elements in heap order.

        Pops from this value without changing it,
        so a heap can be iterated any number of times."""
        heap = self
        while True:
            popped = heap.pop()
            if popped is None:
                return
            yield Element(popped.key, popped.value)
            heap = popped.heap

    def __len__(self):
        return self._nelems

    def __bool__(self):
        return self._root is not None

    def __repr__(self):
        root = 'empty' if self._root is None else repr(tuple(self._root.element))
        return '<Heap root={} size={} mode={}>'.format(root, self._nelems, describe(self._mode))
