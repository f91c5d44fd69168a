import random
import unittest
from datetime import date
from click.testing import CliRunner
from pairing_heap import node as nodes
from pairing_heap import Heap, Element, ModeMismatch
from pairing_heap.main import cli, parse_line
from pairing_heap.ordering import (
    ASCENDING, DESCENDING, Direction, Mode, UnsupportedMode,
    ascending_by, descending_by, ordered_predicate, parse_mode, describe)


def compare_dates(a, b):
    return (a > b) - (a < b)


def compare_lengths(a, b):
    return len(a) - len(b)


def heap_ordered(heap):
    """every parent is ordered relative to each of its children"""
    if heap.root is None:
        return True
    ordered = ordered_predicate(heap.mode)
    for node in nodes.walk(heap.root):
        for child in nodes.children(node):
            if not ordered(node.element, child.element):
                return False
    return True


def node_count(heap):
    if heap.root is None:
        return 0
    return sum(1 for _ in nodes.walk(heap.root))


def recursive_consolidate(ns, ordered):
    """textbook recursive pairing, to compare against"""
    if len(ns) == 1:
        return ns[0]
    if len(ns) == 2:
        return nodes.meld(ns[0], ns[1], ordered)
    return nodes.meld(
        nodes.meld(ns[0], ns[1], ordered),
        recursive_consolidate(ns[2:], ordered),
        ordered)


class OrderingTests(unittest.TestCase):
    def test_plain_modes(self):
        lo, hi = Element(1, 'a'), Element(2, 'b')
        asc = ordered_predicate(ASCENDING)
        desc = ordered_predicate(DESCENDING)
        self.assertTrue(asc(lo, hi))
        self.assertFalse(asc(hi, lo))
        self.assertTrue(desc(hi, lo))
        self.assertFalse(desc(lo, hi))

    def test_ties_are_ordered(self):
        a, b = Element(1, 'a'), Element(1, 'b')
        for mode in [ASCENDING, DESCENDING, ascending_by(compare_dates), descending_by(compare_dates)]:
            ordered = ordered_predicate(mode)
            self.assertTrue(ordered(a, b))
            self.assertTrue(ordered(b, a))

    def test_comparator_directions_are_symmetric(self):
        short, long = Element('x', 1), Element('xyz', 2)
        asc = ordered_predicate(ascending_by(compare_lengths))
        desc = ordered_predicate(descending_by(compare_lengths))
        self.assertTrue(asc(short, long))
        self.assertFalse(asc(long, short))
        self.assertTrue(desc(long, short))
        self.assertFalse(desc(short, long))

    def test_unsupported_mode(self):
        self.assertRaises(UnsupportedMode, ordered_predicate, 'min')
        self.assertRaises(UnsupportedMode, ordered_predicate, Mode('sideways', None))
        self.assertRaises(UnsupportedMode, ordered_predicate, Mode(Direction.ASCENDING, 42))
        self.assertRaises(UnsupportedMode, Heap, None)

    def test_parse_mode(self):
        self.assertEqual(parse_mode('min'), ASCENDING)
        self.assertEqual(parse_mode('ASC'), ASCENDING)
        self.assertEqual(parse_mode('max'), DESCENDING)
        self.assertEqual(parse_mode('desc'), DESCENDING)
        self.assertRaises(UnsupportedMode, parse_mode, 'median')
        self.assertRaises(UnsupportedMode, parse_mode, None)

    def test_modes_compare_comparators(self):
        self.assertEqual(ascending_by(compare_dates), ascending_by(compare_dates))
        self.assertNotEqual(ascending_by(compare_dates), descending_by(compare_dates))
        self.assertNotEqual(ascending_by(compare_dates), ascending_by(compare_lengths))
        self.assertNotEqual(ascending_by(compare_dates), ASCENDING)

    def test_describe(self):
        self.assertEqual(describe(ASCENDING), 'min')
        self.assertEqual(describe(DESCENDING), 'max')
        self.assertEqual(describe(descending_by(compare_dates)), 'max-by compare_dates')


class NodeTests(unittest.TestCase):
    def setUp(self):
        self.ordered = ordered_predicate(ASCENDING)

    def test_leaf(self):
        n = nodes.leaf(Element(1, 'a'))
        self.assertEqual(n.element, (1, 'a'))
        self.assertEqual(list(nodes.children(n)), [])

    def test_meld(self):
        a = nodes.leaf(Element(1, 'a'))
        b = nodes.leaf(Element(2, 'b'))
        for n in [nodes.meld(a, b, self.ordered), nodes.meld(b, a, self.ordered)]:
            self.assertEqual(n.element, (1, 'a'))
            self.assertEqual([c.element for c in nodes.children(n)], [(2, 'b')])

    def test_meld_tie_first_wins(self):
        a = nodes.leaf(Element(1, 'a'))
        b = nodes.leaf(Element(1, 'b'))
        self.assertEqual(nodes.meld(a, b, self.ordered).element, (1, 'a'))
        self.assertEqual(nodes.meld(b, a, self.ordered).element, (1, 'b'))

    def test_meld_attaches_to_front(self):
        root = nodes.leaf(Element(0, 'root'))
        for i in range(1, 4):
            root = nodes.meld(root, nodes.leaf(Element(i, i)), self.ordered)
        self.assertEqual([c.element.key for c in nodes.children(root)], [3, 2, 1])

    def test_meld_does_not_modify_inputs(self):
        a = nodes.meld(nodes.leaf(Element(1, 'a')), nodes.leaf(Element(3, 'c')), self.ordered)
        b = nodes.leaf(Element(2, 'b'))
        melded = nodes.meld(a, b, self.ordered)
        self.assertEqual([c.element for c in nodes.children(a)], [(3, 'c')])
        self.assertEqual([c.element for c in nodes.children(melded)], [(2, 'b'), (3, 'c')])

    def test_consolidate_single(self):
        n = nodes.leaf(Element(5, 'e'))
        self.assertIs(nodes.consolidate([n], self.ordered), n)

    def test_consolidate_empty(self):
        self.assertRaises(ValueError, nodes.consolidate, [], self.ordered)

    def test_consolidate_matches_recursive_pairing(self):
        rng = random.Random(0)
        for length in range(1, 12):
            # small key range so ties are common
            ns = [nodes.leaf(Element(rng.randint(0, 3), i)) for i in range(length)]
            self.assertEqual(
                nodes.consolidate(ns, self.ordered),
                recursive_consolidate(ns, self.ordered))

    def test_consolidate_accepts_iterators(self):
        ns = [nodes.leaf(Element(k, k)) for k in [4, 2, 3, 1, 5]]
        root = nodes.consolidate(iter(ns), self.ordered)
        self.assertEqual(root.element, (1, 1))
        self.assertEqual(sum(1 for _ in nodes.walk(root)), 5)

    def test_contains(self):
        heap = Heap.from_pairs(ASCENDING, [(k, str(k)) for k in [5, 3, 8, 1, 9]])
        self.assertTrue(nodes.contains(heap.root, Element(8, '8'), self.ordered))
        self.assertFalse(nodes.contains(heap.root, Element(8, '9'), self.ordered))
        self.assertFalse(nodes.contains(heap.root, Element(0, '0'), self.ordered))

    def test_contains_prunes(self):
        seen = []

        def ordered(a, b):
            seen.append(a.key)
            return a.key <= b.key

        root = nodes.leaf(Element(0, 'root'))
        for k in [10, 20, 30]:
            child = nodes.meld(nodes.leaf(Element(k, k)), nodes.leaf(Element(k + 1, k + 1)), ordered)
            root = nodes.meld(root, child, ordered)
        del seen[:]

        # only the root and the subtree rooted at 10 can hold key 11
        self.assertTrue(nodes.contains(root, Element(11, 11), ordered))
        self.assertNotIn(21, seen)
        self.assertNotIn(31, seen)


class HeapTests(unittest.TestCase):
    def test_empty(self):
        h = Heap.empty(ASCENDING)
        self.assertTrue(h.is_empty())
        self.assertEqual(h.size, 0)
        self.assertEqual(len(h), 0)
        self.assertFalse(h)
        self.assertIsNone(h.peek())
        self.assertIsNone(h.pop())
        self.assertFalse(h.contains(1, 'a'))

    def test_put_pop(self):
        h = Heap(ASCENDING).put(2, 'b').put(1, 'a')
        popped = h.pop()
        self.assertEqual((popped.key, popped.value), (1, 'a'))
        self.assertEqual(popped.heap.size, 1)
        self.assertEqual(popped.heap.peek(), (2, 'b'))

    def test_max_heap(self):
        h = Heap(DESCENDING).put(2, 'b').put(1, 'a')
        popped = h.pop()
        self.assertEqual((popped.key, popped.value), (2, 'b'))

    def test_comparator_mode(self):
        h = Heap.from_pairs(ascending_by(compare_dates), [
            (date(2023, 12, 2), 'b'), (date(2023, 12, 1), 'a')])
        self.assertEqual(h.pop()[:2], (date(2023, 12, 1), 'a'))

        h = Heap.from_pairs(descending_by(compare_lengths), [('ab', 1), ('abcd', 2), ('a', 3)])
        self.assertEqual([e.key for e in h], ['abcd', 'ab', 'a'])

    def test_size_after_pop(self):
        h = Heap.from_pairs(ASCENDING, [(2, 'b'), (2, 'a')])
        self.assertEqual(h.pop().heap.size, 1)

    def test_pop_last_element(self):
        h = Heap(DESCENDING).put(1, 'a')
        rest = h.pop().heap
        self.assertTrue(rest.is_empty())
        self.assertEqual(rest.size, 0)
        self.assertEqual(rest.mode, DESCENDING)

    def test_peek(self):
        h = Heap.from_pairs(ASCENDING, [(2, 'b'), (1, 'a'), (3, 'c')])
        self.assertEqual(h.peek(), (1, 'a'))
        self.assertEqual(h.size, 3)

    def test_drain(self):
        h = Heap.from_pairs(ASCENDING, [(3, 'c'), (1, 'a'), (2, 'b')])
        pairs, rest = h.drain(2)
        self.assertEqual(pairs, [(1, 'a'), (2, 'b')])
        self.assertEqual(rest.size, 1)
        self.assertEqual(rest.peek(), (3, 'c'))

    def test_drain_more_than_size(self):
        h = Heap.from_pairs(ASCENDING, [(3, 'c'), (1, 'a')])
        pairs, rest = h.drain(5)
        self.assertEqual(pairs, [(1, 'a'), (3, 'c')])
        self.assertTrue(rest.is_empty())

    def test_drain_zero(self):
        h = Heap.from_pairs(ASCENDING, [(3, 'c')])
        pairs, rest = h.drain(0)
        self.assertEqual(pairs, [])
        self.assertIs(rest, h)

    def test_drain_invalid(self):
        h = Heap(ASCENDING)
        self.assertRaises(ValueError, h.drain, -1)
        self.assertRaises(ValueError, h.drain, 1.5)

    def test_duplicate_root_key_min(self):
        h = Heap.from_pairs(ASCENDING, [(2, 'b'), (1, 'a'), (3, 'c')])
        h = h.put(1, 'aa').put(1, 'aaa')
        first_three, _ = h.drain(3)
        self.assertEqual(first_three, [(1, 'aaa'), (1, 'aa'), (1, 'a')])

    def test_duplicate_root_key_max(self):
        h = Heap.from_pairs(DESCENDING, [(2, 'b'), (1, 'a'), (3, 'c')])
        h = h.put(3, 'cc').put(3, 'ccc')
        first_three, _ = h.drain(3)
        self.assertEqual(first_three, [(3, 'ccc'), (3, 'cc'), (3, 'c')])

    def test_equal_keys_below_root(self):
        # ties are only broken by insertion order against the root at put time
        h = Heap.from_pairs(ASCENDING, [(0, 'r'), (1, 'a'), (0.5, 'm'), (1, 'b')])
        self.assertEqual(list(h), [(0, 'r'), (0.5, 'm'), (1, 'a'), (1, 'b')])

    def test_duplicate_pairs(self):
        h = Heap.from_pairs(ASCENDING, [(1, 'a'), (1, 'a'), (1, 'a')])
        self.assertEqual(h.size, 3)
        self.assertEqual(list(h), [(1, 'a')] * 3)

    def test_merge(self):
        h1 = Heap.from_pairs(ASCENDING, [(2, 'b'), (1, 'a')])
        h2 = Heap.from_pairs(ASCENDING, [(3, 'c'), (4, 'd')])
        h = h1.merge(h2)
        self.assertEqual(h.peek(), (1, 'a'))
        self.assertEqual(h.size, 4)
        self.assertEqual(h2.merge(h1).peek(), (1, 'a'))

    def test_merge_with_empty(self):
        full = Heap.from_pairs(ASCENDING, [(2, 'b'), (1, 'a')])
        empty = Heap(ASCENDING)
        self.assertIs(full.merge(empty), full)
        self.assertIs(empty.merge(full), full)
        self.assertTrue(empty.merge(Heap(ASCENDING)).is_empty())

    def test_merge_mode_mismatch(self):
        self.assertRaises(ModeMismatch, Heap(ASCENDING).merge, Heap(DESCENDING))
        self.assertRaises(
            ModeMismatch,
            Heap(ascending_by(compare_dates)).merge, Heap(ascending_by(compare_lengths)))
        self.assertRaises(
            ModeMismatch,
            Heap(ascending_by(compare_dates)).merge, Heap(ASCENDING))

        # a mismatch is an error even when a side is empty
        full = Heap.from_pairs(ASCENDING, [(1, 'a')])
        self.assertRaises(ModeMismatch, full.merge, Heap(DESCENDING))

    def test_merge_same_comparator(self):
        h1 = Heap.from_pairs(ascending_by(compare_lengths), [('aaa', 1)])
        h2 = Heap.from_pairs(ascending_by(compare_lengths), [('a', 2)])
        self.assertEqual(h1.merge(h2).peek(), ('a', 2))

    def test_merge_all(self):
        h1 = Heap.from_pairs(ASCENDING, [(2, 'b'), (1, 'a')])
        h2 = Heap.from_pairs(ASCENDING, [(3, 'c'), (4, 'd')])
        h = Heap.merge_all([h1, h2])
        self.assertEqual(h.peek(), (1, 'a'))
        self.assertEqual(h.size, 4)

    def test_merge_all_many(self):
        rng = random.Random(1)
        heaps = [
            Heap.from_pairs(DESCENDING, [(rng.randint(0, 100), i) for _ in range(rng.randint(0, 6))])
            for i in range(9)]
        h = Heap.merge_all(heaps)
        self.assertEqual(h.size, sum(x.size for x in heaps))
        self.assertEqual(node_count(h), h.size)
        self.assertTrue(heap_ordered(h))
        keys = [e.key for e in h]
        self.assertEqual(keys, sorted(keys, reverse=True))

    def test_merge_all_single(self):
        h = Heap.from_pairs(ASCENDING, [(1, 'a')])
        self.assertIs(Heap.merge_all([h]), h)

    def test_merge_all_errors(self):
        self.assertRaises(ValueError, Heap.merge_all, [])
        self.assertRaises(
            ModeMismatch, Heap.merge_all,
            [Heap(ASCENDING), Heap(ASCENDING), Heap(DESCENDING)])

    def test_membership(self):
        h = Heap.from_pairs(ASCENDING, [(2, 'b'), (1, 'a')])
        self.assertTrue(h.contains(2, 'b'))
        self.assertFalse(h.contains(3, 'c'))
        self.assertFalse(h.contains(2, 'a'))
        self.assertIn((2, 'b'), h)
        self.assertNotIn((3, 'c'), h)
        self.assertNotIn(2, h)

    def test_membership_deep(self):
        pairs = [(k, -k) for k in range(500)]
        h = Heap.from_pairs(DESCENDING, pairs)
        for key, value in pairs:
            self.assertTrue(h.contains(key, value))
        self.assertFalse(h.contains(500, -500))
        self.assertFalse(h.contains(250, 250))

    def test_iteration(self):
        h = Heap.from_pairs(ASCENDING, [(2, 100), (1, 200)])
        self.assertEqual(sum(v for _, v in h), 300)
        self.assertEqual(list(h), [(1, 200), (2, 100)])
        self.assertEqual(dict(h), {1: 200, 2: 100})

        # iterating does not consume the heap
        self.assertEqual(list(h), [(1, 200), (2, 100)])
        self.assertEqual(h.size, 2)

    def test_iteration_early_stop(self):
        h = Heap.from_pairs(ASCENDING, [(k, k) for k in range(10, 0, -1)])
        it = iter(h)
        self.assertEqual([next(it).key for _ in range(3)], [1, 2, 3])
        self.assertEqual(h.size, 10)

    def test_extend(self):
        h = Heap(ASCENDING).put(5, 'e')
        extended = h.extend((k, str(k)) for k in [3, 7])
        self.assertEqual(extended.size, 3)
        self.assertEqual(extended.peek(), (3, '3'))
        self.assertEqual(h.size, 1)

    def test_constructor_pairs(self):
        h = Heap(DESCENDING, [(1, 'a'), (3, 'c'), (2, 'b')])
        self.assertEqual(list(h), [(3, 'c'), (2, 'b'), (1, 'a')])
        self.assertEqual(h.mode, DESCENDING)

    def test_repr(self):
        self.assertEqual(repr(Heap(ASCENDING)), '<Heap root=empty size=0 mode=min>')
        h = Heap.from_pairs(DESCENDING, [(2, 'b'), (1, 'a')])
        self.assertEqual(repr(h), "<Heap root=(2, 'b') size=2 mode=max>")
        h = Heap(ascending_by(compare_lengths))
        self.assertEqual(repr(h), '<Heap root=empty size=0 mode=min-by compare_lengths>')

    def test_persistence(self):
        h = Heap.from_pairs(ASCENDING, [(3, 'c'), (1, 'a'), (2, 'b')])
        before = list(h)

        h.put(0, 'z')
        h.pop()
        h.merge(Heap.from_pairs(ASCENDING, [(-1, 'y')]))
        h.drain(2)

        self.assertEqual(list(h), before)
        self.assertEqual(h.size, 3)

    def test_derived_heaps_keep_mode(self):
        h = Heap.from_pairs(descending_by(compare_lengths), [('a', 1), ('abc', 2)])
        self.assertEqual(h.put('ab', 3).mode, h.mode)
        self.assertEqual(h.pop().heap.mode, h.mode)
        self.assertEqual(h.drain(5)[1].mode, h.mode)

    def test_wide_root(self):
        # ascending puts into a min-heap give the root one child per put
        n = 5000
        h = Heap.from_pairs(ASCENDING, [(k, k) for k in range(n)])
        self.assertEqual(sum(1 for _ in nodes.children(h.root)), n - 1)
        popped = h.pop()
        self.assertEqual(popped.key, 0)
        self.assertEqual(popped.heap.peek(), (1, 1))
        self.assertTrue(heap_ordered(popped.heap))

    def test_deep_chain(self):
        # descending puts into a min-heap give a single chain
        n = 5000
        h = Heap.from_pairs(ASCENDING, [(k, k) for k in range(n, 0, -1)])
        self.assertEqual(node_count(h), n)
        self.assertTrue(h.contains(n, n))
        pairs, rest = h.drain(n)
        self.assertEqual([e.key for e in pairs], list(range(1, n + 1)))
        self.assertTrue(rest.is_empty())


class HeapPropertyTests(unittest.TestCase):
    def setUp(self):
        self.rng = random.Random(0)

    def random_pairs(self, n):
        return [(self.rng.randint(0, n // 2), self.rng.random()) for _ in range(n)]

    def test_invariants_under_random_operations(self):
        for mode in [ASCENDING, DESCENDING, ascending_by(compare_dates), descending_by(compare_dates)]:
            h = Heap(mode)
            for step in range(400):
                op = self.rng.random()
                if op < 0.55:
                    size = h.size
                    h = h.put(self.rng.randint(0, 50), step)
                    self.assertEqual(h.size, size + 1)
                elif op < 0.9:
                    size = h.size
                    popped = h.pop()
                    if popped is None:
                        self.assertEqual(size, 0)
                        continue
                    self.assertEqual(popped.heap.size, size - 1)
                    h = popped.heap
                else:
                    other = Heap.from_pairs(mode, self.random_pairs(self.rng.randint(0, 8)))
                    size = h.size
                    h = h.merge(other) if self.rng.random() < 0.5 else other.merge(h)
                    self.assertEqual(h.size, size + other.size)
                self.assertEqual(node_count(h), h.size)
                self.assertTrue(heap_ordered(h))

    def test_sortedness(self):
        pairs = self.random_pairs(300)
        for mode, reverse in [(ASCENDING, False), (DESCENDING, True)]:
            h = Heap.from_pairs(mode, pairs)
            keys = [e.key for e in h]
            self.assertEqual(keys, sorted(keys, reverse=reverse))

    def test_round_trip_is_permutation(self):
        pairs = self.random_pairs(300)
        drained, rest = Heap.from_pairs(ASCENDING, pairs).drain(len(pairs))
        self.assertTrue(rest.is_empty())
        self.assertEqual(sorted(drained), sorted(pairs))
        self.assertEqual([e.key for e in drained], sorted(k for k, _ in pairs))

    def test_merge_size_law(self):
        for _ in range(20):
            a = Heap.from_pairs(ASCENDING, self.random_pairs(self.rng.randint(0, 30)))
            b = Heap.from_pairs(ASCENDING, self.random_pairs(self.rng.randint(0, 30)))
            merged = a.merge(b)
            self.assertEqual(merged.size, a.size + b.size)
            self.assertEqual(sorted(merged), sorted(list(a) + list(b)))


class CliTests(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()

    def test_parse_line(self):
        self.assertEqual(parse_line('3\tc\n'), (3, 'c'))
        self.assertEqual(parse_line('2.5\thalf'), (2.5, 'half'))
        self.assertEqual(parse_line('bob'), ('bob', ''))
        self.assertIsNone(parse_line('   \n'))

    def test_sort(self):
        result = self.runner.invoke(cli, ['sort'], input='2\tb\n1\ta\n\n3\tc\n')
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output, '1\ta\n2\tb\n3\tc\n')

    def test_sort_max_limit(self):
        result = self.runner.invoke(cli, ['sort', '--mode', 'max', '--limit', '2'],
                                    input='2\tb\n1\ta\n3\tc\n3\tcc\n')
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output, '3\tcc\n3\tc\n')

    def test_sort_mixed_keys(self):
        result = self.runner.invoke(cli, ['sort'], input='2\tb\nbob\tx\n')
        self.assertNotEqual(result.exit_code, 0)
        self.assertIn('Line 2', result.output)

    def test_bench(self):
        result = self.runner.invoke(cli, ['bench', '--size', '200', '--trials', '2'])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn('pops:            400', result.output)
        self.assertIn('mean cmp/pop', result.output)

    def test_bench_max(self):
        result = self.runner.invoke(cli, ['bench', '--size', '50', '--trials', '1', '--mode', 'max'])
        self.assertEqual(result.exit_code, 0, result.output)


if __name__ == '__main__':
    unittest.main()
