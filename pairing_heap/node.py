"""
Immutable pairing-heap tree nodes.

A node holds one `Element` and a cons chain of child nodes:
either `()` or `(first_child, rest)`. Attaching a child
builds a new parent node around a new cons cell, so the
previous version of the tree is never touched and
unaffected subtrees are shared between versions.

All functions take the `ordered(a, b)` predicate from
`pairing_heap.ordering`; nodes never build it themselves.
"""

from collections import namedtuple

Element = namedtuple('Element', ['key', 'value'])
Node = namedtuple('Node', ['element', 'children'])


def leaf(element):
    return Node(element, ())


def children(node):
    """iterate over a node's children,
    most recently attached first"""
    chain = node.children
    while chain:
        child, chain = chain
        yield child


def meld(n1, n2, ordered):
    """Meld two heap-ordered trees in O(1).

    The loser becomes the first child of the winner.
    On ties the predicate decides; for the plain `<=`/`>=`
    predicates that means `n1` becomes the parent."""
    if ordered(n1.element, n2.element):
        return Node(n1.element, (n2, n1.children))
    return Node(n2.element, (n1, n2.children))


def consolidate(nodes, ordered):
    """Combine sibling trees into a single tree.

    Equivalent to the recursive pairing
        consolidate([a]) = a
        consolidate([a, b]) = meld(a, b)
        consolidate([a, b, *rest]) = meld(meld(a, b), consolidate(rest))
    written as two passes: meld pairs left to right, then
    fold the pairs right to left. This gives the O(log n)
    amortized bound of the pairing heap without recursing
    once per pair."""
    nodes = iter(nodes)
    pairs = []
    for first in nodes:
        second = next(nodes, None)
        if second is None:
            pairs.append(first)
        else:
            pairs.append(meld(first, second, ordered))

    if not pairs:
        raise ValueError('Cannot consolidate an empty sequence of nodes')

    root = pairs.pop()
    while pairs:
        root = meld(pairs.pop(), root, ordered)
    return root


def contains(node, element, ordered):
    """check if `element` (key and value) is anywhere in the tree.

    a subtree is only searched if its root could be an
    ancestor of `element`, which prunes most of the tree
    for keys near the top of the heap."""
    stack = [node]
    while stack:
        node = stack.pop()
        if node.element == element:
            return True
        if ordered(node.element, element):
            stack.extend(children(node))
    return False


def walk(node):
    """yield every node of the tree, parents before children"""
    stack = [node]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(children(node))
