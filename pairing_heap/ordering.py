import enum
from collections import namedtuple


class UnsupportedMode(ValueError): pass


class Direction(enum.Enum):
    ASCENDING  = 'min'
    DESCENDING = 'max'


# `comparator` is None for the plain modes, otherwise a
# `cmp(a, b)` callable returning <0, 0 or >0
Mode = namedtuple('Mode', ['direction', 'comparator'])

ASCENDING = Mode(Direction.ASCENDING, None)
DESCENDING = Mode(Direction.DESCENDING, None)

MODE_NAMES = {
    'min': ASCENDING,
    'asc': ASCENDING,
    'max': DESCENDING,
    'desc': DESCENDING,
}


def ascending_by(comparator):
    """min-ordering on keys compared with `comparator`"""
    return Mode(Direction.ASCENDING, comparator)


def descending_by(comparator):
    """max-ordering on keys compared with `comparator`"""
    return Mode(Direction.DESCENDING, comparator)


def parse_mode(name):
    try:
        return MODE_NAMES[name.lower()]
    except (KeyError, AttributeError):
        raise UnsupportedMode('Unknown mode: {!r}'.format(name))


def ordered_predicate(mode):
    """derive `ordered(a, b)` from a mode.

    `ordered(a, b)` is True when element `a` is allowed
    to be an ancestor of element `b` in the heap.
    ties count as ordered, so whichever element is passed
    first wins on equal keys."""
    if not isinstance(mode, Mode):
        raise UnsupportedMode('Not a mode: {!r}'.format(mode))

    cmp = mode.comparator
    if cmp is None:
        if mode.direction is Direction.ASCENDING:
            return lambda a, b: a.key <= b.key
        elif mode.direction is Direction.DESCENDING:
            return lambda a, b: a.key >= b.key
    elif callable(cmp):
        if mode.direction is Direction.ASCENDING:
            return lambda a, b: cmp(a.key, b.key) <= 0
        elif mode.direction is Direction.DESCENDING:
            return lambda a, b: cmp(a.key, b.key) >= 0
    raise UnsupportedMode('Unsupported mode: {!r}'.format(mode))


def describe(mode):
    """short human-readable mode name, e.g. 'min' or 'max-by cmp_dates'"""
    if mode.comparator is None:
        return mode.direction.value
    name = getattr(mode.comparator, '__name__', repr(mode.comparator))
    return '{}-by {}'.format(mode.direction.value, name)
