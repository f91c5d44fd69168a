from .heap import Heap, Popped, ModeMismatch
from .node import Element
from .ordering import (
    Mode, Direction, ASCENDING, DESCENDING,
    ascending_by, descending_by, parse_mode, UnsupportedMode)

__version__ = '0.2.0'
