"""Defaults and option types shared across collectcore."""

import math
from typing import Union

import numpy as np
from typing_extensions import Final

RandomSeed = Union[None, int, np.random.Generator]
"""Something a random source can be built from.

``None`` draws fresh entropy, an ``int`` seeds a new generator, and an
existing ``numpy.random.Generator`` is used as-is.
"""

DEFAULT_GLUE: Final = ", "
"""The separator ``implode`` uses when none is given."""

INFINITE_DEPTH: Final = math.inf
"""Flatten depth that expands every nesting level."""

NOT_FOUND: Final = None
"""The absent value returned by lookups that find nothing."""
