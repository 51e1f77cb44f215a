"""An ordered, key-preserving collection with a functional-pipeline API.

Types are defined in their own modules and then imported here for a single
unified namespace.
"""

# __init__ files, used strictly for re-exporting, are the exception to the
# "import modules only" style used in collectcore.

from ._version import version as __version__
from ._version import version_tuple as __version_tuple__
from .base import BaseCollection
from .collection import Collection
from .collection import Selector
from .errors import CollectionError
from .errors import InvalidArgumentError
from .errors import NotSupportedError
from .options import DEFAULT_GLUE
from .options import INFINITE_DEPTH
from .options import NOT_FOUND
from .options import RandomSeed
from .records import Record
from .records import as_record
from .types import Comparator
from .types import Predicate


__all__ = (
    "BaseCollection",
    "Collection",
    "Selector",
    "CollectionError",
    "InvalidArgumentError",
    "NotSupportedError",
    "DEFAULT_GLUE",
    "INFINITE_DEPTH",
    "NOT_FOUND",
    "RandomSeed",
    "Record",
    "as_record",
    "Comparator",
    "Predicate",
)
