"""Array manipulation utilities, grouped under a namespace.

Tools are exported as ``arrays_shuffle``, ``arrays_unique`` and so on.
"""

import random
from types import SimpleNamespace


def _shuffle(array=[]):  # noqa: B006
    """Shuffle a copy of an array (Fisher-Yates)."""
    shuffled = list(array)
    random.shuffle(shuffled)
    return shuffled


def _unique(array=[]):  # noqa: B006
    """Get the unique values of an array, keeping first occurrences."""
    return list(dict.fromkeys(array))


def _chunk(array=[], size=2):  # noqa: B006
    """Split an array into chunks of ``size``."""
    size = max(int(size), 1)
    return [array[i : i + size] for i in range(0, len(array), size)]


def _intersection(first=[], second=[]):  # noqa: B006
    """Values of the first array that also appear in the second."""
    return [x for x in first if x in second]


def _difference(first=[], second=[]):  # noqa: B006
    """Values of the first array that do not appear in the second."""
    return [x for x in first if x not in second]


def _flatten(array=[], depth=1):  # noqa: B006
    """Flatten nested arrays up to ``depth`` levels."""
    flat = list(array)
    for _ in range(int(depth)):
        if not any(isinstance(item, list) for item in flat):
            break
        flat = [y for x in flat for y in (x if isinstance(x, list) else [x])]
    return flat


arrays = SimpleNamespace(
    shuffle=_shuffle,
    unique=_unique,
    chunk=_chunk,
    intersection=_intersection,
    difference=_difference,
    flatten=_flatten,
)

__exports__ = {"arrays": arrays}
