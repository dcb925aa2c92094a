# presentation_shuffler.py

import random
from typing import Any, List, Optional, Protocol, Sequence, Tuple, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int: ...


def shuffle(items: Sequence[T], rng: Optional[RandomSource] = None) -> List[T]:
    """
    Fisher-Yates over a copy of `items`; the input is never touched.
    Pass `random.Random(seed)` as `rng` for a reproducible order.
    """
    rng = rng or random
    shuffled = list(items)

    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]

    return shuffled


def _identity(item: Any) -> Any:
    return getattr(item, "id", item)


class PresentationSession:
    """
    Keeps one ordering per candidate set, so re-rendering the gallery does
    not re-shuffle it. A new ordering is drawn only when the set changes.
    """

    def __init__(self, rng: Optional[RandomSource] = None):
        self._rng = rng
        self._key: Optional[Tuple[Any, ...]] = None
        self._ordering: List[Any] = []

    def order(self, items: Sequence[T]) -> List[T]:
        key = tuple(_identity(item) for item in items)
        if key != self._key:
            self._key = key
            self._ordering = shuffle(items, self._rng)
        return list(self._ordering)

    def reset(self) -> None:
        self._key = None
        self._ordering = []
