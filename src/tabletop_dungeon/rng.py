from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Sequence, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RandomSource:
    """Source of every random draw the generator makes.

    Seeding it with the same value reproduces a layout exactly; leaving
    ``seed`` unset gives a fresh dungeon each run.
    """

    seed: Union[int, str, None] = None

    def __post_init__(self) -> None:
        if self.seed is not None:
            self._rng = random.Random(self.seed)
            logger.debug("Layout randomness seeded with %r", self.seed)
        else:
            self._rng = random.Random()
            logger.debug("Layout randomness unseeded")

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise ValueError("cannot choose from an empty sequence")
        return seq[self._rng.randrange(0, len(seq))]

    def shuffled(self, items: Sequence[T]) -> List[T]:
        """Return a shuffled copy of ``items``; the input is left untouched."""
        out = list(items)
        self._rng.shuffle(out)
        return out


__all__ = ["RandomSource"]
