"""Seedable choice among interchangeable text templates."""

import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


class TemplateSelector:
    """Picks one option from a sequence using its own random generator.

    Pass a seed (or a pre-built ``random.Random``) for reproducible output.
    """

    def __init__(self, seed: int | None = None, rng: random.Random | None = None):
        self._rng = rng or random.Random(seed)

    def choose(self, options: Sequence[T]) -> T:
        if not options:
            raise ValueError("options must not be empty")
        return self._rng.choice(options)


class FirstTemplateSelector(TemplateSelector):
    """Always returns the first option."""

    def __init__(self) -> None:
        super().__init__(seed=0)

    def choose(self, options: Sequence[T]) -> T:
        if not options:
            raise ValueError("options must not be empty")
        return options[0]
