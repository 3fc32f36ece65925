"""The interface every slot activation strategy implements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator

from bootlick.core import CopyOperation, Step


class Strategy(ABC):
    """A slot activation strategy."""

    @abstractmethod
    def last_step(self) -> Step:
        """The step denoting that the swap is complete and boot should occur.

        Planning copy operations for this step or any later one is not defined.
        """

    @abstractmethod
    def plan(self, step: Step) -> Iterator[CopyOperation]:
        """Plan the operations to execute for a given step."""

    def operations(self) -> Iterator[CopyOperation]:
        """Every copy operation of the strategy, in execution order."""
        for number in range(self.last_step().number):
            yield from self.plan(Step(number))