"""Copy the secondary slot over the primary slot, discarding the primary image.

Useful when there is memory enough to keep every version around but only one
memory the application can execute from. It needs no scratch memory.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from bootlick.core import CopyOperation, DeviceWithPrimarySlot, MemoryLocation, Page, Slot, Step
from bootlick.strategies.base import Strategy


@dataclass(frozen=True)
class Request:
    """Which slot to copy into the primary slot."""

    slot_secondary: Slot


class Copy(Strategy):
    """Copy every page of the requested slot onto the primary slot."""

    def __init__(self, device: DeviceWithPrimarySlot, request: Request) -> None:
        self.request = request
        self._num_pages = device.page_count()
        if self._num_pages < 1:
            raise ValueError("device must have at least one page")
        self._slot_primary = device.get_primary()

    def last_step(self) -> Step:
        # One step copies everything, one boots: resuming just starts over.
        return Step(1)

    def plan(self, step: Step) -> Iterator[CopyOperation]:
        source_slot = self.request.slot_secondary
        for page in map(Page, range(self._num_pages)):
            yield CopyOperation(
                MemoryLocation(source_slot, page),
                MemoryLocation(self._slot_primary, page),
            )