"""Swap two slots by 'scootching', leaving both intact afterwards.

Also known as 'swap move'. The primary slot is first moved down by one page,
its first page going to scratch, before the secondary slot is copied over.
Every primary page endures up to two erasures, every secondary page one, and
the scratch page one.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass

from bootlick.core import (
    CopyOperation,
    DeviceWithPrimarySlot,
    DeviceWithScratch,
    MemoryLocation,
    Page,
    Slot,
    Step,
)
from bootlick.strategies.base import Strategy


@dataclass(frozen=True)
class Request:
    """Which slot to swap with the primary slot."""

    slot_secondary: Slot


class _Phase(enum.Enum):
    SCOOTCH = enum.auto()
    TO_PRIMARY = enum.auto()
    TO_SECONDARY = enum.auto()


def _phase(step: Step, num_pages: int) -> tuple[_Phase, Page]:
    if step.number < num_pages:
        return _Phase.SCOOTCH, Page(step.number)
    offset = step.number - num_pages
    # The swap runs over the pages in reverse order.
    page = Page(num_pages - offset // 2 - 1)
    return (_Phase.TO_PRIMARY if offset % 2 == 0 else _Phase.TO_SECONDARY), page


class SwapScootch(Strategy):
    """Swap the primary slot with the requested slot using a single scratch page."""

    def __init__(self, device: DeviceWithScratch, request: Request) -> None:
        if not isinstance(device, DeviceWithPrimarySlot):
            raise TypeError("device must provide a primary slot")
        num_pages = device.page_count()
        if num_pages < 1:
            raise ValueError("device must have at least one page")
        self.request = request
        self._num_pages = num_pages
        self._slot_primary = device.get_primary()
        self._slot_scratch = device.get_scratch()

    def _scratch_location(self) -> MemoryLocation:
        return MemoryLocation(self._slot_scratch, Page(0))

    def _shifted(self, page: Page) -> MemoryLocation:
        """Where the primary's ``page`` lives once the primary has been scootched."""
        if page == Page(0):
            return self._scratch_location()
        return MemoryLocation(self._slot_primary, Page(page.index - 1))

    def last_step(self) -> Step:
        # One move per page to scootch, two copies per page to swap.
        return Step(self._num_pages * 3)

    def plan(self, step: Step) -> Iterator[CopyOperation]:
        if step >= self.last_step():
            raise ValueError(f"{step} is not before the last step {self.last_step()}")
        phase, page = _phase(step, self._num_pages)
        if phase is _Phase.SCOOTCH:
            op = CopyOperation(MemoryLocation(self._slot_primary, page), self._shifted(page))
        elif phase is _Phase.TO_PRIMARY:
            op = CopyOperation(
                MemoryLocation(self.request.slot_secondary, page),
                MemoryLocation(self._slot_primary, page),
            )
        else:
            op = CopyOperation(
                self._shifted(page), MemoryLocation(self.request.slot_secondary, page)
            )
        return iter((op,))