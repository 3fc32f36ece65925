"""Swap two slots using 'S <- A <- B <- S', leaving both intact afterwards.

Also known as 'swap scratch'. A block of primary (A) pages is first copied to
scratch (S), then the secondary (B) pages are written over the primary pages,
and finally the scratch pages are written to the secondary slot.

Every primary and secondary page endures a single erasure, while each scratch
page endures one erasure per block. This suits a very wear-resistant scratch
memory such as FRAM.
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
    A2S = 0
    B2A = 1
    S2B = 2


def _phase(step: Step, scratch_pages: int) -> tuple[_Phase, Page]:
    """The phase of a step and the first page of the block it works on."""
    phase = _Phase(step.number % 3)
    start = Page((step.number // 3) * scratch_pages)
    return phase, start


class SwapSABS(Strategy):
    """Swap the primary slot with the requested slot, a scratch-sized block at a time."""

    def __init__(self, device: DeviceWithScratch, request: Request) -> None:
        if not isinstance(device, DeviceWithPrimarySlot):
            raise TypeError("device must provide a primary slot")
        num_pages = device.page_count()
        scratch_pages = device.scratch_page_count()
        if num_pages < 1:
            raise ValueError("device must have at least one page")
        if scratch_pages < 1:
            raise ValueError("device must have at least one scratch page")
        self.request = request
        self._num_pages = num_pages
        self._scratch_pages = scratch_pages
        self._slot_primary = device.get_primary()
        self._slot_scratch = device.get_scratch()

    def last_step(self) -> Step:
        # The final block may only partially fill the scratch memory.
        blocks = -(-self._num_pages // self._scratch_pages)
        return Step(blocks * 3)

    def plan(self, step: Step) -> Iterator[CopyOperation]:
        if step >= self.last_step():
            raise ValueError(f"{step} is not before the last step {self.last_step()}")
        phase, start = _phase(step, self._scratch_pages)
        primary = MemoryLocation(self._slot_primary, start)
        secondary = MemoryLocation(self.request.slot_secondary, start)
        scratch = MemoryLocation(self._slot_scratch, Page(0))

        if phase is _Phase.A2S:
            source, destination = primary, scratch
        elif phase is _Phase.B2A:
            source, destination = secondary, primary
        else:
            source, destination = scratch, secondary

        pages_now = min(self._num_pages - start.index, self._scratch_pages)
        return (
            CopyOperation(
                MemoryLocation(source.slot, Page(source.page.index + offset)),
                MemoryLocation(destination.slot, Page(destination.page.index + offset)),
            )
            for offset in range(pages_now)
        )