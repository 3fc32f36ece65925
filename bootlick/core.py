"""Core types shared by every slot activation strategy."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from typing import ClassVar, NoReturn


class BootError(Exception):
    """Raised when a device fails to carry out a bootloader operation."""


class _Bounded:
    """Validates the single integer field of a bootloader number on creation."""

    _maximum: ClassVar[int]

    def __post_init__(self) -> None:
        (field,) = fields(self)
        value = getattr(self, field.name)
        name = type(self).__name__
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"{name} must be an int, not {type(value).__name__}")
        if not 0 <= value <= self._maximum:
            raise ValueError(f"{name} must be within 0..={self._maximum}, got {value}")


@dataclass(frozen=True, order=True)
class Slot(_Bounded):
    """Image slot with regards to the bootloader.

    The memory layout describes in which memory and at what location each slot resides.
    """

    _maximum: ClassVar[int] = 0xFF
    index: int


@dataclass(frozen=True, order=True)
class Page(_Bounded):
    """Page number with regards to the bootloader.

    When the underlying memories have different page sizes, the largest one is
    used, and it must be a multiple of all the underlying page sizes.
    """

    _maximum: ClassVar[int] = 0xFFFF
    index: int


@dataclass(frozen=True, order=True)
class Step(_Bounded):
    """Step number of a strategy that has to be or has been executed.

    Step numbers are strictly monotonic. Each step may be interrupted at any
    time and must be safe to execute again if it was not yet recorded.
    """

    _maximum: ClassVar[int] = 0xFFFF
    number: int


@dataclass(frozen=True, order=True)
class MemoryLocation:
    """A page within a slot."""

    slot: Slot
    page: Page


@dataclass(frozen=True)
class CopyOperation:
    """Erase ``destination`` if necessary and copy ``source`` to it, leaving ``source`` intact."""

    source: MemoryLocation
    destination: MemoryLocation


class Device(ABC):
    """A concrete device with image slots, supporting copying of pages."""

    @abstractmethod
    def copy(self, operation: CopyOperation) -> None:
        """Copy a page from one memory to another, raising BootError on failure."""

    @abstractmethod
    def boot(self, slot: Slot) -> NoReturn:
        """Boot a specific memory slot."""

    @abstractmethod
    def page_count(self) -> int:
        """Number of bootloader pages in every image slot; always at least one."""


class DeviceWithScratch(Device):
    """A device with scratch memory that can be used to swap images."""

    @abstractmethod
    def scratch_page_count(self) -> int:
        """Number of pages available in the scratch memory; always at least one."""

    @abstractmethod
    def get_scratch(self) -> Slot:
        """The slot that holds the scratch memory."""


class DeviceWithPrimarySlot(Device):
    """A device with a primary slot from which images are booted."""

    @abstractmethod
    def get_primary(self) -> Slot:
        """The primary image slot."""