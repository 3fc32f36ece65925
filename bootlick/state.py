"""Persistent bootloader state and its compact binary encoding."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Union

from bootlick.core import Slot

_U16_MAX = 0xFFFF
_U32_MAX = 0xFFFF_FFFF
MAX_SERIALIZED_SIZE = 64


class SerializationError(Exception):
    """Raised when a state cannot be encoded or decoded."""

    BUFFER_TOO_SMALL = "buffer too small"
    INVALID_FORMAT = "invalid format"

    def __init__(self, kind: str) -> None:
        super().__init__(kind)
        self.kind = kind


def _check_step(step: object) -> None:
    if not isinstance(step, int) or isinstance(step, bool):
        raise TypeError(f"step must be an int, not {type(step).__name__}")
    if not 0 <= step <= _U16_MAX:
        raise ValueError(f"step must be within 0..={_U16_MAX}, got {step}")


@dataclass(frozen=True)
class Initial:
    """Fresh from the factory: the first image is booted."""


@dataclass(frozen=True)
class Trialing:
    """Swapped to a new image that awaits confirmation.

    A reboot in this state returns to the old slot and ends in Failed.
    """

    target: Slot
    old: Slot


@dataclass(frozen=True)
class Failed:
    """An image failed its trial; the previous, confirmed image is back."""

    current: Slot
    failed: Slot


@dataclass(frozen=True)
class Confirmed:
    """An image was trialled and confirmed by the running image."""

    target: Slot


@dataclass(frozen=True)
class Request:
    """A user requested that ``target`` be booted."""

    current: Slot
    target: Slot


@dataclass(frozen=True)
class Swapping:
    """Swapping to a new image between ``target`` and ``old``."""

    target: Slot
    old: Slot
    step: int

    def __post_init__(self) -> None:
        _check_step(self.step)


@dataclass(frozen=True)
class Returning:
    """Swapping back from ``failed`` to ``old``."""

    failed: Slot
    old: Slot
    step: int

    def __post_init__(self) -> None:
        _check_step(self.step)


State = Union[Initial, Trialing, Failed, Confirmed, Request, Swapping, Returning]

_VARIANTS: tuple[type, ...] = (
    Initial,
    Trialing,
    Failed,
    Confirmed,
    Request,
    Swapping,
    Returning,
)


def _encode_varint(value: int) -> bytes:
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0

    def byte(self) -> int:
        if self._pos >= len(self._data):
            raise SerializationError(SerializationError.BUFFER_TOO_SMALL)
        value = self._data[self._pos]
        self._pos += 1
        return value

    def varint(self, maximum: int) -> int:
        max_bytes = (maximum.bit_length() + 6) // 7
        value = 0
        for shift in range(0, 7 * max_bytes, 7):
            byte = self.byte()
            value |= (byte & 0x7F) << shift
            if not byte & 0x80:
                if value > maximum:
                    raise SerializationError(SerializationError.INVALID_FORMAT)
                return value
        raise SerializationError(SerializationError.INVALID_FORMAT)


def serialize_state(state: State) -> bytes:
    """Encode a state: a varint variant index followed by its fields in order."""
    try:
        index = _VARIANTS.index(type(state))
    except ValueError:
        raise TypeError(f"not a bootloader state: {state!r}") from None
    out = bytearray(_encode_varint(index))
    for field in fields(state):
        value = getattr(state, field.name)
        if isinstance(value, Slot):
            out.append(value.index)
        else:
            out += _encode_varint(value)
    if len(out) > MAX_SERIALIZED_SIZE:
        raise SerializationError(SerializationError.BUFFER_TOO_SMALL)
    return bytes(out)


def deserialize_state(data: bytes) -> State:
    """Decode a state; bytes after the encoded state are ignored."""
    reader = _Reader(bytes(data))
    index = reader.varint(_U32_MAX)
    if index >= len(_VARIANTS):
        raise SerializationError(SerializationError.INVALID_FORMAT)
    cls = _VARIANTS[index]
    values = {}
    for field in fields(cls):
        if field.name == "step":
            values[field.name] = reader.varint(_U16_MAX)
        else:
            values[field.name] = Slot(reader.byte())
    return cls(**values)


class PersistentState:
    """The bootloader state, kept in a file so that it survives restarts."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        try:
            data = self._path.read_bytes()
        except FileNotFoundError:
            data = b""
        self._state: State = deserialize_state(data) if data else Initial()

    def get(self) -> State:
        """The current state."""
        return self._state

    def store(self, state: State) -> None:
        """Persist ``state`` atomically and make it current."""
        data = serialize_state(state)
        temporary = self._path.with_name(self._path.name + ".tmp")
        with open(temporary, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temporary, self._path)
        self._state = state