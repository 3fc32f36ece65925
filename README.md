# bootlick

A toolkit for building your own bootloader, tailored to your needs.

bootlick does not touch memory itself. You describe your device: how many
pages an image slot holds, which slot is primary, where the scratch memory
lives, and how to copy one page to another. A *strategy* then tells you, step
by step, which page copies bring the requested image into place.

Every step may be interrupted at any moment. Once a step has run, record its
number in persistent state. A step that ran but was not yet recorded can
safely be run again.

## Installation

```
pip install bootlick
```

bootlick has no runtime dependencies and supports Python 3.10 and later.

## Core types (`bootlick.core`)

- `Slot(index)`, `Page(index)` and `Step(number)` are frozen, ordered
  dataclasses. They hold the image slot, bootloader page and step numbers.
  `Slot` accepts 0 to 255. `Page` and `Step` accept 0 to 65535. Other values
  raise `ValueError`, and a value that is not an `int` raises `TypeError`.
- `MemoryLocation(slot, page)` is a page within a slot.
- `CopyOperation(source, destination)` copies one location to another,
  erasing the destination first if that is needed.
- `Device` is the abstract interface your device implements:
  - `copy(operation)` performs one `CopyOperation` and raises `BootError` on
    failure.
  - `boot(slot)` boots a slot.
  - `page_count()` gives the number of pages per image slot.
- `DeviceWithScratch` adds `scratch_page_count()` and `get_scratch()`.
- `DeviceWithPrimarySlot` adds `get_primary()`.
- `BootError` is the exception a device raises when an operation fails.

A device that keeps its images in lists in memory could look like this:

```python
from bootlick.core import DeviceWithPrimarySlot, DeviceWithScratch, Slot

PRIMARY, SECONDARY, SCRATCH = Slot(0), Slot(1), Slot(2)

class RamDevice(DeviceWithScratch, DeviceWithPrimarySlot):
    def __init__(self):
        self.memory = {
            PRIMARY: ["a0", "a1", "a2", "a3"],
            SECONDARY: ["b0", "b1", "b2", "b3"],
            SCRATCH: [None],
        }

    def copy(self, operation):
        src, dst = operation.source, operation.destination
        self.memory[dst.slot][dst.page.index] = self.memory[src.slot][src.page.index]

    def boot(self, slot):
        raise SystemExit(f"booting {slot}")

    def page_count(self):
        return 4

    def scratch_page_count(self):
        return 1

    def get_scratch(self):
        return SCRATCH

    def get_primary(self):
        return PRIMARY
```

## Strategies (`bootlick.strategies`)

Every strategy subclasses `bootlick.strategies.base.Strategy`:

- `last_step()` returns the step at which the work is complete and the device
  should boot.
- `plan(step)` yields the copy operations of one step.
- `operations()` yields every operation of every step before `last_step()`,
  in order.

Each strategy module except `xip` defines its own `Request(slot_secondary)`
naming the slot to activate.

| Module | Class | What it does | Scratch used |
| --- | --- | --- | --- |
| `copy` | `Copy(device, request)` | Copies every page of the requested slot over the primary slot, discarding the old primary image. One step. | none |
| `swap_scootch` | `SwapScootch(device, request)` | Swaps the slots by first shifting the primary down one page, with its first page going to scratch. It then copies pages in reverse order. `3 * pages` steps. | page 0 only |
| `swap_sabs` | `SwapSABS(device, request)` | Swaps the slots one scratch-sized block at a time: primary → scratch, secondary → primary, scratch → secondary. `3 * ceil(pages / scratch_pages)` steps. | all scratch pages |
| `xip` | `Xip(device)` | Executes in place. Its last step is 0 and it plans nothing. | none |

The strategy constructors raise `ValueError` when the device reports fewer
than one page, or fewer than one scratch page for `SwapSABS`. `SwapScootch`
and `SwapSABS` raise `TypeError` when the device is not a
`DeviceWithPrimarySlot`. Both also raise `ValueError` when asked to plan a
step at or after `last_step()`.

```python
from bootlick.core import Step
from bootlick.strategies.swap_scootch import Request, SwapScootch

device = RamDevice()
strategy = SwapScootch(device, Request(slot_secondary=SECONDARY))
for number in range(strategy.last_step().number):
    for operation in strategy.plan(Step(number)):
        device.copy(operation)
    # record that step `number` is done
# device.memory[PRIMARY] is now ["b0", "b1", "b2", "b3"],
# device.memory[SECONDARY] is ["a0", "a1", "a2", "a3"]
```

## Persistent boot state (`bootlick.state`)

The states of a bootloader's update cycle are frozen dataclasses:

- `Initial()`
- `Request(current, target)`
- `Swapping(target, old, step)`
- `Trialing(target, old)`
- `Confirmed(target)`
- `Returning(failed, old, step)`
- `Failed(current, failed)`

Slots are `Slot` values. `step` must be an `int` from 0 to 65535.

`serialize_state(state)` encodes a state as a compact byte string. The
encoding starts with the variant's index as a varint. The indices follow the
order `Initial`, `Trialing`, `Failed`, `Confirmed`, `Request`, `Swapping`,
`Returning`. The fields follow in declaration order: each slot is one byte and
each step is a varint.

```python
>>> from bootlick.core import Slot
>>> from bootlick.state import Swapping, serialize_state, deserialize_state
>>> serialize_state(Swapping(Slot(1), Slot(0), 300))
b'\x05\x01\x00\xac\x02'
>>> deserialize_state(b'\x05\x01\x00\xac\x02')
Swapping(target=Slot(index=1), old=Slot(index=0), step=300)
```

`deserialize_state(data)` ignores any bytes after the encoded state. Errors
are reported as follows:

- Truncated input raises `SerializationError` with `kind` set to
  `SerializationError.BUFFER_TOO_SMALL`.
- An unknown variant or an out-of-range varint raises `SerializationError`
  with `kind` set to `SerializationError.INVALID_FORMAT`.
- Passing something that is not a state to `serialize_state` raises
  `TypeError`.

`PersistentState(path)` keeps the current state in a file:

- If the file is missing or empty, the state starts as `Initial()`.
- `get()` returns the current state.
- `store(state)` writes it atomically, through a temporary `<name>.tmp` file
  that replaces the original, and then makes it current.

## What bootlick does not do

- It ships no device implementations. Copying pages, erasing memory and
  jumping to an image are the job of your `Device`.
- It defines the boot states but does not drive them. Deciding when to move
  from `Request` to `Swapping`, `Trialing`, `Returning` and so on, and when to
  call `boot`, is left to your bootloader loop.
- `PersistentState` stores to an ordinary file, not to raw flash memory.

## Running the tests

```
pip install "bootlick[test]"
pytest
```