from collections import Counter

import pytest

import bootlick.core as bl
from bootlick.strategies.swap_scootch import Request, SwapScootch

PAGES = 4
PRIMARY, SECONDARY, SCRATCH = (bl.Slot(i) for i in range(3))


def at(slot, page):
    return bl.MemoryLocation(slot, bl.Page(page))


class ScootchBoard(bl.DeviceWithScratch, bl.DeviceWithPrimarySlot):
    """All memory as one map from location to content, with one scratch page."""

    def __init__(self, pages=PAGES):
        self.pages = pages
        self.cells = {at(slot, i): f"{tag}{i}" for slot, tag in ((PRIMARY, "A"), (SECONDARY, "B"))
                      for i in range(pages)}
        self.cells[at(SCRATCH, 0)] = None
        self.writes = Counter()

    def copy(self, operation):
        if not {operation.source, operation.destination} <= self.cells.keys():
            raise bl.BootError(str(operation))
        self.cells[operation.destination] = self.cells[operation.source]
        self.writes[operation.destination] += 1

    def image(self, slot):
        return [self.cells[at(slot, i)] for i in range(self.pages)]

    def peak_wear(self, slot):
        return max(n for loc, n in self.writes.items() if loc.slot == slot)

    def boot(self, slot):
        raise OSError(slot.index)

    def page_count(self):
        return self.pages

    def scratch_page_count(self):
        return 1

    def get_scratch(self):
        return SCRATCH

    def get_primary(self):
        return PRIMARY


def run(device, strategy):
    for step_i in range(strategy.last_step().number):
        for operation in strategy.plan(bl.Step(step_i)):
            device.copy(operation)


def test_single_scratch():
    device = ScootchBoard()
    strategy = SwapScootch(device, Request(slot_secondary=SECONDARY))
    image_a, image_b = device.image(PRIMARY), device.image(SECONDARY)
    assert image_a == ["A0", "A1", "A2", "A3"]
    assert image_b == ["B0", "B1", "B2", "B3"]

    run(device, strategy)

    assert device.image(PRIMARY) == image_b
    assert device.image(SECONDARY) == image_a
    assert device.peak_wear(PRIMARY) == 2
    assert device.peak_wear(SECONDARY) == 1
    assert device.peak_wear(SCRATCH) == 1


@pytest.mark.parametrize("pages", [1, 2, 5, 8])
def test_swap_various_sizes(pages):
    device = ScootchBoard(pages)
    image_a, image_b = device.image(PRIMARY), device.image(SECONDARY)
    run(device, SwapScootch(device, Request(SECONDARY)))
    assert (device.image(PRIMARY), device.image(SECONDARY)) == (image_b, image_a)
    assert device.peak_wear(SECONDARY) == 1
    assert device.peak_wear(SCRATCH) == 1


def test_swapping_twice_restores():
    device = ScootchBoard()
    before = dict(device.cells)
    for _ in range(2):
        run(device, SwapScootch(device, Request(SECONDARY)))
    assert device.image(PRIMARY) == [before[at(PRIMARY, i)] for i in range(PAGES)]
    assert device.image(SECONDARY) == [before[at(SECONDARY, i)] for i in range(PAGES)]


def test_last_step_is_three_per_page():
    assert SwapScootch(ScootchBoard(), Request(SECONDARY)).last_step() == bl.Step(3 * PAGES)


def test_each_step_plans_one_operation():
    strategy = SwapScootch(ScootchBoard(), Request(SECONDARY))
    steps = range(strategy.last_step().number)
    assert [len(list(strategy.plan(bl.Step(i)))) for i in steps] == [1] * (3 * PAGES)


@pytest.mark.parametrize(
    "step,source,destination",
    [
        (0, at(PRIMARY, 0), at(SCRATCH, 0)),
        (1, at(PRIMARY, 1), at(PRIMARY, 0)),
        (3 * PAGES - 1, at(SCRATCH, 0), at(SECONDARY, 0)),
    ],
)
def test_pinned_steps(step, source, destination):
    strategy = SwapScootch(ScootchBoard(), Request(SECONDARY))
    (op,) = strategy.plan(bl.Step(step))
    assert op == bl.CopyOperation(source, destination)


def test_operations_equals_stepwise_run():
    device = ScootchBoard()
    for op in SwapScootch(device, Request(SECONDARY)).operations():
        device.copy(op)
    assert device.image(PRIMARY)[0] == "B0"
    assert device.image(SECONDARY)[-1] == "A3"


def test_planning_last_step_raises():
    strategy = SwapScootch(ScootchBoard(), Request(SECONDARY))
    with pytest.raises(ValueError):
        strategy.plan(strategy.last_step())


def test_zero_pages_rejected():
    with pytest.raises(ValueError):
        SwapScootch(ScootchBoard(0), Request(SECONDARY))