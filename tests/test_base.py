import pytest

from bootlick.core import CopyOperation, MemoryLocation, Page, Slot, Step
from bootlick.strategies.base import Strategy


class _PerStep(Strategy):
    """Plans one operation per step whose page number is the step number."""

    def __init__(self, steps, per_step=1):
        self._steps = steps
        self._per_step = per_step

    def last_step(self):
        return Step(self._steps)

    def plan(self, step):
        for _ in range(self._per_step):
            yield CopyOperation(
                MemoryLocation(Slot(1), Page(step.number)),
                MemoryLocation(Slot(0), Page(step.number)),
            )


def _op(page):
    return CopyOperation(
        MemoryLocation(Slot(1), Page(page)),
        MemoryLocation(Slot(0), Page(page)),
    )


def test_strategy_is_abstract():
    with pytest.raises(TypeError):
        Strategy()


def test_operations_walks_steps_in_order():
    strategy = _PerStep(5)
    pages = [op.source.page for op in strategy.operations()]
    assert pages == [Page(0), Page(1), Page(2), Page(3), Page(4)]


def test_operations_excludes_last_step():
    strategy = _PerStep(3)
    assert all(op.source.page < Page(3) for op in strategy.operations())


def test_operations_empty_when_last_step_is_zero():
    operations = list(Strategy.operations(_PerStep(0)))
    assert operations == []


def test_operations_keeps_multiple_per_step():
    strategy = _PerStep(2, per_step=3)
    ops = list(strategy.operations())
    assert len(ops) == 2 * 3
    assert [op.destination.page for op in ops] == [Page(0)] * 3 + [Page(1)] * 3


def test_operations_is_lazy_and_restartable():
    strategy = _PerStep(4)
    first = list(Strategy.operations(strategy))
    second = list(Strategy.operations(strategy))
    expected = [_op(0), _op(1), _op(2), _op(3)]
    assert first == expected
    assert second == expected