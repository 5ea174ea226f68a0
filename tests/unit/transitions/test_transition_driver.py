"""Unit tests for TransitionDriver."""

from __future__ import annotations

import asyncio

import pytest

from tests.fixtures.transitions import ENTER, INITIAL, NOW, make_config
from transitory.core.transitions import (
    AsyncioScheduler,
    CollectionState,
    DuplicateKeyError,
    ManualClock,
    ManualScheduler,
    Stage,
    TransitionDriver,
)


@pytest.fixture
def states() -> list[CollectionState]:
    return []


@pytest.fixture
def driver(config, clock, scheduler, states) -> TransitionDriver:
    return TransitionDriver(str, config, scheduler=scheduler, clock=clock, on_change=states.append)


class TestTransitionDriver:
    """Test the driver's tick and wake scheduling."""

    def test_no_state_before_first_update(self, driver: TransitionDriver):
        """The driver starts without a state."""
        assert driver.state is None
        assert driver.records == ()
        assert driver.wake_pending is False

    def test_first_update_requests_immediate_wake(
        self, driver: TransitionDriver, scheduler: ManualScheduler
    ):
        """New items request a wake at the next opportunity."""
        records = driver.update(["a"])

        assert [r.stage for r in records] == [Stage.ENTERING]
        assert [h.due_ms for h in scheduler.pending] == [NOW]

    def test_full_lifecycle(
        self,
        driver: TransitionDriver,
        clock: ManualClock,
        scheduler: ManualScheduler,
        states: list[CollectionState],
    ):
        """Wakes carry an item through enter and leave without new input."""
        driver.update(["a"])

        scheduler.run_due()
        assert driver.records[0].style == ENTER
        assert [h.due_ms for h in scheduler.pending] == [NOW + 500]

        clock.advance(500)
        scheduler.run_due()
        assert driver.records[0].stage == Stage.ACTIVE
        assert driver.wake_pending is False

        driver.update([])
        assert driver.records[0].stage == Stage.LEAVING
        assert [h.due_ms for h in scheduler.pending] == [NOW + 1500]

        clock.advance(1000)
        scheduler.run_due()
        assert driver.records == ()
        assert driver.wake_pending is False
        assert len(states) == 5

    def test_update_replaces_pending_wake(
        self, driver: TransitionDriver, clock: ManualClock, scheduler: ManualScheduler
    ):
        """Each update cancels the previously scheduled wake."""
        driver.update(["a"])
        scheduler.run_due()
        clock.advance(100)

        driver.update(["a", "b"])

        assert [h.due_ms for h in scheduler.pending] == [NOW + 100]

    def test_wake_reuses_latest_items(
        self, driver: TransitionDriver, clock: ManualClock, scheduler: ManualScheduler
    ):
        """A scheduled wake reconciles against the most recent input."""
        driver.update(["a"])
        driver.update(["a", "b"])

        scheduler.run_due()

        assert driver.state is not None
        assert driver.state.keys() == ["a", "b"]
        assert all(r.stage == Stage.ENTERING for r in driver.records)

    def test_settled_initial_items_schedule_nothing(
        self, clock: ManualClock, scheduler: ManualScheduler
    ):
        """Items that start from 'initial' need no wake."""
        settled = make_config(initial=INITIAL)
        driver = TransitionDriver(str, settled, scheduler=scheduler, clock=clock)

        driver.update(["a", "b"])

        assert scheduler.pending == []
        assert all(r.stage == Stage.ACTIVE for r in driver.records)

    def test_close_cancels_wake(self, driver: TransitionDriver, scheduler: ManualScheduler):
        """Closing cancels the pending wake and rejects updates."""
        driver.update(["a"])

        driver.close()

        assert scheduler.pending == []
        with pytest.raises(RuntimeError):
            driver.update(["a"])

    def test_rejected_input_leaves_driver_unchanged(
        self, clock: ManualClock, scheduler: ManualScheduler
    ):
        """A failed update keeps the previous input for the pending wake."""
        driver = TransitionDriver(
            str, make_config(check_keys=True), scheduler=scheduler, clock=clock
        )
        first = driver.update(["a"])

        with pytest.raises(DuplicateKeyError):
            driver.update(["a", "b", "a"])

        assert driver.records == first
        assert scheduler.run_due() == 1
        assert driver.state is not None
        assert driver.state.keys() == ["a"]
        assert driver.records[0].style == ENTER


@pytest.mark.asyncio
async def test_asyncio_driver_settles():
    """On an event loop the driver settles entering items on its own."""
    config = make_config(enter_duration_ms=10, leave_duration_ms=10)
    driver = TransitionDriver(str, config, scheduler=AsyncioScheduler())

    driver.update(["a", "b"])
    for _ in range(50):
        await asyncio.sleep(0.01)
        if not driver.wake_pending:
            break
    driver.close()

    assert [r.stage for r in driver.records] == [Stage.ACTIVE, Stage.ACTIVE]
