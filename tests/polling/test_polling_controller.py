from __future__ import annotations

import logging

import pytest

from hrms_portal.polling.controller import PollingController


class Counter:
    def __init__(self, fail_on=()):
        self.calls = 0
        self.fail_on = set(fail_on)

    def __call__(self):
        self.calls += 1
        if self.calls in self.fail_on:
            raise RuntimeError(f"boom #{self.calls}")
        return self.calls


def test_three_second_polling_lifecycle(scheduler):
    fetch = Counter()
    shown = []
    poller = PollingController(fetch, shown.append, interval=3, scheduler=scheduler)

    poller.start()
    assert fetch.calls == 1

    for expected, at in ((2, 3), (3, 6), (4, 9)):
        scheduler.advance(at - scheduler.now)
        assert fetch.calls == expected

    scheduler.advance(1.5)
    assert fetch.calls == 4
    assert shown == [1, 2, 3, 4]


def test_unmount_after_first_tick_stops_fetching(scheduler):
    fetch = Counter()
    poller = PollingController(fetch, lambda _: None, interval=3, scheduler=scheduler)

    poller.start()
    scheduler.advance(3)
    poller.stop()
    scheduler.advance(30)

    assert fetch.calls == 2
    assert scheduler.active_timers == 0
    assert not poller.running


def test_restart_keeps_a_single_timer(scheduler):
    fetch = Counter()
    poller = PollingController(fetch, lambda _: None, interval=3, scheduler=scheduler)

    poller.start()
    scheduler.advance(1)
    poller.restart()
    poller.start()

    assert scheduler.active_timers == 1
    scheduler.advance(3)
    assert fetch.calls == 4


def test_failures_are_logged_and_polling_continues(scheduler, caplog):
    fetch = Counter(fail_on={2, 3})
    shown = []
    errors = []
    poller = PollingController(fetch, shown.append, interval=3, scheduler=scheduler, name="stats", on_error=errors.append)

    with caplog.at_level(logging.WARNING, logger="hrms_portal.polling.controller"):
        poller.start()
        scheduler.advance(12)

    assert fetch.calls == 5
    assert shown == [1, 4, 5]
    assert len(errors) == 2
    assert "stats: fetch #2 failed" in caplog.text


def test_stale_response_does_not_overwrite_newer(deferred_scheduler):
    fetch = Counter()
    shown = []
    poller = PollingController(fetch, shown.append, interval=3, scheduler=deferred_scheduler)

    poller.start()
    deferred_scheduler.advance(3)
    assert len(deferred_scheduler.pending) == 2

    # The tick answers before the slow initial fetch.
    deferred_scheduler.complete(1)
    deferred_scheduler.complete(0)

    assert shown == [2]


def test_result_after_unmount_is_ignored(deferred_scheduler):
    shown = []
    poller = PollingController(lambda: "late", shown.append, interval=3, scheduler=deferred_scheduler)

    poller.start()
    poller.stop()
    deferred_scheduler.complete()

    assert shown == []


def test_manual_refresh_has_its_own_in_flight_flag(deferred_scheduler):
    fetch = Counter()
    shown = []
    poller = PollingController(fetch, shown.append, interval=3, scheduler=deferred_scheduler)
    poller.start()

    assert poller.refresh() is True
    assert poller.refreshing
    assert poller.refresh() is False

    # A timer tick may still go out while the manual refresh is pending.
    deferred_scheduler.advance(3)
    assert len(deferred_scheduler.pending) == 3

    deferred_scheduler.complete(1)
    assert not poller.refreshing
    assert poller.refresh() is True


def test_refresh_requires_a_mounted_view(scheduler):
    poller = PollingController(Counter(), lambda _: None, interval=3, scheduler=scheduler)

    assert poller.refresh() is False


def test_interval_must_be_positive(scheduler):
    with pytest.raises(ValueError):
        PollingController(Counter(), lambda _: None, interval=0, scheduler=scheduler)
