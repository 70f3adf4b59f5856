import logging
import threading

from stellar_reward_bot.scheduler import DistributionScheduler


def test_tick_skips_while_cycle_in_progress(events):
    release = threading.Event()
    started = threading.Event()
    runs = []

    def cycle():
        runs.append(1)
        started.set()
        release.wait(5)

    scheduler = DistributionScheduler(cycle, 60, events)

    assert scheduler.tick() is True
    assert started.wait(5)
    assert scheduler.busy
    assert scheduler.tick() is False
    assert events.of("cycle_skipped") == [{"tick": 2}]

    release.set()
    scheduler.wait(5)
    assert not scheduler.busy
    assert scheduler.tick() is True
    scheduler.wait(5)
    assert len(runs) == 2


def test_crashing_cycle_releases_guard(events):
    def cycle():
        raise RuntimeError("boom")

    scheduler = DistributionScheduler(cycle, 60, events)
    scheduler.tick()
    scheduler.wait(5)

    assert not scheduler.busy
    assert events.of("cycle_crashed") == [{"error": "boom"}]
    assert events.levels("cycle_crashed") == [logging.ERROR]
    assert scheduler.tick() is True
    scheduler.wait(5)


def test_run_forever_until_stopped(events):
    scheduler = None

    def cycle():
        scheduler.stop()

    scheduler = DistributionScheduler(cycle, 60, events)
    thread = threading.Thread(target=scheduler.run_forever)
    thread.start()
    thread.join(5)

    assert not thread.is_alive()
    assert scheduler.ticks == 1
    assert events.names()[0] == "scheduler_started"
    assert events.of("scheduler_stopped") == [{"ticks": 1}]
