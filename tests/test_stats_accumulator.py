"""Tests for StatsAccumulator and StatsSnapshot"""

import threading

from retrykit.application.stats_accumulator import StatsAccumulator
from retrykit.domain.models.stats import StatsSnapshot


def test_empty_snapshot():
    """Test derived values are zero without operations"""
    snapshot = StatsAccumulator().snapshot()
    assert snapshot == StatsSnapshot()
    assert snapshot.success_rate == 0
    assert snapshot.average_attempts_per_operation == 0


def test_counters():
    """Test counters after mixed outcomes"""
    stats = StatsAccumulator()
    for _ in range(4):
        stats.record_start()
    stats.record_success(0)
    stats.record_success(2)
    stats.record_failure(1)

    snapshot = stats.snapshot()
    assert snapshot.total_operations == 4
    assert snapshot.successful_operations == 2
    assert snapshot.failed_operations == 1
    assert snapshot.total_retries == 3
    assert snapshot.in_flight_operations == 1
    assert snapshot.success_rate == 0.5
    assert snapshot.average_attempts_per_operation == 7 / 4


def test_snapshot_is_not_live():
    """Test earlier snapshots do not change after new records"""
    stats = StatsAccumulator()
    before = stats.snapshot()
    stats.record_start()
    assert before.total_operations == 0
    assert stats.snapshot().total_operations == 1


def test_to_dict():
    snapshot = StatsSnapshot(total_operations=2, total_retries=2, successful_operations=1, failed_operations=1)
    assert snapshot.to_dict() == {
        "total_operations": 2,
        "total_retries": 2,
        "successful_operations": 1,
        "failed_operations": 1,
        "success_rate": 0.5,
        "average_attempts_per_operation": 2.0,
    }


def test_threaded_updates_are_not_lost():
    """Test concurrent increments from many threads"""
    stats = StatsAccumulator()

    def worker():
        for _ in range(1000):
            stats.record_start()
            stats.record_success(1)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    snapshot = stats.snapshot()
    assert snapshot.total_operations == 8000
    assert snapshot.successful_operations == 8000
    assert snapshot.total_retries == 8000
