"""Process-lifetime retry statistics shared by concurrent calls"""

import threading

from retrykit.domain.models.stats import StatsSnapshot


class StatsAccumulator:
    """Lock-guarded counters updated once per operation start and terminal outcome"""

    def __init__(self):
        self._total_operations = 0
        self._total_retries = 0
        self._successful_operations = 0
        self._failed_operations = 0

        # Thread safety
        self._lock = threading.Lock()

    def record_start(self) -> None:
        with self._lock:
            self._total_operations += 1

    def record_success(self, retries: int) -> None:
        """Record a successful operation and the retries it took"""
        with self._lock:
            self._successful_operations += 1
            self._total_retries += retries

    def record_failure(self, retries: int) -> None:
        """Record a terminal failure and the retries accrued before it"""
        with self._lock:
            self._failed_operations += 1
            self._total_retries += retries

    def snapshot(self) -> StatsSnapshot:
        with self._lock:
            return StatsSnapshot(
                total_operations=self._total_operations,
                total_retries=self._total_retries,
                successful_operations=self._successful_operations,
                failed_operations=self._failed_operations,
            )
