"""StatsSnapshot model - read-only view of retry statistics"""

from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class StatsSnapshot:
    """Counters as of the moment the snapshot was taken"""

    total_operations: int = 0
    total_retries: int = 0
    successful_operations: int = 0
    failed_operations: int = 0

    @property
    def success_rate(self) -> float:
        """Successful / total operations, 0 when nothing ran yet"""
        if self.total_operations == 0:
            return 0.0
        return self.successful_operations / self.total_operations

    @property
    def average_attempts_per_operation(self) -> float:
        """(operations + retries) / operations, 0 when nothing ran yet"""
        if self.total_operations == 0:
            return 0.0
        return (self.total_operations + self.total_retries) / self.total_operations

    @property
    def in_flight_operations(self) -> int:
        """Operations started but not yet finished"""
        return self.total_operations - self.successful_operations - self.failed_operations

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["success_rate"] = self.success_rate
        data["average_attempts_per_operation"] = self.average_attempts_per_operation
        return data
