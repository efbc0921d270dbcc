from __future__ import annotations

import enum
import logging
from typing import Optional

from gas_oracle.models import GasPriceEstimate

logger = logging.getLogger(__name__)

MAX_ERROR_COUNT = 5


class Escalation(enum.Enum):
    SWALLOW = "swallow"
    FATAL = "fatal"


class EstimateCache:
    """Latest successful estimate plus the count of failures since then.

    A failure is fatal once the streak exceeds ``max_error_count`` or when no
    estimate has ever been recorded; the streak restarts from zero after a
    fatal result. Not thread-safe: the owning estimator serializes writes.
    """

    def __init__(self, max_error_count: int = MAX_ERROR_COUNT):
        self.max_error_count = max_error_count
        self._estimate: Optional[GasPriceEstimate] = None
        self._error_streak = 0

    @property
    def estimate(self) -> Optional[GasPriceEstimate]:
        return self._estimate

    @property
    def has_estimate(self) -> bool:
        return self._estimate is not None

    @property
    def error_streak(self) -> int:
        return self._error_streak

    def record_success(self, estimate: GasPriceEstimate) -> None:
        self._estimate = estimate
        self._error_streak = 0

    def record_failure(self, error: Exception) -> Escalation:
        self._error_streak += 1
        if self._error_streak > self.max_error_count or self._estimate is None:
            logger.error(f"Gas price estimation escalated after {self._error_streak} failure(s): {error}")
            self._error_streak = 0
            return Escalation.FATAL
        logger.warning(
            f"Gas price refresh failed ({self._error_streak}/{self.max_error_count}), serving stale estimate: {error}"
        )
        return Escalation.SWALLOW
