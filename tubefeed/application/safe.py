from __future__ import annotations

import logging
import threading
from collections import Counter
from typing import Callable, Dict, Optional, TypeVar

from tubefeed.crosscutting.logging import log_error
from tubefeed.domain.result import capture


T = TypeVar("T")

logger = logging.getLogger(__name__)


class SafeExecutor:
    """Single error boundary between gateway calls and the rest of the core.

    Failures become the caller's fallback plus one diagnostic record. Nothing
    is retried and nothing is re-raised.
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self._logger = log or logger
        self._fallbacks = Counter()
        self._lock = threading.Lock()

    def run(self, label: str, operation: Callable[[], T], fallback: T) -> T:
        result = capture(operation)
        if result.ok:
            return result.value

        log_error(self._logger, f"{label} failed", result.error,
                  label=label, error_kind=result.kind)
        with self._lock:
            self._fallbacks[label] += 1
        return fallback

    def fallback_counts(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._fallbacks)


default_executor = SafeExecutor()


def run_safely(label: str, operation: Callable[[], T], fallback: T) -> T:
    """Run operation through the shared executor, returning fallback on failure."""
    return default_executor.run(label, operation, fallback)
