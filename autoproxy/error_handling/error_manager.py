"""
Recording of validation and analysis findings.

Validators never raise for bad user data. A host that wants a running record
of what went wrong passes an ErrorManager to ProxyValidator or
PACScriptAnalyzer; each one owns its manager, there is no shared instance.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, List, Optional


class ErrorSeverity(IntEnum):
    """How serious a finding is."""
    LOW = 1
    MEDIUM = 2
    HIGH = 3


class ErrorCategory(Enum):
    """Which check produced a finding."""
    PATTERN_VALIDATION = "pattern_validation"
    CONFIG_VALIDATION = "config_validation"
    PAC_ANALYSIS = "pac_analysis"


@dataclass
class ErrorInfo:
    """One recorded finding."""
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    details: Optional[str] = None
    context: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)


class ErrorManager:
    """
    Bounded, per-owner history of findings.

    Args:
        max_history_size: Oldest findings are dropped beyond this many
        on_error: Called with every recorded finding
    """

    def __init__(self, max_history_size: int = 1000,
                 on_error: Optional[Callable[[ErrorInfo], None]] = None):
        if max_history_size < 1:
            raise ValueError("max_history_size must be at least 1")
        self.max_history_size = max_history_size
        self.on_error = on_error
        self._history: List[ErrorInfo] = []
        self._lock = threading.Lock()

    def record(self, category: ErrorCategory, severity: ErrorSeverity, message: str,
               details: Optional[str] = None,
               context: Optional[Dict[str, Any]] = None) -> ErrorInfo:
        """Store a finding and pass it to ``on_error``."""
        error = ErrorInfo(category, severity, message, details, context or {})
        with self._lock:
            self._history.append(error)
            del self._history[:-self.max_history_size]
        if self.on_error is not None:
            self.on_error(error)
        return error

    def get_error_history(self, category: Optional[ErrorCategory] = None,
                          min_severity: Optional[ErrorSeverity] = None) -> List[ErrorInfo]:
        """Recorded findings, oldest first, optionally filtered."""
        with self._lock:
            errors = list(self._history)
        if category is not None:
            errors = [e for e in errors if e.category == category]
        if min_severity is not None:
            errors = [e for e in errors if e.severity >= min_severity]
        return errors

    def count_by_category(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for error in self.get_error_history():
            counts[error.category.value] = counts.get(error.category.value, 0) + 1
        return counts

    def clear_history(self):
        with self._lock:
            self._history.clear()
