"""
Result types returned by the validators, the analyzer and the evaluator.

None of these are raised; callers inspect them and decide what to show.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .auto_proxy import AutoProxyRule


@dataclass
class PatternValidationResult:
    """Outcome of checking one pattern against its grammar."""
    valid: bool
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'valid': self.valid}
        if self.error is not None:
            data['error'] = self.error
        return data


class ValidationResult:
    """Result of configuration validation with errors and warnings."""

    def __init__(self, errors: Optional[List[str]] = None,
                 warnings: Optional[List[str]] = None):
        """
        Initialize validation result.

        Args:
            errors: Problems that make the configuration unusable
            warnings: Problems worth surfacing that do not block saving
        """
        self.errors = errors or []
        self.warnings = warnings or []

    @property
    def valid(self) -> bool:
        return len(self.errors) == 0

    def merge(self, other: 'ValidationResult', prefix: str = "") -> None:
        """Append another result's findings, optionally prefixing each message."""
        self.errors.extend(f"{prefix}{error}" for error in other.errors)
        self.warnings.extend(f"{prefix}{warning}" for warning in other.warnings)

    def summary(self) -> str:
        """Get a one-line summary of the result."""
        if self.valid and not self.warnings:
            return "✅ Configuration is valid"
        if self.valid:
            return f"⚠️ Configuration is valid with {len(self.warnings)} warning(s)"
        return f"❌ Configuration has {len(self.errors)} error(s)"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'valid': self.valid,
            'errors': list(self.errors),
            'warnings': list(self.warnings)
        }


@dataclass
class UrlTestResult:
    """
    Routing decision for a single URL or hostname.

    Attributes:
        matched: Whether an enabled rule matched
        proxy_result: PAC-style result ("DIRECT", "PROXY host:port", ...)
                      or "PAC Script: <name>" for embedded scripts
        rule: The matching rule, if any
        is_pac_script: True when the match delegates to a PAC script
    """
    matched: bool
    proxy_result: str
    rule: Optional[AutoProxyRule] = None
    is_pac_script: bool = False


class SecuritySeverity:
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


@dataclass
class SecurityIssue:
    """A risky construct found in a PAC script."""
    severity: str
    message: str
    line: Optional[int] = None


@dataclass
class PACAnalysisResult:
    """
    Static analysis report for a PAC script.

    Attributes:
        syntax_valid: Whether the script parses and declares FindProxyForURL
        syntax_errors: Parse and signature errors
        security: Risky constructs with severity and line number
        warnings: Common-mistake heuristics
    """
    syntax_valid: bool = True
    syntax_errors: List[str] = field(default_factory=list)
    security: List[SecurityIssue] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def critical_issues(self) -> List[SecurityIssue]:
        return [issue for issue in self.security if issue.severity == SecuritySeverity.CRITICAL]

    def non_critical_issues(self) -> List[SecurityIssue]:
        return [issue for issue in self.security if issue.severity != SecuritySeverity.CRITICAL]
