"""
Error handling for the Auto-Proxy rule engine.

Findings from validation and analysis are returned as results and, when the
caller supplies an ErrorManager, recorded there instead of being raised.
"""

from .error_manager import ErrorManager, ErrorSeverity, ErrorCategory, ErrorInfo

__all__ = [
    'ErrorManager',
    'ErrorSeverity',
    'ErrorCategory',
    'ErrorInfo'
]
