"""
Static analysis of PAC scripts.

The analyzer is a read-only lint: it checks syntax, flags risky constructs
and points out common mistakes without ever running the script. When a
JavaScript runtime is reachable through PyExecJS the script text is handed
to ``new Function`` inside a fixed checker, which parses it but does not
call it. Without a runtime a structural scan (brackets, strings, comments)
is used instead.
"""

import logging
import re
from typing import List, Optional, Tuple

import execjs

from ..config import EngineSettings
from ..engine.proxy_formatter import DIRECT, parse_proxy_string, split_proxy_chain
from ..error_handling import ErrorCategory, ErrorManager, ErrorSeverity
from ..models import PACAnalysisResult, SecurityIssue, SecuritySeverity

SYNTAX_CHECKER = """
function checkSyntax(source) {
    try {
        new Function(source);
        return null;
    } catch (e) {
        return [String(e && e.name), String(e && e.message)];
    }
}
"""

PAC_FUNCTIONS = [
    'isPlainHostName', 'dnsDomainIs', 'localHostOrDomainIs',
    'isResolvable', 'isInNet', 'dnsResolve', 'myIpAddress',
    'dnsDomainLevels', 'shExpMatch', 'weekdayRange', 'dateRange', 'timeRange'
]

# (pattern, severity, message)
DANGEROUS_PATTERNS = [
    (r'eval\s*\(', SecuritySeverity.CRITICAL,
     "Uses eval() - critical security risk. Remove eval() calls."),
    (r'new\s+Function\s*\(', SecuritySeverity.CRITICAL,
     "Uses Function() constructor - security risk"),
    (r'document\.', SecuritySeverity.WARNING,
     "Attempts to access document object (PAC scripts have no DOM access)"),
    (r'window\.', SecuritySeverity.WARNING,
     "Attempts to access window object (not available in PAC context)"),
    (r'XMLHttpRequest|fetch\(', SecuritySeverity.WARNING,
     "Attempts network requests (not allowed in PAC scripts)"),
    (r'localStorage|sessionStorage', SecuritySeverity.WARNING,
     "Attempts to access storage (not available in PAC context)"),
    (r'chrome\.|browser\.', SecuritySeverity.WARNING,
     "Attempts to access browser APIs (not available in PAC context)"),
    (r'import\s+|require\s*\(', SecuritySeverity.WARNING,
     "Uses module imports (not supported in PAC scripts)"),
]

_RETURN_KEYWORD = re.compile(r'return\s+["\'](DIRECT|PROXY|SOCKS4?|SOCKS5|HTTPS?|QUIC)\b', re.IGNORECASE)
_RETURN_LITERAL = re.compile(r'return\s+(["\'])([^"\'\n]*)\1')
_FUNCTION_CALL = re.compile(r'\b\w+\s*\(')
_SIGNATURE = re.compile(r'function\s+FindProxyForURL\s*\((.*?)\)')
_BRACKET_PAIRS = {')': '(', '}': '{', ']': '['}
_BRACKET_NAMES = {'(': 'parentheses', '{': 'braces', '[': 'brackets'}


def get_line_number(script: str, index: int) -> int:
    """Get the 1-based line number of a character index."""
    return script.count('\n', 0, index) + 1


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance between two strings."""
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, 1):
        current = [i]
        for j, char_b in enumerate(b, 1):
            cost = 0 if char_a == char_b else 1
            current.append(min(previous[j - 1] + cost, current[j - 1] + 1, previous[j] + 1))
        previous = current
    return previous[-1]


def scan_structure(script: str) -> List[str]:
    """
    Check bracket balance and string termination, skipping comments.

    Returns:
        Error messages, empty when the structure looks sound.
    """
    errors = []
    stack: List[str] = []
    quote: Optional[str] = None
    index = 0
    length = len(script)

    while index < length:
        char = script[index]

        if quote:
            if char == '\\':
                index += 2
                continue
            if char == quote:
                quote = None
            elif char == '\n' and quote != '`':
                errors.append(f"Unterminated string literal (line {get_line_number(script, index)})")
                quote = None
            index += 1
            continue

        if script.startswith('//', index):
            newline = script.find('\n', index)
            index = length if newline == -1 else newline
            continue
        if script.startswith('/*', index):
            end = script.find('*/', index + 2)
            if end == -1:
                errors.append("Unterminated block comment")
                break
            index = end + 2
            continue

        if char in ('"', "'", '`'):
            quote = char
        elif char in '({[':
            stack.append(char)
        elif char in ')}]':
            if not stack or stack[-1] != _BRACKET_PAIRS[char]:
                errors.append(f"Unbalanced {_BRACKET_NAMES[_BRACKET_PAIRS[char]]} "
                              f"(line {get_line_number(script, index)})")
                return errors
            stack.pop()
        index += 1

    if quote:
        errors.append("Unterminated string literal at end of script")
    if stack:
        errors.append(f"Unbalanced {_BRACKET_NAMES[stack[-1]]}: missing closing character")
    return errors


class PACScriptAnalyzer:
    """
    PAC script analyzer.

    Produces a PACAnalysisResult with syntax errors, security issues and
    warnings. Findings are logged and, when an ErrorManager is given,
    recorded there too.
    """

    def __init__(self, settings: Optional[EngineSettings] = None,
                 error_manager: Optional[ErrorManager] = None):
        """
        Initialize the analyzer.

        Args:
            settings: Engine settings; defaults are used when omitted
            error_manager: Receives findings; when omitted they are only logged
        """
        self.logger = logging.getLogger(__name__)
        self.error_manager = error_manager
        self.settings = settings or EngineSettings()
        self._checker = None
        self._runtime_unavailable = False

    def analyze(self, script: str, source: str = "inline") -> PACAnalysisResult:
        """
        Analyze a PAC script.

        Args:
            script: PAC source code
            source: Description of where the script came from, for logging

        Returns:
            PACAnalysisResult with all findings
        """
        result = PACAnalysisResult()
        self.logger.debug(f"Analyzing PAC script from {source}")

        if len(script) > self.settings.max_pac_size:
            result.syntax_errors.append(
                f"PAC script exceeds maximum size of {self.settings.max_pac_size} bytes")
            result.syntax_valid = False
            self._record(result, source)
            return result

        result.syntax_errors = self.check_syntax(script)
        result.syntax_valid = not result.syntax_errors
        result.security = self.check_security(script)
        result.warnings = self.check_common_mistakes(script)

        self._record(result, source)
        return result

    def check_syntax(self, script: str) -> List[str]:
        """Check that the script parses and declares FindProxyForURL(url, host)."""
        errors = []

        parse_errors = self._parse_with_runtime(script)
        if parse_errors is None:
            parse_errors = scan_structure(script)
        errors.extend(parse_errors)

        if 'function FindProxyForURL' not in script:
            errors.append("Missing required function: FindProxyForURL(url, host)")

        match = _SIGNATURE.search(script)
        if match:
            params = [param.strip() for param in match.group(1).split(',')]
            if len(params) != 2:
                errors.append("FindProxyForURL must have exactly 2 parameters: (url, host)")

        return errors

    def check_security(self, script: str) -> List[SecurityIssue]:
        """Find constructs that are dangerous or unavailable in a PAC context."""
        issues = []
        for pattern, severity, message in DANGEROUS_PATTERNS:
            for match in re.finditer(pattern, script):
                line = get_line_number(script, match.start())
                issues.append(SecurityIssue(severity=severity, message=f"{message} (line {line})", line=line))
        return issues

    def check_common_mistakes(self, script: str) -> List[str]:
        """Heuristics for frequent PAC authoring mistakes."""
        warnings = []

        if 'return ' not in script:
            warnings.append("No return statement found - PAC must return a proxy string")

        if not _RETURN_KEYWORD.search(script):
            warnings.append("No DIRECT or PROXY return statements found - verify return values are correct")

        for match in _RETURN_LITERAL.finditer(script):
            for entry in split_proxy_chain(match.group(2)):
                if entry.upper() != DIRECT and parse_proxy_string(entry) is None:
                    warnings.append(f"Unrecognised proxy return value '{entry}' "
                                    f"(line {get_line_number(script, match.start())})")

        lines = [line.strip() for line in script.split('\n')]
        statements = [line for line in lines if line and not line.startswith('//')]
        if len(statements) > 5:
            terminated = [line for line in statements if line.endswith((';', '{', '}'))]
            if len(terminated) < len(statements) * 0.5:
                warnings.append("Many statements may be missing semicolons - verify syntax is correct")

        seen = set()
        for match in _FUNCTION_CALL.finditer(script):
            name = match.group(0).rstrip('( \t\r\n')
            if (name in seen or name in ('FindProxyForURL', 'function')
                    or name in PAC_FUNCTIONS or not re.match(r'^[a-z]', name)):
                continue
            seen.add(name)
            similar = next((pf for pf in PAC_FUNCTIONS if levenshtein_distance(name, pf) <= 2), None)
            if similar:
                warnings.append(f"'{name}' may be a typo - did you mean '{similar}'?")

        if re.search(r'console\.(log|warn|error)', script):
            warnings.append("console.log/warn/error are not available in PAC scripts")

        if len(script) > self.settings.large_script_threshold:
            warnings.append(f"Script is very large (>{self.settings.large_script_threshold // 1000}KB) "
                            f"- consider simplifying for better performance")

        return warnings

    def _parse_with_runtime(self, script: str) -> Optional[List[str]]:
        """
        Parse the script with a JavaScript runtime.

        Returns:
            A list with the parse error, an empty list when the script
            parses, or None when no runtime check was made.
        """
        checker = self._get_checker()
        if checker is None:
            return None

        try:
            outcome: Optional[Tuple[str, str]] = checker.call('checkSyntax', script)
        except execjs.RuntimeUnavailableError as e:
            self.logger.info(f"JavaScript runtime went away, using structural scans from now on: {e}")
            self._runtime_unavailable = True
            return None
        except execjs.Error as e:
            self.logger.warning(f"JavaScript syntax check failed, using structural scan: {e}")
            return None

        if not outcome:
            return []
        name, message = outcome
        if name == 'SyntaxError':
            return [f"Syntax error: {message}"]
        return [f"Error: {message}"]

    def _get_checker(self):
        """Compile the syntax checker once; None when disabled or no runtime exists."""
        if not self.settings.use_js_syntax_check or self._runtime_unavailable:
            return None
        if self._checker is None:
            try:
                self._checker = execjs.get().compile(SYNTAX_CHECKER)
            except execjs.RuntimeUnavailableError as e:
                self.logger.info(f"No JavaScript runtime available for PAC syntax checks: {e}")
                self._runtime_unavailable = True
                return None
        return self._checker

    def _record(self, result: PACAnalysisResult, source: str):
        """Log analysis findings and pass them to the error manager, if any."""
        findings = []
        if result.syntax_errors:
            findings.append((ErrorSeverity.MEDIUM, "PAC script has syntax errors",
                             '; '.join(result.syntax_errors)))
        critical = result.critical_issues()
        if critical:
            findings.append((ErrorSeverity.HIGH, "PAC script uses dangerous functions",
                             '; '.join(issue.message for issue in critical)))

        for severity, message, details in findings:
            self.logger.warning(f"[{source}] {message} - {details}")
            if self.error_manager is not None:
                self.error_manager.record(ErrorCategory.PAC_ANALYSIS, severity, message,
                                          details=details, context={'pac_source': source})


def analyze_pac_script(script: str, settings: Optional[EngineSettings] = None) -> PACAnalysisResult:
    """Analyze a PAC script with a fresh analyzer."""
    return PACScriptAnalyzer(settings).analyze(script)
