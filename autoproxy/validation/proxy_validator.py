"""
Validation of proxy configurations and Auto-Proxy rule sets.

Validation never raises for bad user data. Problems are returned as a
ValidationResult so the host can show them before saving or compiling.
Failures are logged and, when the caller passes an ErrorManager, recorded
there as well.
"""

import logging
import re
from typing import Optional, Sequence
from urllib.parse import urlparse

from ..config import EngineSettings
from ..engine.pattern_matcher import validate_pattern
from ..engine.proxy_formatter import find_proxy
from ..engine.references import is_orphaned_rule
from ..error_handling import ErrorCategory, ErrorManager, ErrorSeverity
from ..models import (
    AutoProxyConfiguration, PACScriptSource, ProxyConfiguration, ProxyMode,
    ProxyRules, ProxyScheme, ProxyServer, ProxyType, ValidationResult
)
from .pac_analyzer import PACScriptAnalyzer

_COLOR = re.compile(r'#[0-9A-Fa-f]{6}')
_DOMAIN = re.compile(r'([a-z0-9]([a-z0-9-]*[a-z0-9])?\.)*[a-z0-9]([a-z0-9-]*[a-z0-9])?', re.IGNORECASE | re.ASCII)
_IPV4 = re.compile(r'(\d{1,3}\.){3}\d{1,3}', re.ASCII)
_IPV6 = re.compile(r'([0-9a-f]{0,4}:){2,7}[0-9a-f]{0,4}', re.IGNORECASE | re.ASCII)


def is_valid_host(host: str) -> bool:
    """Check if a string looks like a domain name, an IPv4 or a (simplified) IPv6 address."""
    if _IPV4.fullmatch(host):
        return all(0 <= int(octet) <= 255 for octet in host.split('.'))
    if _DOMAIN.fullmatch(host):
        return True
    return bool(_IPV6.fullmatch(host))


def is_valid_url(url: str) -> bool:
    """Check if a string is an absolute http(s) URL."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


class ProxyValidator:
    """
    Validator for proxy configurations and Auto-Proxy rule sets.

    Checks names, colors, mode-specific settings, every configured server
    and inline PAC scripts (through PACScriptAnalyzer).
    """

    def __init__(self, settings: Optional[EngineSettings] = None,
                 analyzer: Optional[PACScriptAnalyzer] = None,
                 error_manager: Optional[ErrorManager] = None):
        """
        Initialize the validator.

        Args:
            settings: Engine settings; defaults are used when omitted
            analyzer: PAC analyzer to use for inline scripts; a new one
                sharing ``error_manager`` is created when omitted
            error_manager: Receives failures; when omitted they are only logged
        """
        self.logger = logging.getLogger(__name__)
        self.error_manager = error_manager
        self.settings = settings or EngineSettings()
        self.analyzer = analyzer or PACScriptAnalyzer(self.settings, error_manager)

    def validate_proxy_config(self, config: ProxyConfiguration) -> ValidationResult:
        """
        Validate a complete proxy configuration.

        Args:
            config: Configuration to check

        Returns:
            ValidationResult with errors and warnings
        """
        result = ValidationResult()

        if not config.name or not config.name.strip():
            result.errors.append("Proxy name is required")
        elif len(config.name) > self.settings.max_name_length:
            result.warnings.append("Proxy name is very long - consider shortening for better display")

        if not config.color:
            result.errors.append("Proxy color is required")
        elif not _COLOR.fullmatch(config.color):
            result.errors.append("Invalid color format - must be hex color (e.g., #3b82f6)")

        if config.mode == ProxyMode.FIXED_SERVERS:
            if config.rules is None:
                result.errors.append("Manual proxy mode requires proxy server configuration")
            else:
                self._validate_proxy_rules(config.rules, result)
        elif config.mode == ProxyMode.PAC_SCRIPT:
            if config.pac_script is None:
                result.errors.append("PAC script mode requires script configuration")
            else:
                self._validate_pac_script(config.pac_script, result, config.name)
        elif config.mode not in ProxyMode.ALL:
            result.errors.append(f"Unknown proxy mode: {config.mode}")

        self._report(result, f"proxy '{config.name}'")
        return result

    def validate_proxy_server(self, server: ProxyServer, label: str) -> ValidationResult:
        """Validate a single proxy server; messages are prefixed with its label."""
        result = ValidationResult()

        if not server.host or not server.host.strip():
            result.errors.append(f"{label}: Host is required")
        elif not is_valid_host(server.host):
            result.errors.append(f'{label}: Invalid host "{server.host}" - must be a domain name or IP address')

        if not server.port:
            result.errors.append(f"{label}: Port is required")
        else:
            match = re.match(r'\s*[+-]?\d+', server.port, re.ASCII)
            if match is None:
                result.errors.append(f"{label}: Port must be a number")
            else:
                port = int(match.group(0))
                if port < 1 or port > 65535:
                    result.errors.append(f"{label}: Port must be between 1 and 65535")
                elif port == 80:
                    result.warnings.append(f"{label}: Port 80 is typically for HTTP, not proxies")
                elif port == 443:
                    result.warnings.append(f"{label}: Port 443 is typically for HTTPS, not proxies")
                elif port < 1024:
                    result.warnings.append(f"{label}: Port {port} is a privileged port")

        if server.scheme not in ProxyScheme.ALL:
            result.errors.append(f'{label}: Invalid scheme "{server.scheme}" - '
                                 f'must be one of: {", ".join(ProxyScheme.ALL)}')
        elif server.scheme == ProxyScheme.QUIC:
            result.warnings.append(f"{label}: QUIC proxy support may be limited in some environments")

        return result

    def validate_auto_proxy(self, auto_proxy: AutoProxyConfiguration,
                            known_configs: Sequence[ProxyConfiguration]) -> ValidationResult:
        """
        Validate an Auto-Proxy rule set before compiling it.

        Reports invalid patterns and incomplete actions as errors, and
        references to missing configurations as warnings, since the
        compiler silently routes those DIRECT.
        """
        result = ValidationResult()

        for number, rule in enumerate(auto_proxy.rules, 1):
            prefix = f"Rule {number} ({rule.pattern or 'empty'}): "

            pattern_result = validate_pattern(rule.pattern, rule.match_type)
            if not pattern_result.valid:
                result.errors.append(f"{prefix}{pattern_result.error}")
                self._note(ErrorCategory.PATTERN_VALIDATION, ErrorSeverity.LOW,
                           pattern_result.error, f"rule {rule.id}")

            if rule.proxy_type == ProxyType.INLINE:
                if rule.inline_proxy is None:
                    result.errors.append(f"{prefix}Inline proxy server is required")
                else:
                    result.merge(self.validate_proxy_server(rule.inline_proxy, "Inline proxy"), prefix)
            elif rule.proxy_type == ProxyType.EXISTING:
                if not rule.proxy_id:
                    result.errors.append(f"{prefix}No proxy selected")
                elif is_orphaned_rule(rule, known_configs):
                    result.warnings.append(f"{prefix}Referenced proxy no longer exists - traffic will go DIRECT")
            elif rule.proxy_type != ProxyType.DIRECT:
                result.errors.append(f"{prefix}Unknown proxy type: {rule.proxy_type}")

        self._validate_fallback(auto_proxy, known_configs, result)

        self._report(result, "Auto-Proxy rules")
        return result

    def is_valid(self, config: ProxyConfiguration) -> bool:
        """Quick validation check (just errors, no warnings)."""
        return self.validate_proxy_config(config).valid

    def _validate_fallback(self, auto_proxy: AutoProxyConfiguration,
                           known_configs: Sequence[ProxyConfiguration],
                           result: ValidationResult):
        """Validate the fallback policy of a rule set."""
        if auto_proxy.fallback_type == ProxyType.INLINE:
            if auto_proxy.fallback_inline_proxy is None:
                result.errors.append("Fallback: Inline proxy server is required")
            else:
                result.merge(self.validate_proxy_server(auto_proxy.fallback_inline_proxy, "Fallback proxy"))
        elif auto_proxy.fallback_type == ProxyType.EXISTING:
            if not auto_proxy.fallback_proxy_id:
                result.errors.append("Fallback: No proxy selected")
            elif find_proxy(auto_proxy.fallback_proxy_id, known_configs) is None:
                result.warnings.append("Fallback: Referenced proxy no longer exists - traffic will go DIRECT")
        elif auto_proxy.fallback_type != ProxyType.DIRECT:
            result.errors.append(f"Fallback: Unknown proxy type: {auto_proxy.fallback_type}")

    def _validate_proxy_rules(self, rules: ProxyRules, result: ValidationResult):
        """Validate manual proxy settings."""
        if not rules.has_server():
            result.errors.append("At least one proxy server must be configured")
            return

        for label, server in rules.configured_slots():
            result.merge(self.validate_proxy_server(server, label))

        for index, entry in enumerate(rules.bypass_list, 1):
            if not entry.strip():
                result.warnings.append(f"Bypass list entry #{index} is empty")

    def _validate_pac_script(self, pac_script: PACScriptSource, result: ValidationResult, name: str):
        """Validate PAC script settings, analyzing inline source."""
        if not pac_script.url and not pac_script.data:
            result.errors.append("PAC script requires either a URL or inline script")
            return

        if pac_script.url and pac_script.data:
            result.warnings.append("Both PAC URL and inline script are set - URL will take precedence")

        if pac_script.url and not is_valid_url(pac_script.url):
            result.errors.append(f"Invalid PAC script URL: {pac_script.url}")

        if pac_script.data:
            analysis = self.analyzer.analyze(pac_script.data, source=f"proxy '{name}'")
            result.errors.extend(analysis.syntax_errors)
            result.errors.extend(f"Security: {issue.message}" for issue in analysis.critical_issues())
            result.warnings.extend(f"Security: {issue.message}" for issue in analysis.non_critical_issues())
            result.warnings.extend(analysis.warnings)

    def _report(self, result: ValidationResult, subject: str):
        """Log the outcome of a validation; failures also go to the error manager."""
        if result.valid:
            self.logger.debug(f"Validation of {subject} passed with {len(result.warnings)} warning(s)")
            return
        self._note(ErrorCategory.CONFIG_VALIDATION, ErrorSeverity.MEDIUM,
                   f"Validation of {subject} failed", '; '.join(result.errors))

    def _note(self, category: ErrorCategory, severity: ErrorSeverity, message: str, details: str):
        self.logger.info(f"[{category.value}] {message} - {details}")
        if self.error_manager is not None:
            self.error_manager.record(category, severity, message, details=details)
