"""
Direct evaluation of Auto-Proxy rules for a single URL.

This answers "which rule would route this URL, and where" without
generating or running a PAC script. It walks the rules in the same order as
the compiled script, but on no match it always reports DIRECT rather than
the configured fallback.
"""

import logging
from typing import Sequence
from urllib.parse import urlsplit

from ..models import AutoProxyRule, ProxyConfiguration, ProxyType, UrlTestResult
from .pattern_matcher import matches
from .proxy_formatter import DIRECT, find_proxy, resolve_proxy_action
from .rule_compiler import sort_enabled_rules

logger = logging.getLogger(__name__)


def extract_host(url_or_host: str) -> str:
    """
    Get the hostname from a URL, or return the input when it isn't one.

    Only values with both a scheme and a network location are treated as
    URLs; the hostname is lower-cased the way browsers normalise it.
    """
    try:
        parts = urlsplit(url_or_host)
    except ValueError:
        return url_or_host
    if parts.scheme and parts.netloc and parts.hostname:
        return parts.hostname
    return url_or_host


def test_url(url_or_host: str,
             rules: Sequence[AutoProxyRule],
             known_configs: Sequence[ProxyConfiguration]) -> UrlTestResult:
    """
    Find the first enabled rule matching a URL or hostname.

    Args:
        url_or_host: Full URL or bare hostname
        rules: Rules to evaluate, in any order
        known_configs: All stored configurations

    Returns:
        UrlTestResult describing the match. Rules routing to a PAC script
        report ``PAC Script: <name>`` since the script itself is not run.
    """
    host = extract_host(url_or_host)

    for rule in sort_enabled_rules(rules):
        if not matches(host, rule.pattern, rule.match_type):
            continue

        logger.debug(f"{host} matched rule {rule.id} ({rule.match_type} {rule.pattern!r})")

        if rule.proxy_type == ProxyType.EXISTING:
            config = find_proxy(rule.proxy_id, known_configs)
            if config is not None and config.is_pac_script():
                return UrlTestResult(
                    matched=True,
                    rule=rule,
                    proxy_result=f"PAC Script: {config.name}",
                    is_pac_script=True
                )

        return UrlTestResult(
            matched=True,
            rule=rule,
            proxy_result=resolve_proxy_action(rule.proxy_type, rule.proxy_id,
                                              rule.inline_proxy, known_configs)
        )

    return UrlTestResult(matched=False, proxy_result=DIRECT)
