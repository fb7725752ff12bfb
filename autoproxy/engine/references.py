"""
Cross-references between Auto-Proxy rule sets and stored configurations.

Used by the host when a configuration is edited or deleted: to warn about
affected rule sets, to find scripts that must be regenerated, and to drop
references to a deleted configuration.
"""

import logging
from dataclasses import dataclass, replace
from typing import List, Sequence

from ..models import AutoProxyConfiguration, AutoProxyRule, ProxyConfiguration, ProxyType
from .proxy_formatter import find_proxy

logger = logging.getLogger(__name__)


@dataclass
class AutoProxyReference:
    """An Auto-Proxy configuration that routes to a given proxy."""
    config_name: str
    rule_count: int


def is_orphaned_rule(rule: AutoProxyRule, known_configs: Sequence[ProxyConfiguration]) -> bool:
    """Check if a rule routes to a configuration that no longer exists."""
    if rule.proxy_type != ProxyType.EXISTING or not rule.proxy_id:
        return False
    return find_proxy(rule.proxy_id, known_configs) is None


def count_references(auto_proxy: AutoProxyConfiguration, proxy_id: str) -> int:
    """Count rules plus fallback routing to a configuration."""
    count = sum(1 for rule in auto_proxy.rules if rule.references(proxy_id))
    if auto_proxy.fallback_references(proxy_id):
        count += 1
    return count


def find_auto_proxy_references(proxy_id: str,
                               all_configs: Sequence[ProxyConfiguration]) -> List[AutoProxyReference]:
    """
    Find Auto-Proxy configurations affected by a change to a proxy.

    Args:
        proxy_id: Configuration being edited or deleted
        all_configs: All stored configurations

    Returns:
        One entry per referencing Auto-Proxy configuration, in list order.
    """
    references = []
    for config in all_configs:
        if config.auto_proxy is None:
            continue
        count = count_references(config.auto_proxy, proxy_id)
        if count > 0:
            references.append(AutoProxyReference(config_name=config.name, rule_count=count))
    return references


def is_proxy_referenced(proxy_id: str, all_configs: Sequence[ProxyConfiguration]) -> bool:
    """Check if any Auto-Proxy configuration routes to a proxy."""
    return len(find_auto_proxy_references(proxy_id, all_configs)) > 0


def find_configs_to_regenerate(proxy_id: str,
                               all_configs: Sequence[ProxyConfiguration]) -> List[ProxyConfiguration]:
    """Auto-Proxy configurations whose compiled script depends on a proxy."""
    return [
        config for config in all_configs
        if config.auto_proxy is not None and count_references(config.auto_proxy, proxy_id) > 0
    ]


def remove_proxy_references(auto_proxy: AutoProxyConfiguration,
                            proxy_id: str) -> AutoProxyConfiguration:
    """
    Return a copy of a rule set without references to a deleted proxy.

    Referencing rules are removed and the remaining rules renumbered
    0..n-1 in their current order. A fallback routing to the proxy is
    reset to DIRECT. The input is not modified.
    """
    kept = [rule for rule in auto_proxy.rules if not rule.references(proxy_id)]
    rules = [replace(rule, priority=index) for index, rule in enumerate(kept)]

    removed = len(auto_proxy.rules) - len(kept)
    if removed:
        logger.info(f"Removed {removed} rule(s) referencing deleted proxy {proxy_id}")

    if auto_proxy.fallback_references(proxy_id):
        logger.info(f"Fallback referenced deleted proxy {proxy_id}, resetting to direct")
        return replace(auto_proxy, rules=rules, fallback_type=ProxyType.DIRECT, fallback_proxy_id=None)

    return replace(auto_proxy, rules=rules)
