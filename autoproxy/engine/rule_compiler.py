"""
Compiler from an Auto-Proxy configuration to PAC script source.

The generated script has the shape::

    <embedded functions, blank-line separated>

    function FindProxyForURL(url, host) {
      if (<condition>) return "<action>";
      ...
      return "<fallback>";
    }

Rules are emitted in ascending priority order. Nothing here raises for bad
rule data: unresolvable references compile to DIRECT and malformed CIDR
patterns compile to a ``false`` guard.
"""

import logging
from typing import List, Optional, Sequence

from ..config import EngineSettings
from ..models import AutoProxyConfiguration, AutoProxyRule, ProxyConfiguration, ProxyType
from .pac_embedding import EmbeddedPACScript, collect_embedded_scripts, find_embedded
from .pattern_matcher import to_code_condition
from .proxy_formatter import resolve_proxy_action

logger = logging.getLogger(__name__)


def sort_enabled_rules(rules: Sequence[AutoProxyRule]) -> List[AutoProxyRule]:
    """Drop disabled rules and order the rest by priority, keeping input order on ties."""
    return sorted((rule for rule in rules if rule.enabled), key=lambda rule: rule.priority)


def _action_expression(proxy_type: str,
                       proxy_id: Optional[str],
                       inline_proxy,
                       known_configs: Sequence[ProxyConfiguration],
                       embedded: Sequence[EmbeddedPACScript]) -> str:
    if proxy_type == ProxyType.EXISTING:
        script = find_embedded(embedded, proxy_id)
        if script is not None:
            return f"{script.function_name}(url, host)"
    return f'"{resolve_proxy_action(proxy_type, proxy_id, inline_proxy, known_configs)}"'


def generate_rule_condition(rule: AutoProxyRule,
                            known_configs: Sequence[ProxyConfiguration],
                            embedded: Sequence[EmbeddedPACScript]) -> Optional[str]:
    """
    Generate the conditional return statement for one rule.

    Returns:
        ``if (<condition>) return <action>;`` or None when the rule's match
        type has no code form.
    """
    condition = to_code_condition(rule.pattern, rule.match_type)
    if condition is None:
        logger.debug(f"Skipping rule {rule.id}: unknown match type {rule.match_type!r}")
        return None

    action = _action_expression(rule.proxy_type, rule.proxy_id, rule.inline_proxy,
                                known_configs, embedded)
    return f"if ({condition}) return {action};"


def generate_fallback_statement(auto_proxy: AutoProxyConfiguration,
                                known_configs: Sequence[ProxyConfiguration],
                                embedded: Sequence[EmbeddedPACScript]) -> str:
    """Generate the unconditional return applied when no rule matches."""
    action = _action_expression(auto_proxy.fallback_type, auto_proxy.fallback_proxy_id,
                                auto_proxy.fallback_inline_proxy, known_configs, embedded)
    return f"return {action};"


def generate(auto_proxy: AutoProxyConfiguration,
             known_configs: Sequence[ProxyConfiguration],
             settings: Optional[EngineSettings] = None) -> str:
    """
    Compile an Auto-Proxy configuration into PAC script source.

    Args:
        auto_proxy: Rules and fallback policy
        known_configs: All stored configurations, used to resolve references
        settings: Engine settings; defaults are used when omitted

    Returns:
        PAC script text defining ``FindProxyForURL(url, host)``.
    """
    settings = settings or EngineSettings()
    indent = settings.indent

    rules = sort_enabled_rules(auto_proxy.rules)
    embedded = collect_embedded_scripts(rules, auto_proxy, known_configs)

    conditions = []
    for rule in rules:
        condition = generate_rule_condition(rule, known_configs, embedded)
        if condition is not None:
            conditions.append(condition)
    fallback = generate_fallback_statement(auto_proxy, known_configs, embedded)

    logger.debug(f"Compiled {len(conditions)} of {len(auto_proxy.rules)} rules "
                 f"with {len(embedded)} embedded PAC script(s)")

    embedded_functions = '\n\n'.join(script.script_body for script in embedded)
    lines = ["function FindProxyForURL(url, host) {"]
    lines.extend(f"{indent}{condition}" for condition in conditions)
    lines.append(f"{indent}{fallback}")
    lines.append("}")

    prefix = f"{embedded_functions}\n\n" if embedded_functions else ""
    return prefix + '\n'.join(lines)
