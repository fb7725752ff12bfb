"""
Embedding of stored PAC scripts into a generated Auto-Proxy script.

A rule or fallback that routes to a pac_script configuration cannot be
expressed as a single return value. Instead the referenced script's
``FindProxyForURL`` body is copied into a uniquely named function that the
generated script calls.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..models import AutoProxyConfiguration, AutoProxyRule, ProxyConfiguration, ProxyType
from .proxy_formatter import find_proxy

logger = logging.getLogger(__name__)

FIND_PROXY_DECLARATION = re.compile(
    r'function\s+FindProxyForURL\s*\(\s*\w*\s*,?\s*\w*\s*\)\s*\{',
    re.IGNORECASE | re.ASCII
)

FUNCTION_PREFIX = "_embeddedPAC_"

BODY_INDENT = "  "


@dataclass
class EmbeddedPACScript:
    """
    A PAC script copied into the generated script as its own function.

    Attributes:
        proxy_id: Configuration the script came from
        function_name: Name unique within one generated script
        script_body: Complete function source, with its leading comment
    """
    proxy_id: str
    function_name: str
    script_body: str


def extract_function_body(source: str) -> Optional[str]:
    """
    Extract the body of the first ``FindProxyForURL`` function.

    Braces are counted from the declaration's opening brace until the
    depth returns to zero. Braces inside strings and comments are counted
    too.

    Args:
        source: PAC script source

    Returns:
        The stripped body with every line indented one level, or None when
        the declaration is missing, the braces never balance, or the body
        is empty.
    """
    match = FIND_PROXY_DECLARATION.search(source)
    if match is None:
        return None

    start = match.end()
    depth = 1
    end = start
    for index in range(start, len(source)):
        char = source[index]
        if char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
        end = index
        if depth == 0:
            break

    if depth != 0:
        return None

    body = source[start:end].strip()
    if not body:
        return None

    return '\n'.join(f"{BODY_INDENT}{line}" for line in body.split('\n'))


def create_embedded_script(config: ProxyConfiguration, index: int) -> Optional[EmbeddedPACScript]:
    """Wrap a configuration's PAC body as ``_embeddedPAC_<index>``; None if it can't be extracted."""
    if not config.id or config.pac_script is None or not config.pac_script.data:
        return None

    body = extract_function_body(config.pac_script.data)
    if body is None:
        logger.debug(f"No FindProxyForURL body found in PAC script '{config.name}', not embedding")
        return None

    function_name = f"{FUNCTION_PREFIX}{index}"
    script_body = (
        f"// Embedded PAC script: {config.name}\n"
        f"function {function_name}(url, host) {{\n"
        f"{body}\n"
        f"}}"
    )
    return EmbeddedPACScript(proxy_id=config.id, function_name=function_name, script_body=script_body)


def collect_embedded_scripts(rules: Sequence[AutoProxyRule],
                             auto_proxy: AutoProxyConfiguration,
                             known_configs: Sequence[ProxyConfiguration]) -> List[EmbeddedPACScript]:
    """
    Embed every PAC script referenced by the rules or the fallback.

    Rules are scanned in the order given, then the fallback. Each
    configuration is embedded at most once; indexes are assigned in
    discovery order and skipped scripts do not consume one.

    Args:
        rules: Rules to scan
        auto_proxy: Configuration providing the fallback policy
        known_configs: All stored configurations

    Returns:
        Embedded scripts in discovery order.
    """
    embedded: List[EmbeddedPACScript] = []
    seen = set()

    references = [rule.proxy_id for rule in rules if rule.proxy_type == ProxyType.EXISTING]
    if auto_proxy.fallback_type == ProxyType.EXISTING:
        references.append(auto_proxy.fallback_proxy_id)

    for proxy_id in references:
        if not proxy_id or proxy_id in seen:
            continue
        config = find_proxy(proxy_id, known_configs)
        if config is None or not config.is_pac_script():
            continue
        script = create_embedded_script(config, len(embedded))
        if script is not None:
            embedded.append(script)
            seen.add(proxy_id)

    return embedded


def find_embedded(embedded: Sequence[EmbeddedPACScript],
                  proxy_id: Optional[str]) -> Optional[EmbeddedPACScript]:
    """Find the embedded script generated for a configuration id."""
    if not proxy_id:
        return None
    for script in embedded:
        if script.proxy_id == proxy_id:
            return script
    return None
