"""
Auto-Proxy rule engine.

Compiles rule sets into PAC scripts and evaluates them directly for
"test this URL" previews. Everything here is a pure function of its inputs.
"""

from .address_utils import prefix_to_mask, mask_to_prefix, match_cidr
from .pattern_matcher import matches, to_code_condition, validate_pattern
from .proxy_formatter import (
    format_proxy_server, resolve_proxy_action, parse_proxy_string, split_proxy_chain
)
from .pac_embedding import EmbeddedPACScript, collect_embedded_scripts, extract_function_body
from .rule_compiler import generate
from .rule_evaluator import test_url, extract_host
from .references import (
    AutoProxyReference, find_auto_proxy_references, is_orphaned_rule,
    is_proxy_referenced, remove_proxy_references, find_configs_to_regenerate
)

__all__ = [
    'prefix_to_mask',
    'mask_to_prefix',
    'match_cidr',
    'matches',
    'to_code_condition',
    'validate_pattern',
    'format_proxy_server',
    'resolve_proxy_action',
    'parse_proxy_string',
    'split_proxy_chain',
    'EmbeddedPACScript',
    'collect_embedded_scripts',
    'extract_function_body',
    'generate',
    'test_url',
    'extract_host',
    'AutoProxyReference',
    'find_auto_proxy_references',
    'is_orphaned_rule',
    'is_proxy_referenced',
    'remove_proxy_references',
    'find_configs_to_regenerate'
]
