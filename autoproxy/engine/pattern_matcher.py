"""
Pattern grammars for Auto-Proxy rules.

Every grammar has two forms that must agree: ``matches`` evaluates a host
directly (used by the rule evaluator) and ``to_code_condition`` emits the
equivalent PAC/JavaScript boolean expression (used by the rule compiler).

Known gap: the wildcard runtime form is a case-insensitive regular
expression, while the generated form calls the PAC engine's ``shExpMatch``
whose case handling is defined by the browser.
"""

import logging
import re
from typing import Dict, Optional

from ..models import MatchType, PatternValidationResult
from .address_utils import match_cidr, parse_ipv4_octets, prefix_to_mask, split_cidr

logger = logging.getLogger(__name__)

# Regex metacharacters escaped in wildcard patterns; * and ? are translated instead
_WILDCARD_SPECIALS = re.compile(r'[.+^${}()|\[\]\\]')

_WILDCARD_CHARS = re.compile(r'[\w.*?-]+', re.ASCII)
_HOSTNAME_CHARS = re.compile(r'[\w.-]+', re.ASCII)
_CIDR_FORMAT = re.compile(r'(\d{1,3}\.){3}\d{1,3}/\d{1,2}', re.ASCII)


def escape_shell_expression(pattern: str) -> str:
    """Shell expressions are handed to shExpMatch as written."""
    return pattern


def escape_regex_literal(pattern: str) -> str:
    """Double backslashes so a regex survives inside a JavaScript string literal."""
    return pattern.replace('\\', '\\\\')


def wildcard_to_regex(pattern: str) -> str:
    """Translate a shell-style wildcard into an anchored regular expression."""
    escaped = _WILDCARD_SPECIALS.sub(lambda m: '\\' + m.group(0), pattern)
    return '^' + escaped.replace('*', '.*').replace('?', '.') + '$'


class PatternMatcher:
    """Base class for one pattern grammar."""

    match_type = ""

    def matches(self, host: str, pattern: str) -> bool:
        raise NotImplementedError

    def to_code_condition(self, pattern: str) -> str:
        raise NotImplementedError

    def validate(self, pattern: str) -> PatternValidationResult:
        raise NotImplementedError


class WildcardMatcher(PatternMatcher):
    """``*`` matches any run of characters, ``?`` a single character."""

    match_type = MatchType.WILDCARD

    def matches(self, host: str, pattern: str) -> bool:
        try:
            return re.fullmatch(wildcard_to_regex(pattern), host, re.IGNORECASE) is not None
        except re.error:
            return False

    def to_code_condition(self, pattern: str) -> str:
        return f'shExpMatch(host, "{escape_shell_expression(pattern)}")'

    def validate(self, pattern: str) -> PatternValidationResult:
        if not _WILDCARD_CHARS.fullmatch(pattern):
            return PatternValidationResult(False, "Invalid characters in wildcard pattern")
        return PatternValidationResult(True)


class ExactMatcher(PatternMatcher):
    """Case-sensitive hostname equality."""

    match_type = MatchType.EXACT

    def matches(self, host: str, pattern: str) -> bool:
        return host == pattern

    def to_code_condition(self, pattern: str) -> str:
        return f'host === "{pattern}"'

    def validate(self, pattern: str) -> PatternValidationResult:
        if not _HOSTNAME_CHARS.fullmatch(pattern):
            return PatternValidationResult(False, "Invalid hostname format")
        return PatternValidationResult(True)


class RegexMatcher(PatternMatcher):
    """Unanchored regular expression search, like ``RegExp.test``."""

    match_type = MatchType.REGEX

    def matches(self, host: str, pattern: str) -> bool:
        try:
            return re.search(pattern, host) is not None
        except re.error as e:
            logger.debug(f"Ignoring invalid regex rule {pattern!r}: {e}")
            return False

    def to_code_condition(self, pattern: str) -> str:
        return f'new RegExp("{escape_regex_literal(pattern)}").test(host)'

    def validate(self, pattern: str) -> PatternValidationResult:
        try:
            re.compile(pattern)
        except re.error:
            return PatternValidationResult(False, "Invalid regular expression")
        return PatternValidationResult(True)


class CIDRMatcher(PatternMatcher):
    """IPv4 network membership for literal address hosts."""

    match_type = MatchType.CIDR

    def matches(self, host: str, pattern: str) -> bool:
        return match_cidr(host, pattern)

    def to_code_condition(self, pattern: str) -> str:
        parts = split_cidr(pattern)
        if parts is None:
            # Never fires, but keeps the rule's line in the script
            return 'false'
        network, prefix = parts
        return f'isInNet(host, "{network}", "{prefix_to_mask(prefix)}")'

    def validate(self, pattern: str) -> PatternValidationResult:
        if not _CIDR_FORMAT.fullmatch(pattern):
            return PatternValidationResult(False, "Invalid CIDR notation (e.g., 192.168.0.0/16)")

        network, prefix = pattern.split('/')
        if not 0 <= int(prefix) <= 32:
            return PatternValidationResult(False, "CIDR prefix must be between 0 and 32")

        octets = parse_ipv4_octets(network)
        if octets is None or any(octet < 0 or octet > 255 for octet in octets):
            return PatternValidationResult(False, "Invalid IP address octets")

        return PatternValidationResult(True)


MATCHERS: Dict[str, PatternMatcher] = {
    matcher.match_type: matcher
    for matcher in (WildcardMatcher(), ExactMatcher(), RegexMatcher(), CIDRMatcher())
}


def get_matcher(match_type: str) -> Optional[PatternMatcher]:
    """Look up the matcher for a match type."""
    return MATCHERS.get(match_type)


def matches(host: str, pattern: str, match_type: str) -> bool:
    """
    Check if a host matches a pattern.

    Args:
        host: Hostname or literal IP address
        pattern: Pattern text
        match_type: One of the MatchType values

    Returns:
        True on match; unknown match types never match.
    """
    matcher = get_matcher(match_type)
    if matcher is None:
        return False
    return matcher.matches(host, pattern)


def to_code_condition(pattern: str, match_type: str) -> Optional[str]:
    """
    Build the PAC/JavaScript condition for a pattern.

    Returns:
        Expression text, or None for unknown match types.
    """
    matcher = get_matcher(match_type)
    if matcher is None:
        return None
    return matcher.to_code_condition(pattern)


def validate_pattern(pattern: str, match_type: str) -> PatternValidationResult:
    """
    Check a pattern against the grammar of its match type.

    Args:
        pattern: Pattern text as entered
        match_type: One of the MatchType values

    Returns:
        PatternValidationResult; never raises.
    """
    if not pattern or not pattern.strip():
        return PatternValidationResult(False, "Pattern cannot be empty")

    matcher = get_matcher(match_type)
    if matcher is None:
        return PatternValidationResult(False, "Unknown pattern type")
    return matcher.validate(pattern)
