"""
Tests for extracting and embedding stored PAC scripts.
"""

from autoproxy.engine.pac_embedding import (
    collect_embedded_scripts, create_embedded_script, extract_function_body, find_embedded
)
from autoproxy.models import AutoProxyConfiguration, ProxyType

from .helpers import SIMPLE_PAC, make_rule, manual_proxy, pac_proxy


class TestExtractFunctionBody:
    """Test locating the FindProxyForURL body."""

    def test_single_line_body(self):
        assert extract_function_body(SIMPLE_PAC) == '  return "PROXY pac-proxy:8080";'

    def test_multi_line_body_is_reindented(self):
        source = (
            "function FindProxyForURL(url, host) {\n"
            "  if (isPlainHostName(host)) {\n"
            "    return \"DIRECT\";\n"
            "  }\n"
            "  return \"PROXY p:1\";\n"
            "}\n"
        )
        assert extract_function_body(source) == (
            "  if (isPlainHostName(host)) {\n"
            "      return \"DIRECT\";\n"
            "    }\n"
            "    return \"PROXY p:1\";"
        )

    def test_declaration_variants(self):
        assert extract_function_body('function  FindProxyForURL ( u , h ){return "DIRECT";}') == '  return "DIRECT";'
        assert extract_function_body('function findproxyforurl(url, host) { return "DIRECT"; }') == '  return "DIRECT";'

    def test_helpers_around_the_function(self):
        source = (
            "var proxy = \"PROXY p:1\";\n"
            "function helper() { return proxy; }\n"
            "function FindProxyForURL(url, host) { return helper(); }\n"
            "function after() { return 1; }\n"
        )
        assert extract_function_body(source) == "  return helper();"

    def test_missing_declaration(self):
        assert extract_function_body('function other(url, host) { return "DIRECT"; }') is None
        assert extract_function_body("") is None

    def test_unbalanced_braces(self):
        assert extract_function_body('function FindProxyForURL(url, host) { if (x) { return "DIRECT";') is None

    def test_empty_body(self):
        assert extract_function_body("function FindProxyForURL(url, host) {   }") is None

    def test_braces_in_strings_are_counted(self):
        # A closing brace inside a string literal ends the body early
        source = 'function FindProxyForURL(url, host) { var s = "}"; return "DIRECT"; }'
        assert extract_function_body(source) == '  var s = "'


class TestCreateEmbeddedScript:

    def test_wrapped_function(self):
        script = create_embedded_script(pac_proxy("p2", "Corp PAC", SIMPLE_PAC), 3)
        assert script.proxy_id == "p2"
        assert script.function_name == "_embeddedPAC_3"
        assert script.script_body == (
            "// Embedded PAC script: Corp PAC\n"
            "function _embeddedPAC_3(url, host) {\n"
            '  return "PROXY pac-proxy:8080";\n'
            "}"
        )

    def test_unextractable_script(self):
        assert create_embedded_script(pac_proxy("p2", "Broken", "return 1;"), 0) is None

    def test_configuration_without_script(self):
        assert create_embedded_script(manual_proxy("p1", "proxy.corp"), 0) is None


class TestCollectEmbeddedScripts:
    """Test discovery order and de-duplication."""

    def setup_method(self):
        """Set up test fixtures."""
        self.pac_a = pac_proxy("pa", "PAC A", SIMPLE_PAC)
        self.pac_b = pac_proxy("pb", "PAC B")
        self.broken = pac_proxy("pbad", "Broken", "var x = 1;")
        self.manual = manual_proxy("pm", "proxy.corp")
        self.known = [self.pac_a, self.pac_b, self.broken, self.manual]

    def test_each_configuration_embedded_once(self):
        rules = [
            make_rule("r1", "a.com", proxy_type=ProxyType.EXISTING, proxy_id="pa"),
            make_rule("r2", "b.com", proxy_type=ProxyType.EXISTING, proxy_id="pa"),
            make_rule("r3", "c.com", proxy_type=ProxyType.EXISTING, proxy_id="pb"),
        ]
        embedded = collect_embedded_scripts(rules, AutoProxyConfiguration(rules=rules), self.known)
        assert [(e.proxy_id, e.function_name) for e in embedded] == [
            ("pa", "_embeddedPAC_0"),
            ("pb", "_embeddedPAC_1"),
        ]

    def test_fallback_is_scanned_after_rules(self):
        rules = [make_rule("r1", "a.com", proxy_type=ProxyType.EXISTING, proxy_id="pb")]
        auto_proxy = AutoProxyConfiguration(rules=rules, fallback_type=ProxyType.EXISTING,
                                            fallback_proxy_id="pa")
        embedded = collect_embedded_scripts(rules, auto_proxy, self.known)
        assert [(e.proxy_id, e.function_name) for e in embedded] == [
            ("pb", "_embeddedPAC_0"),
            ("pa", "_embeddedPAC_1"),
        ]

    def test_fallback_reuses_rule_embedding(self):
        rules = [make_rule("r1", "a.com", proxy_type=ProxyType.EXISTING, proxy_id="pa")]
        auto_proxy = AutoProxyConfiguration(rules=rules, fallback_type=ProxyType.EXISTING,
                                            fallback_proxy_id="pa")
        embedded = collect_embedded_scripts(rules, auto_proxy, self.known)
        assert len(embedded) == 1

    def test_skipped_scripts_do_not_consume_an_index(self):
        rules = [
            make_rule("r1", "a.com", proxy_type=ProxyType.EXISTING, proxy_id="pbad"),
            make_rule("r2", "b.com", proxy_type=ProxyType.EXISTING, proxy_id="pm"),
            make_rule("r3", "c.com", proxy_type=ProxyType.EXISTING, proxy_id="missing"),
            make_rule("r4", "d.com", proxy_type=ProxyType.EXISTING, proxy_id="pb"),
        ]
        embedded = collect_embedded_scripts(rules, AutoProxyConfiguration(rules=rules), self.known)
        assert [(e.proxy_id, e.function_name) for e in embedded] == [("pb", "_embeddedPAC_0")]

    def test_non_existing_actions_are_ignored(self):
        rules = [
            make_rule("r1", "a.com", proxy_type=ProxyType.DIRECT, proxy_id="pa"),
            make_rule("r2", "b.com", proxy_type=ProxyType.INLINE, proxy_id="pb"),
        ]
        assert collect_embedded_scripts(rules, AutoProxyConfiguration(rules=rules), self.known) == []

    def test_find_embedded(self):
        rules = [make_rule("r1", "a.com", proxy_type=ProxyType.EXISTING, proxy_id="pa")]
        embedded = collect_embedded_scripts(rules, AutoProxyConfiguration(rules=rules), self.known)
        assert find_embedded(embedded, "pa") is embedded[0]
        assert find_embedded(embedded, "pb") is None
        assert find_embedded(embedded, None) is None
