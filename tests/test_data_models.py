"""
Tests for data models and their dictionary form.
"""

from autoproxy.models import (
    AutoProxyConfiguration, AutoProxyRule, MatchType, PACAnalysisResult,
    PACScriptSource, PatternValidationResult, ProxyConfiguration, ProxyMode,
    ProxyRules, ProxyServer, ProxyType, SecurityIssue, SecuritySeverity
)

from .helpers import make_rule, pac_proxy


class TestProxyServer:

    def test_address(self):
        assert ProxyServer("http", "proxy.corp", "3128").address == "proxy.corp:3128"

    def test_port_is_kept_as_text(self):
        assert ProxyServer.from_dict({'scheme': 'socks5', 'host': 'h', 'port': 1080}).port == "1080"
        assert ProxyServer.from_dict({'host': 'h'}) == ProxyServer("http", "h", "")


class TestAutoProxyRule:
    """Test rule serialization and helpers."""

    def test_to_dict_uses_host_key_names(self):
        rule = make_rule("r1", "*.corp", priority=2, proxy_type=ProxyType.EXISTING, proxy_id="p1")
        assert rule.to_dict() == {
            'id': 'r1',
            'enabled': True,
            'priority': 2,
            'matchType': 'wildcard',
            'pattern': '*.corp',
            'proxyType': 'existing',
            'proxyId': 'p1'
        }

    def test_from_dict(self):
        rule = AutoProxyRule.from_dict({
            'id': 'r2',
            'enabled': False,
            'priority': 4,
            'matchType': 'cidr',
            'pattern': '10.0.0.0/8',
            'proxyType': 'inline',
            'inlineProxy': {'scheme': 'https', 'host': 'gw', 'port': '443'}
        })
        assert rule == AutoProxyRule(id="r2", pattern="10.0.0.0/8", enabled=False, priority=4,
                                     match_type=MatchType.CIDR, proxy_type=ProxyType.INLINE,
                                     inline_proxy=ProxyServer("https", "gw", "443"))

    def test_dict_round_trip(self):
        rule = make_rule("r3", r"^ads\.", match_type=MatchType.REGEX, proxy_type=ProxyType.INLINE,
                         inline_proxy=ProxyServer("socks5", "127.0.0.1", "9050"))
        assert AutoProxyRule.from_dict(rule.to_dict()) == rule

    def test_references(self):
        assert make_rule("r1", "a", proxy_type=ProxyType.EXISTING, proxy_id="p1").references("p1")
        assert not make_rule("r1", "a", proxy_type=ProxyType.EXISTING, proxy_id="p1").references("p2")
        assert not make_rule("r1", "a", proxy_type=ProxyType.DIRECT, proxy_id="p1").references("p1")


class TestAutoProxyConfiguration:

    def setup_method(self):
        """Set up test fixtures."""
        self.auto_proxy = AutoProxyConfiguration(
            rules=[make_rule("r1", "*.corp"), make_rule("r2", "*.lan", priority=1)],
            fallback_type=ProxyType.INLINE,
            fallback_inline_proxy=ProxyServer("http", "proxy.corp", "8080")
        )

    def test_get_rule(self):
        assert self.auto_proxy.get_rule("r2").pattern == "*.lan"
        assert self.auto_proxy.get_rule("missing") is None

    def test_dict_round_trip(self):
        data = self.auto_proxy.to_dict()
        assert data['fallbackType'] == 'inline'
        assert data['fallbackInlineProxy'] == {'scheme': 'http', 'host': 'proxy.corp', 'port': '8080'}
        assert AutoProxyConfiguration.from_dict(data) == self.auto_proxy

    def test_defaults_from_empty_dict(self):
        assert AutoProxyConfiguration.from_dict({}) == AutoProxyConfiguration()

    def test_fallback_references(self):
        auto_proxy = AutoProxyConfiguration(fallback_type=ProxyType.EXISTING, fallback_proxy_id="p1")
        assert auto_proxy.fallback_references("p1")
        assert not auto_proxy.fallback_references("p2")
        assert not self.auto_proxy.fallback_references("p1")


class TestProxyConfiguration:
    """Test stored proxy configurations."""

    def test_is_pac_script(self):
        assert pac_proxy("p2", "Corp PAC").is_pac_script()
        assert not pac_proxy("p2", "Empty PAC", data="").is_pac_script()
        assert not pac_proxy("p2", "Remote PAC", data=None).is_pac_script()
        assert not ProxyConfiguration(name="Direct", mode=ProxyMode.DIRECT).is_pac_script()

    def test_is_auto_proxy(self):
        assert ProxyConfiguration(name="Auto", mode=ProxyMode.PAC_SCRIPT,
                                  auto_proxy=AutoProxyConfiguration()).is_auto_proxy()
        assert not pac_proxy("p2", "Corp PAC").is_auto_proxy()

    def test_dict_round_trip(self):
        config = ProxyConfiguration(
            id="p1",
            name="Office",
            color="#3b82f6",
            mode=ProxyMode.FIXED_SERVERS,
            rules=ProxyRules(
                single_proxy=ProxyServer("http", "proxy.corp", "3128"),
                proxy_for_ftp=ProxyServer("socks5", "ftp.corp", "1080"),
                bypass_list=["localhost", "*.lan"]
            ),
            is_active=True,
            quick_switch=True
        )
        data = config.to_dict()
        assert data['isActive'] is True
        assert data['rules']['singleProxy'] == {'scheme': 'http', 'host': 'proxy.corp', 'port': '3128'}
        assert data['rules']['bypassList'] == ["localhost", "*.lan"]
        assert 'proxyForHttp' not in data['rules']
        assert ProxyConfiguration.from_dict(data) == config

    def test_auto_proxy_round_trip(self):
        config = ProxyConfiguration(
            id="a1", name="Auto", color="#f59e0b", mode=ProxyMode.PAC_SCRIPT,
            pac_script=PACScriptSource(data="function FindProxyForURL(url, host) { return \"DIRECT\"; }"),
            auto_proxy=AutoProxyConfiguration(rules=[make_rule("r1", "*.corp")])
        )
        data = config.to_dict()
        assert data['autoProxy']['rules'][0]['matchType'] == 'wildcard'
        assert ProxyConfiguration.from_dict(data) == config

    def test_configured_slots(self):
        rules = ProxyRules(
            proxy_for_https=ProxyServer("https", "secure", "8443"),
            single_proxy=ProxyServer("http", "shared", "8080")
        )
        assert [label for label, _ in rules.configured_slots()] == ["Shared proxy", "HTTPS proxy"]
        assert rules.has_server()
        assert not ProxyRules().has_server()


class TestResults:

    def test_pattern_result_to_dict(self):
        assert PatternValidationResult(True).to_dict() == {'valid': True}
        assert PatternValidationResult(False, "Invalid hostname format").to_dict() == {
            'valid': False, 'error': "Invalid hostname format"
        }

    def test_analysis_issue_split(self):
        result = PACAnalysisResult(security=[
            SecurityIssue(SecuritySeverity.CRITICAL, "Uses eval()", 1),
            SecurityIssue(SecuritySeverity.WARNING, "Attempts to access window object", 2),
        ])
        assert [issue.line for issue in result.critical_issues()] == [1]
        assert [issue.line for issue in result.non_critical_issues()] == [2]
