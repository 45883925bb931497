from pathlib import Path

import pytest
from pydantic import ValidationError

from services.edge.models.route_rule import (
    CachePolicy,
    HeaderForwardPolicy,
    RouteRule,
    RoutingConfig,
    TargetOrigin,
    ViewerProtocolPolicy,
)
from services.edge.services.route_matcher import RouteMatcher, order_rules


@pytest.fixture
def routes_yaml():
    return """
routes:
  - path_pattern: "*"
    target_origin: static
  - path_pattern: "/api/*"
    target_origin: api
    allowed_methods: ALLOW_ALL
    cache_policy: Disabled
    header_forward_policy: AllExceptHost
  - path_pattern: "/api/admin/*"
    target_origin: api
    allowed_methods: [get]
    cache_policy: Disabled
"""


def test_default_table_without_config_file(tmp_path):
    matcher = RouteMatcher(str(tmp_path / "missing.yml"))
    matcher.load_routing_config()

    patterns = [r.path_pattern for r in matcher.rules]
    assert patterns == ["/api/*", "*"]

    api = matcher.match_route("/api/ping")
    assert api.target_origin == TargetOrigin.API
    assert api.cache_policy == CachePolicy.DISABLED
    assert api.header_forward_policy == HeaderForwardPolicy.ALL_EXCEPT_HOST
    assert {"GET", "POST", "DELETE", "OPTIONS"} <= api.allowed_methods

    static = matcher.match_route("/index.html")
    assert static.target_origin == TargetOrigin.STATIC
    assert static.cache_policy == CachePolicy.OPTIMIZED_PUBLIC_CACHE
    assert static.allowed_methods == frozenset({"GET", "HEAD", "OPTIONS"})
    assert [e.http_status for e in matcher.error_responses] == [403, 404]


def test_yaml_rules_ordered_most_specific_first(tmp_path, routes_yaml):
    path = tmp_path / "routing.yml"
    path.write_text(routes_yaml, encoding="utf-8")

    matcher = RouteMatcher(str(path))
    matcher.load_routing_config()

    assert [r.path_pattern for r in matcher.rules] == ["/api/admin/*", "/api/*", "*"]
    assert matcher.match_route("/api/admin/users").allowed_methods == frozenset({"GET"})
    assert matcher.match_route("/api/ping").path_pattern == "/api/*"
    assert matcher.match_route("/apix").path_pattern == "*"


def test_bare_prefix_matches_glob():
    rule = RouteRule(path_pattern="/api/*", target_origin=TargetOrigin.API)
    assert rule.matches("/api")
    assert rule.matches("/api/")
    assert rule.matches("/api/a/b")
    assert not rule.matches("/apiary")


def test_catch_all_always_appended():
    rules = order_rules([RouteRule(path_pattern="/api/*", target_origin=TargetOrigin.API)])

    assert rules[-1].is_catch_all
    assert rules[-1].target_origin == TargetOrigin.STATIC


def test_catch_all_targeting_api_is_replaced():
    rules = order_rules([RouteRule(path_pattern="default", target_origin=TargetOrigin.API)])

    assert len(rules) == 1
    assert rules[0].target_origin == TargetOrigin.STATIC


def test_exact_pattern_outranks_glob_with_same_prefix():
    matcher = RouteMatcher.from_config(
        RoutingConfig(
            routes=[
                RouteRule(path_pattern="/docs/*", target_origin=TargetOrigin.STATIC),
                RouteRule(path_pattern="/docs/", target_origin=TargetOrigin.API),
            ]
        )
    )
    assert matcher.match_route("/docs/").target_origin == TargetOrigin.API
    assert matcher.match_route("/docs/intro").target_origin == TargetOrigin.STATIC


def test_invalid_yaml_keeps_defaults(tmp_path):
    path = tmp_path / "routing.yml"
    path.write_text("routes: [\n  - path_pattern: /broken\n", encoding="utf-8")

    matcher = RouteMatcher(str(path))
    rules = matcher.load_routing_config()

    assert [r.path_pattern for r in rules] == ["/api/*", "*"]


def test_invalid_rule_keeps_defaults(tmp_path):
    path = tmp_path / "routing.yml"
    path.write_text(
        "routes:\n  - path_pattern: /a/*/b\n    target_origin: static\n", encoding="utf-8"
    )

    matcher = RouteMatcher(str(path))
    rules = matcher.load_routing_config()

    assert [r.path_pattern for r in rules] == ["/api/*", "*"]


def test_wildcard_in_middle_rejected():
    with pytest.raises(ValidationError):
        RouteRule(path_pattern="/a/*/b", target_origin=TargetOrigin.STATIC)


def test_explicit_empty_error_responses_disable_fallback(tmp_path):
    path = tmp_path / "routing.yml"
    path.write_text("error_responses: []\n", encoding="utf-8")

    matcher = RouteMatcher(str(path))
    matcher.load_routing_config()

    assert matcher.error_responses == []
    assert [r.path_pattern for r in matcher.rules] == ["/api/*", "*"]


def test_shipped_routing_file_redirects_plain_http():
    shipped = Path(__file__).resolve().parents[3] / "config" / "routing.yml"

    matcher = RouteMatcher(str(shipped))
    matcher.load_routing_config()

    assert [r.path_pattern for r in matcher.rules] == ["/api/*", "*"]
    assert {r.viewer_protocol_policy for r in matcher.rules} == {
        ViewerProtocolPolicy.REDIRECT_TO_HTTPS
    }
    assert [e.http_status for e in matcher.error_responses] == [403, 404]
