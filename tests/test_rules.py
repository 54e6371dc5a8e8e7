"""
Tests for throttle rules and the rule registry.
"""
import threading

import pytest

from zoom_dispatch.exceptions import RuleError
from zoom_dispatch.rules import RuleRegistry, compile_template


@pytest.mark.unit
class TestCompileTemplate:
    """Test path template compilation."""

    def test_colon_placeholder_matches_one_segment(self):
        matcher = compile_template("/meetings/:meetingId")

        assert matcher.matches("/meetings/123")
        assert matcher.matches("/meetings/%252F123")
        assert not matcher.matches("/meetings")
        assert not matcher.matches("/meetings/123/recordings")

    def test_brace_placeholder_is_equivalent(self):
        colon = compile_template("/users/:userId/meetings")
        brace = compile_template("/users/{userId}/meetings")

        assert colon.shape == brace.shape == "/users/*/meetings"
        assert brace.matches("/users/me/meetings")

    def test_literal_segments_are_escaped(self):
        matcher = compile_template("/report.daily/:id")

        assert matcher.matches("/report.daily/1")
        assert not matcher.matches("/reportxdaily/1")

    def test_query_string_and_trailing_slash_ignored(self):
        matcher = compile_template("/meetings/:meetingId")

        assert matcher.matches("/meetings/123?occurrence_id=5")
        assert matcher.matches("/meetings/123/")

    def test_root_template(self):
        matcher = compile_template("/")

        assert matcher.matches("/")
        assert not matcher.matches("/users")

    @pytest.mark.parametrize("template", [
        "/meetings/{meetingId",
        "/meetings/meetingId}",
        "/meetings/{}",
        "/meetings/:",
        "/meetings/:1abc",
        "/meetings//recordings",
        "meetings/:id",
        "",
        "/meetings?x=1",
        "/files/*",
        "/files/report*",
    ])
    def test_malformed_templates_fail_fast(self, template):
        with pytest.raises(RuleError):
            compile_template(template)


@pytest.mark.unit
class TestRuleRegistry:
    """Test rule registration and resolution."""

    @pytest.mark.parametrize("template,path", [
        ("/meetings/:meetingId", "/meetings/123"),
        ("/users/{userId}/meetings", "/users/me@example.com/meetings"),
        ("/past_meetings/:meetingId/instances", "/past_meetings/abc/instances"),
        ("/meetings/:meetingId/recordings", "/meetings/%252F12345/recordings"),
        ("/users", "/users"),
    ])
    def test_resolve_round_trips_template(self, template, path):
        registry = RuleRegistry()
        rule = registry.add_rule("GET", template, 1000, 5)

        assert registry.resolve("GET", path) is rule

    def test_no_rule_returns_none(self):
        registry = RuleRegistry()
        registry.add_rule("GET", "/meetings/:id", 1000, 5)

        assert registry.resolve("GET", "/users/me") is None

    def test_method_must_match(self):
        registry = RuleRegistry()
        registry.add_rule("GET", "/meetings/:id", 1000, 5)

        assert registry.resolve("DELETE", "/meetings/1") is None
        assert registry.resolve("get", "/meetings/1") is not None

    def test_most_specific_rule_wins(self):
        registry = RuleRegistry()
        generic = registry.add_rule("GET", "/users/:userId/:resource", 1000, 5)
        specific = registry.add_rule("GET", "/users/:userId/recordings", 1000, 5)
        literal = registry.add_rule("GET", "/users/me/recordings", 1000, 5)

        assert registry.resolve("GET", "/users/me/recordings") is literal
        assert registry.resolve("GET", "/users/abc/recordings") is specific
        assert registry.resolve("GET", "/users/abc/meetings") is generic

    def test_earlier_literal_breaks_ties(self):
        registry = RuleRegistry()
        registry.add_rule("GET", "/a/:x/c", 1000, 5)
        early = registry.add_rule("GET", "/a/b/:y", 1000, 5)

        assert registry.resolve("GET", "/a/b/c") is early

    def test_same_shape_overwrites(self):
        registry = RuleRegistry()
        registry.add_rule("GET", "/meetings/:meetingId", 1000, 5)
        second = registry.add_rule("GET", "/meetings/{id}", 2000, 1)

        assert len(registry) == 1
        assert registry.resolve("GET", "/meetings/9") is second
        assert second.max_requests_per_window == 1

    def test_literal_star_cannot_replace_placeholder_rule(self):
        registry = RuleRegistry()
        rule = registry.add_rule("GET", "/files/:fileId", 1000, 5)

        with pytest.raises(RuleError):
            registry.add_rule("GET", "/files/*", 1000, 1)

        assert len(registry) == 1
        assert registry.resolve("GET", "/files/abc") is rule

    def test_different_methods_are_distinct_rules(self):
        registry = RuleRegistry()
        registry.add_rule("GET", "/meetings/:id", 1000, 5)
        registry.add_rule("PATCH", "/meetings/:id", 1000, 5)

        assert len(registry) == 2

    @pytest.mark.parametrize("window,limit", [(0, 1), (1000, 0), (-5, 1), (1000, True), (1.5, 2)])
    def test_invalid_limits_rejected(self, window, limit):
        registry = RuleRegistry()
        with pytest.raises(RuleError):
            registry.add_rule("GET", "/meetings/:id", window, limit)
        assert len(registry) == 0

    def test_unknown_method_rejected(self):
        with pytest.raises(RuleError):
            RuleRegistry().add_rule("FETCH", "/meetings/:id", 1000, 1)

    def test_resolve_during_concurrent_registration(self):
        registry = RuleRegistry()
        registry.add_rule("GET", "/meetings/:id", 1000, 5)
        errors = []

        def register():
            for i in range(200):
                registry.add_rule("GET", f"/resource{i}/:id", 1000, 5)

        def resolve():
            for _ in range(200):
                if registry.resolve("GET", "/meetings/1") is None:
                    errors.append("lost rule")

        threads = [threading.Thread(target=register), threading.Thread(target=resolve)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len(registry) == 201
