#!/usr/bin/env python3
"""Tests for filter rule building."""

import pytest

from stagecopy.rules.filters import (
    FilterRule,
    FilterSign,
    build_rules,
    descend,
    join_path,
    render_rules,
)


def inc(pattern):
    return FilterRule(FilterSign.INCLUDE, pattern)


def exc(pattern):
    return FilterRule(FilterSign.EXCLUDE, pattern)


class TestFilterRule:
    """Tests for FilterRule."""

    def test_render_include(self):
        """Include renders with the anchored '+/' prefix."""
        assert inc("/src/app").render() == "+/ /src/app"

    def test_render_exclude(self):
        """Exclude renders with the anchored '-/' prefix."""
        assert exc("/src/**").render() == "-/ /src/**"

    def test_constructors(self):
        """include()/exclude() set the sign."""
        assert FilterRule.include("/a") == inc("/a")
        assert FilterRule.exclude("/a") == exc("/a")

    def test_frozen(self):
        """Rules are immutable."""
        rule = inc("/a")
        with pytest.raises(AttributeError):
            rule.pattern = "/b"

    def test_str(self):
        """str() is the rendered rule."""
        assert str(exc("/x")) == "-/ /x"


class TestJoinPath:
    """Tests for join_path."""

    def test_simple(self):
        assert join_path("/src", "app/config") == "/src/app/config"

    def test_collapses_separators(self):
        """Slashes at the junction are collapsed."""
        assert join_path("/src/", "/app") == "/src/app"

    def test_dot_and_empty_address_base(self):
        assert join_path("/src", ".") == "/src"
        assert join_path("/src", "") == "/src"
        assert join_path("/src", "./app/./x") == "/src/app/x"

    def test_root_base(self):
        assert join_path("/", "etc") == "/etc"
        assert join_path("/", "") == "/"

    def test_relative_base(self):
        assert join_path("src", "a") == "src/a"

    def test_glob_kept(self):
        assert join_path("/src", "*.log") == "/src/*.log"
        assert join_path("/src/app", "**") == "/src/app/**"

    def test_trailing_slash_kept(self):
        """A trailing slash restricts an rsync pattern to directories."""
        assert join_path("/src", "cache/") == "/src/cache/"
        assert join_path("/", "etc/") == "/etc/"
        assert join_path("/src/app/", "**") == "/src/app/**"

    def test_trailing_slash_on_base_only(self):
        assert join_path("/src", "./") == "/src"
        assert join_path("/src/", "app") == "/src/app"


class TestDescend:
    """Tests for descend."""

    def test_nested_path(self):
        """Ancestors run from base down, excluding the target."""
        assert descend("/src", "app/config") == ["/src", "/src/app"]

    def test_single_segment(self):
        assert descend("/src", "app") == ["/src"]

    def test_base_itself(self):
        """A path addressing base has no ancestors."""
        assert descend("/src", ".") == []
        assert descend("/src", "") == []


class TestBuildRules:
    """Tests for build_rules."""

    def test_include_single_path(self):
        """Include chain for a nested path ends with the catch-all."""
        rules = build_rules("/src", ["app/config"], [])

        assert rules == (
            inc("/src"),
            inc("/src/app"),
            inc("/src/app/config"),
            inc("/src/app/config/**"),
            exc("/src/**"),
        )

    def test_exclude_precedes_include(self):
        """Excludes come first even when inside an included path."""
        rules = build_rules("/src", ["a/b"], ["a/b/secret"])

        assert rules[0] == exc("/src/a/b/secret")
        assert rules[1:] == (
            inc("/src"),
            inc("/src/a"),
            inc("/src/a/b"),
            inc("/src/a/b/**"),
            exc("/src/**"),
        )

    def test_exclude_only(self):
        """Without includes only the excludes are emitted, in order."""
        rules = build_rules("/src", [], ["tmp", "*.log"])

        assert rules == (exc("/src/tmp"), exc("/src/*.log"))

    def test_empty(self):
        """No includes and no excludes copies everything."""
        assert build_rules("/src", [], []) == ()

    def test_include_base_itself(self):
        """'.' as include path yields no ancestors."""
        assert build_rules("/src", ["."], []) == (
            inc("/src"),
            inc("/src/**"),
            exc("/src/**"),
        )

    def test_include_empty_string(self):
        """'' as include path behaves like '.'."""
        assert build_rules("/src", [""], []) == build_rules("/src", ["."], [])

    def test_multiple_includes_in_order(self):
        """Each include gets its own chain, ancestors repeated, nothing deduplicated."""
        rules = build_rules("/src", ["a/x", "a/y"], [])

        assert rules == (
            inc("/src"),
            inc("/src/a"),
            inc("/src/a/x"),
            inc("/src/a/x/**"),
            inc("/src"),
            inc("/src/a"),
            inc("/src/a/y"),
            inc("/src/a/y/**"),
            exc("/src/**"),
        )

    def test_excludes_keep_input_order(self):
        rules = build_rules("/src", ["a"], ["z", "b", "z"])

        assert [r.pattern for r in rules[:3]] == ["/src/z", "/src/b", "/src/z"]

    def test_catch_all_is_last_with_includes(self):
        rules = build_rules("/stage/artifact/web", ["bin", "lib/x"], ["lib/x/tmp"])

        assert rules[-1] == exc("/stage/artifact/web/**")
        assert sum(1 for r in rules if r == exc("/stage/artifact/web/**")) == 1

    def test_no_catch_all_without_includes(self):
        rules = build_rules("/src", [], ["a", "b", "c"])

        assert len(rules) == 3
        assert exc("/src/**") not in rules

    def test_ancestors_precede_target(self):
        """Every ancestor include appears before the target include."""
        rules = list(build_rules("/src", ["a/b/c/d"], []))
        target_index = rules.index(inc("/src/a/b/c/d"))

        for ancestor in ("/src", "/src/a", "/src/a/b", "/src/a/b/c"):
            assert rules.index(inc(ancestor)) < target_index

    def test_idempotent(self):
        args = ("/src", ["a/b", "c"], ["a/b/d"])
        assert build_rules(*args) == build_rules(*args)

    def test_returns_tuple(self):
        """Result is immutable."""
        assert isinstance(build_rules("/src", ["a"], []), tuple)

    def test_accepts_tuples(self):
        assert build_rules("/src", ("a",), ("b",)) == build_rules("/src", ["a"], ["b"])

    def test_glob_include(self):
        rules = build_rules("/src", ["lib/*.so"], [])

        assert rules == (
            inc("/src"),
            inc("/src/lib"),
            inc("/src/lib/*.so"),
            inc("/src/lib/*.so/**"),
            exc("/src/**"),
        )

    def test_exclude_directory_only(self):
        assert build_rules("/src", [], ["cache/"]) == (exc("/src/cache/"),)

    def test_include_directory_only(self):
        rules = build_rules("/src", ["app/"], [])

        assert rules == (
            inc("/src"),
            inc("/src/app/"),
            inc("/src/app/**"),
            exc("/src/**"),
        )

    def test_nested_include_directory_only(self):
        rules = build_rules("/src", ["app/config/"], ["app/config/tmp/"])

        assert rules == (
            exc("/src/app/config/tmp/"),
            inc("/src"),
            inc("/src/app"),
            inc("/src/app/config/"),
            inc("/src/app/config/**"),
            exc("/src/**"),
        )


class TestRenderRules:
    """Tests for render_rules."""

    def test_render(self):
        rules = build_rules("/src", ["app"], ["app/tmp"])

        assert render_rules(rules) == [
            "--filter=-/ /src/app/tmp",
            "--filter=+/ /src",
            "--filter=+/ /src/app",
            "--filter=+/ /src/app/**",
            "--filter=-/ /src/**",
        ]

    def test_render_empty(self):
        assert render_rules(()) == []
