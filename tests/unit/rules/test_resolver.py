"""Unit tests for PatternResolver."""

from collections.abc import Callable
from pathlib import Path

import pytest
from modsweep.core.errors import (
    EmptyPatternsError,
    RulesetNotFoundError,
    RuleSourceNotFoundError,
)
from modsweep.rules.resolver import PatternResolver, split_reference
from modsweep.rules.sources import RuleSourceRegistry


@pytest.fixture
def resolver() -> PatternResolver:
    """Resolver over a small in-memory source."""
    registry = RuleSourceRegistry(
        {
            "demo": lambda: {
                "$default": "docs",
                "docs": ["*.md", "changelog"],
                "tests": {"patterns": ["test", "*.md"], "ignore": ["keep.md"]},
                "code": {"patterns": ["*.ts"], "ignore": ["*.d.ts"]},
            },
            "plain": lambda: {"first": ["a"], "second": ["b"]},
            "empty": lambda: {"none": []},
        }
    )
    return PatternResolver(registry)


class TestSplitReference:
    """Tests for split_reference."""

    def test_source_only(self) -> None:
        """A bare identifier has no ruleset name."""
        assert split_reference("demo") == ("demo", None)

    def test_splits_on_first_colon(self) -> None:
        """Only the first colon separates source and name."""
        assert split_reference("demo:a:b") == ("demo", "a:b")


class TestResolve:
    """Tests for PatternResolver.resolve."""

    def test_default_ruleset(self, resolver: PatternResolver) -> None:
        """A reference without a name uses $default."""
        resolved = resolver.resolve(["demo"])
        assert resolved.allow == ("*.md", "changelog")
        assert resolved.ignore == ()

    def test_first_ruleset_without_default(self, resolver: PatternResolver) -> None:
        """Without $default the first declared ruleset is used."""
        assert resolver.resolve(["plain"]).allow == ("a",)

    def test_comma_list_and_dedupe(self, resolver: PatternResolver) -> None:
        """Comma lists combine rulesets; duplicates keep first occurrence."""
        resolved = resolver.resolve(["demo:docs,tests"])

        assert resolved.allow == ("*.md", "changelog", "test")
        assert resolved.ignore == ("keep.md",)

    def test_wildcard(self, resolver: PatternResolver) -> None:
        """The wildcard selects every ruleset in declaration order."""
        resolved = resolver.resolve(["demo:*"])

        assert resolved.allow == ("*.md", "changelog", "test", "*.ts")
        assert resolved.ignore == ("keep.md", "*.d.ts")

    def test_additional_patterns_appended(self, resolver: PatternResolver) -> None:
        """Extra patterns come after ruleset patterns."""
        resolved = resolver.resolve(["demo:docs"], ["*.log", "*.md"], ["x/**"])

        assert resolved.allow == ("*.md", "changelog", "*.log")
        assert resolved.ignore == ("x/**",)

    def test_idempotent(self, resolver: PatternResolver) -> None:
        """Repeating a reference does not change the result."""
        once = resolver.resolve(["demo:tests"])
        twice = resolver.resolve(["demo:tests", "demo:tests"])
        assert once == twice

    def test_order_insensitive_as_sets(self, resolver: PatternResolver) -> None:
        """Reference order changes ordering only, not membership."""
        forward = resolver.resolve(["demo:docs", "demo:code"])
        backward = resolver.resolve(["demo:code", "demo:docs"])

        assert set(forward.allow) == set(backward.allow)
        assert set(forward.ignore) == set(backward.ignore)

    def test_only_additional_patterns(self, resolver: PatternResolver) -> None:
        """No references is fine as long as extra patterns exist."""
        assert resolver.resolve([], ["*.bak"]).allow == ("*.bak",)

    def test_empty_allow_raises(self, resolver: PatternResolver) -> None:
        """Resolution without any allow pattern is a configuration error."""
        with pytest.raises(EmptyPatternsError, match="nothing to check against"):
            resolver.resolve(["empty"])

    def test_missing_ruleset(self, resolver: PatternResolver) -> None:
        """Unknown ruleset names raise RulesetNotFoundError."""
        with pytest.raises(RulesetNotFoundError):
            resolver.resolve(["demo:nope"])

    def test_missing_source(self, resolver: PatternResolver) -> None:
        """Unknown sources raise RuleSourceNotFoundError."""
        with pytest.raises(RuleSourceNotFoundError):
            resolver.resolve(["no-such-source-here"])

    def test_file_source(
        self, resolver: PatternResolver, rule_file: Callable[[str, str], Path]
    ) -> None:
        """File references are resolved alongside named ones."""
        path = rule_file("extra.json", '{"bak": ["*.bak"]}')

        resolved = resolver.resolve(["demo:docs", f"{path}:bak"])

        assert resolved.allow == ("*.md", "changelog", "*.bak")

    def test_bundled_default(self) -> None:
        """The default resolver knows the built-in source."""
        resolved = PatternResolver().resolve(["default:danger"])

        assert "*.ts" in resolved.allow
        assert resolved.ignore == ("*.d.ts",)
