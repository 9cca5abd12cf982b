"""Unit tests for rule source models."""

import pytest
from modsweep.core.errors import RulesetNotFoundError, RuleSourceParseError
from modsweep.rules.models import RuleSource, RulesetSpec


class TestRuleSourceFromMapping:
    """Tests for RuleSource.from_mapping."""

    def test_list_and_table_entries(self) -> None:
        """Flat lists and patterns/ignore tables both normalize to RulesetSpec."""
        source = RuleSource.from_mapping(
            "demo",
            {
                "$default": "docs",
                "docs": ["*.md"],
                "code": {"patterns": ["*.ts"], "ignore": ["*.d.ts"]},
            },
        )

        assert source.default == "docs"
        assert source.ruleset_names == ["docs", "code"]
        assert source.get("docs") == RulesetSpec(patterns=["*.md"])
        assert source.get("code").ignore == ["*.d.ts"]

    def test_internal_keys_skipped(self) -> None:
        """Keys starting with $ are not rulesets."""
        source = RuleSource.from_mapping("demo", {"$meta": {"x": 1}, "a": ["x"]})
        assert source.ruleset_names == ["a"]

    def test_non_mapping_rejected(self) -> None:
        """Sources must decode to an object."""
        with pytest.raises(RuleSourceParseError, match="did not return an object"):
            RuleSource.from_mapping("demo", ["*.md"])

    def test_invalid_entry_rejected(self) -> None:
        """Entries must be a list of strings or a patterns table."""
        with pytest.raises(RuleSourceParseError, match='invalid rule "bad"'):
            RuleSource.from_mapping("demo", {"bad": {"pattern": ["*.md"]}})

    def test_non_string_default_rejected(self) -> None:
        """$default must name a ruleset."""
        with pytest.raises(RuleSourceParseError):
            RuleSource.from_mapping("demo", {"$default": 1, "a": ["x"]})


class TestRuleSourceGet:
    """Tests for RuleSource.get."""

    def test_missing_rule(self) -> None:
        """Unknown rulesets raise RulesetNotFoundError naming source and rule."""
        source = RuleSource.from_mapping("demo", {"a": ["x"]})

        with pytest.raises(RulesetNotFoundError, match='Module "demo" does not contain rule "b"'):
            source.get("b")
