"""Unit tests for rule source references and the registry."""

import json
import sys
import types
from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest
from modsweep.core.errors import RuleSourceNotFoundError, RuleSourceParseError
from modsweep.rules.sources import (
    FileSource,
    NamedSource,
    RuleSourceRegistry,
    default_registry,
    load_rule_file,
    parse_source_ref,
)


class TestParseSourceRef:
    """Tests for parse_source_ref."""

    def test_plain_name(self) -> None:
        """Identifiers without a separator are named sources."""
        assert parse_source_ref("default") == NamedSource(name="default")

    def test_namespace_prefix_stripped(self) -> None:
        """The modsweep-patterns- prefix is optional."""
        assert parse_source_ref("modsweep-patterns-extra") == NamedSource(name="extra")

    def test_relative_path(self, tmp_path: Path) -> None:
        """Relative paths resolve against the working directory."""
        with patch("modsweep.rules.sources.Path.cwd", return_value=tmp_path):
            ref = parse_source_ref("./rules.toml")

        assert isinstance(ref, FileSource)
        assert ref.path == tmp_path / "rules.toml"

    def test_absolute_path(self, tmp_path: Path) -> None:
        """Absolute paths are kept."""
        ref = parse_source_ref(str(tmp_path / "rules.json"))
        assert ref == FileSource(path=tmp_path / "rules.json")


class TestLoadRuleFile:
    """Tests for load_rule_file."""

    def test_toml(self, rule_file: Callable[[str, str], Path]) -> None:
        """TOML files are decoded."""
        path = rule_file("r.toml", 'a = ["*.md"]\n')
        assert load_rule_file(path) == {"a": ["*.md"]}

    def test_json(self, rule_file: Callable[[str, str], Path]) -> None:
        """JSON files are decoded."""
        path = rule_file("r.json", json.dumps({"a": ["*.md"]}))
        assert load_rule_file(path) == {"a": ["*.md"]}

    def test_unsupported_extension(self, rule_file: Callable[[str, str], Path]) -> None:
        """Other extensions are rejected before reading."""
        path = rule_file("r.yaml", "a: 1\n")

        with pytest.raises(RuleSourceParseError, match="Invalid pattern module"):
            load_rule_file(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        """Missing files raise RuleSourceNotFoundError."""
        with pytest.raises(RuleSourceNotFoundError):
            load_rule_file(tmp_path / "nope.toml")

    def test_json_array_rejected(self, rule_file: Callable[[str, str], Path]) -> None:
        """A JSON document that is not an object is rejected."""
        path = rule_file("r.json", '["*.md"]')

        with pytest.raises(RuleSourceParseError, match="did not return an object"):
            load_rule_file(path)

    def test_broken_json(self, rule_file: Callable[[str, str], Path]) -> None:
        """Undecodable JSON raises RuleSourceParseError."""
        path = rule_file("r.json", "{")

        with pytest.raises(RuleSourceParseError, match="Invalid JSON"):
            load_rule_file(path)


class TestRuleSourceRegistry:
    """Tests for RuleSourceRegistry."""

    def test_default_registry_has_bundled_source(self) -> None:
        """The built-in default source loads with its default ruleset."""
        registry = default_registry()

        source = registry.load("default")

        assert "default" in registry
        assert source.default == "safe"
        assert source.ruleset_names == ["safe", "caution", "danger"]

    def test_registered_loader(self) -> None:
        """Registered loaders are used for named sources."""
        registry = RuleSourceRegistry()
        registry.register("modsweep-patterns-mine", lambda: {"x": ["*.bak"]})

        source = registry.load("mine")

        assert registry.names() == ["mine"]
        assert source.get("x").patterns == ["*.bak"]

    def test_file_reference(self, rule_file: Callable[[str, str], Path]) -> None:
        """Path identifiers load from disk."""
        path = rule_file("r.toml", '"$default" = "a"\na = ["*.md"]\n')

        source = RuleSourceRegistry().load(str(path))

        assert source.name == str(path)
        assert source.default == "a"

    def test_conventional_module(self) -> None:
        """Unregistered names import modsweep_patterns_<name>."""
        module = types.ModuleType("modsweep_patterns_extra_docs")
        module.PATTERNS = {"docs": ["*.rst"]}  # type: ignore[attr-defined]

        with patch.dict(sys.modules, {"modsweep_patterns_extra_docs": module}):
            source = RuleSourceRegistry().load("extra-docs")

        assert source.get("docs").patterns == ["*.rst"]

    def test_conventional_module_without_patterns(self) -> None:
        """A plugin module must define PATTERNS."""
        module = types.ModuleType("modsweep_patterns_empty")

        with (
            patch.dict(sys.modules, {"modsweep_patterns_empty": module}),
            pytest.raises(RuleSourceParseError, match="defines no PATTERNS"),
        ):
            RuleSourceRegistry().load("empty")

    def test_unknown_source(self) -> None:
        """Unknown names that cannot be imported raise RuleSourceNotFoundError."""
        with pytest.raises(RuleSourceNotFoundError, match="is it installed"):
            RuleSourceRegistry().load("does-not-exist-anywhere")
