"""Pydantic models for rule sources and resolved pattern sets.

A rule source maps ruleset names to either a flat list of allow patterns
or a table with ``patterns`` and ``ignore`` lists. Keys starting with ``$``
are internal; ``$default`` names the ruleset used when a reference omits
one.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from modsweep.core.errors import RulesetNotFoundError, RuleSourceParseError

DEFAULT_KEY = "$default"
INTERNAL_PREFIX = "$"


class RulesetSpec(BaseModel):
    """A single ruleset from a rule source.

    Attributes:
        patterns: Glob fragments that make a path a deletion candidate.
        ignore: Glob fragments that exclude otherwise-matching paths.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    patterns: Annotated[
        list[str],
        Field(default_factory=list, description="Allow patterns"),
    ]
    ignore: Annotated[
        list[str],
        Field(default_factory=list, description="Ignore patterns"),
    ]


_ENTRY_ADAPTER: TypeAdapter[list[str] | RulesetSpec] = TypeAdapter(list[str] | RulesetSpec)


class RuleSource(BaseModel):
    """A loaded rule source, normalized to named RulesetSpec entries.

    Attributes:
        name: Identifier the source was loaded from (used in messages).
        default: Name of the default ruleset, if the source declares one.
        rulesets: Ruleset name to spec, in declaration order.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    default: str | None = None
    rulesets: dict[str, RulesetSpec] = Field(default_factory=dict)

    @classmethod
    def from_mapping(cls, name: str, data: object) -> "RuleSource":
        """Build a RuleSource from raw loaded data.

        Args:
            name: Identifier of the source.
            data: Decoded TOML/JSON document or a module's PATTERNS mapping.

        Returns:
            Validated RuleSource.

        Raises:
            RuleSourceParseError: If the data is not a mapping or an entry
                has an invalid shape.
        """
        if not isinstance(data, Mapping):
            raise RuleSourceParseError(f'Patterns "{name}" did not return an object')

        default = data.get(DEFAULT_KEY)
        if default is not None and not isinstance(default, str):
            raise RuleSourceParseError(f'Patterns "{name}" has a non-string "{DEFAULT_KEY}"')

        rulesets: dict[str, RulesetSpec] = {}
        for key, value in data.items():
            key = str(key)
            if key.startswith(INTERNAL_PREFIX):
                continue
            try:
                entry: Any = _ENTRY_ADAPTER.validate_python(value)
            except ValidationError as e:
                raise RuleSourceParseError(
                    f'Patterns "{name}" has an invalid rule "{key}": {e}'
                ) from e
            if isinstance(entry, list):
                entry = RulesetSpec(patterns=entry)
            rulesets[key] = entry

        return cls(name=name, default=default, rulesets=rulesets)

    @property
    def ruleset_names(self) -> list[str]:
        """Names of all non-internal rulesets, in declaration order."""
        return list(self.rulesets)

    def get(self, rule: str) -> RulesetSpec:
        """Look up a ruleset by name.

        Raises:
            RulesetNotFoundError: If the source does not define the rule.
        """
        try:
            return self.rulesets[rule]
        except KeyError:
            raise RulesetNotFoundError(
                f'Module "{self.name}" does not contain rule "{rule}"'
            ) from None


@dataclass(frozen=True, slots=True)
class ResolvedPatterns:
    """Allow and ignore pattern sets after resolution.

    Both tuples are deduplicated, keeping the order of first occurrence.
    ``allow`` is never empty.
    """

    allow: tuple[str, ...]
    ignore: tuple[str, ...] = ()
