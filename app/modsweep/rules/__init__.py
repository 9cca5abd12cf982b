"""Rule sources and pattern resolution.

This module provides rule source loading (built-in, file-based and
conventional plugin modules) and resolution of ruleset references into
allow/ignore pattern sets.
"""

from modsweep.rules.models import ResolvedPatterns, RuleSource, RulesetSpec
from modsweep.rules.resolver import PatternResolver, split_reference
from modsweep.rules.sources import (
    FileSource,
    NamedSource,
    RuleSourceRef,
    RuleSourceRegistry,
    default_registry,
    parse_source_ref,
)

__all__ = [
    "FileSource",
    "NamedSource",
    "PatternResolver",
    "ResolvedPatterns",
    "RuleSource",
    "RuleSourceRef",
    "RuleSourceRegistry",
    "RulesetSpec",
    "default_registry",
    "parse_source_ref",
    "split_reference",
]
