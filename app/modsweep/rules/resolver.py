"""Resolution of ruleset references into allow/ignore pattern sets."""

import logging
from collections.abc import Iterable, Sequence

from modsweep.core.errors import EmptyPatternsError
from modsweep.rules.models import ResolvedPatterns, RuleSource
from modsweep.rules.sources import RuleSourceRegistry, default_registry

logger = logging.getLogger(__name__)

ALL_RULESETS = "*"


def split_reference(reference: str) -> tuple[str, str | None]:
    """Split ``"source:name"`` into its source identifier and ruleset name.

    Only the first colon separates the two parts. An empty name is
    returned as None.
    """
    source_id, _, rule_name = reference.partition(":")
    return source_id, rule_name or None


def _dedupe(items: Iterable[str]) -> tuple[str, ...]:
    """Remove duplicates, keeping the first occurrence of each item."""
    return tuple(dict.fromkeys(items))


def _select_rulesets(source: RuleSource, rule_name: str | None) -> list[str]:
    """Expand a (possibly missing, wildcard or comma-separated) ruleset name."""
    names = source.ruleset_names

    if not rule_name:
        if source.default:
            rule_name = source.default
        elif names:
            rule_name = names[0]
        else:
            return []

    if rule_name == ALL_RULESETS:
        return names

    return [part.strip() for part in rule_name.split(",") if part.strip()]


class PatternResolver:
    """Turns ruleset references into a ResolvedPatterns value.

    Args:
        registry: Source registry used for named sources. Defaults to the
            registry of built-in sources.
    """

    def __init__(self, registry: RuleSourceRegistry | None = None) -> None:
        self._registry = registry if registry is not None else default_registry()

    def resolve(
        self,
        references: Sequence[str],
        additional_patterns: Sequence[str] = (),
        additional_ignore: Sequence[str] = (),
    ) -> ResolvedPatterns:
        """Resolve references and extra patterns into deduplicated sets.

        Args:
            references: Ruleset references such as ``"default:safe"``,
                ``"default:safe,caution"``, ``"default:*"`` or ``"./rules.toml"``.
            additional_patterns: Raw allow patterns appended after all rulesets.
            additional_ignore: Raw ignore patterns appended after all rulesets.

        Returns:
            ResolvedPatterns with a non-empty allow set.

        Raises:
            ConfigurationError: If a source or ruleset cannot be found, or no
                allow pattern remains.
        """
        allow: list[str] = []
        ignore: list[str] = []

        for reference in references:
            source_id, rule_name = split_reference(reference)
            source = self._registry.load(source_id)

            for rule in _select_rulesets(source, rule_name):
                spec = source.get(rule)
                allow.extend(spec.patterns)
                ignore.extend(spec.ignore)
                logger.debug(
                    "Ruleset %s:%s contributed %d pattern(s), %d ignore(s)",
                    source.name,
                    rule,
                    len(spec.patterns),
                    len(spec.ignore),
                )

        allow.extend(additional_patterns)
        ignore.extend(additional_ignore)

        resolved = ResolvedPatterns(allow=_dedupe(allow), ignore=_dedupe(ignore))
        if not resolved.allow:
            raise EmptyPatternsError("No patterns have been loaded, nothing to check against")
        return resolved
