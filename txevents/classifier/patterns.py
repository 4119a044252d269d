"""
classifier/patterns.py - Event name pattern compilation

Patterns are compiled once into regular expressions and reused for every
event. Two forms are supported:

- Globs: any pattern containing `*`. The star matches any run of
  characters, dots included, so `orders.*` matches `orders.placed` and
  `orders.line.added`. The whole name must match.
- Namespaces: a pattern with no `*` matches the identical name or any
  name nested under it, so `app.events` matches `app.events.OrderPlaced`
  but not `app.eventsource`.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Pattern, Tuple
import logging
import re

from txevents.errors.taxonomy import TxEventsError, create_configuration_error

logger = logging.getLogger("classifier.patterns")

WILDCARD = "*"
NAMESPACE_SEPARATOR = "."


def is_wildcard(pattern: str) -> bool:
    """Check if a pattern is a glob rather than a namespace."""
    return WILDCARD in pattern


def compile_pattern(pattern: str) -> Pattern[str]:
    """
    Compile a glob or namespace pattern.

    Args:
        pattern: Pattern text

    Returns:
        Compiled expression, to be used with `fullmatch`

    Raises:
        ValueError: If pattern is not a non-empty string
    """
    if not isinstance(pattern, str) or not pattern.strip():
        raise ValueError(f"Invalid event pattern: {pattern!r}")

    pattern = pattern.strip()

    if is_wildcard(pattern):
        regex = ".*".join(re.escape(part) for part in pattern.split(WILDCARD))
        return re.compile(regex, re.DOTALL)

    namespace = pattern.rstrip(NAMESPACE_SEPARATOR)
    if not namespace:
        raise ValueError(f"Invalid event pattern: {pattern!r}")
    return re.compile(
        f"{re.escape(namespace)}(?:{re.escape(NAMESPACE_SEPARATOR)}.*)?",
        re.DOTALL,
    )


@dataclass
class PatternMatcher:
    """
    A compiled set of patterns.

    Malformed entries are dropped at construction time, logged, and kept
    in `errors` so the owner can report them.
    """
    sources: Tuple[str, ...] = ()
    errors: List[TxEventsError] = field(default_factory=list)
    _compiled: List[Tuple[str, Pattern[str]]] = field(default_factory=list, repr=False)

    @classmethod
    def from_patterns(cls, patterns: Optional[Iterable[Any]], label: str = "patterns") -> "PatternMatcher":
        """
        Compile an iterable of patterns.

        Args:
            patterns: Raw pattern values (None is treated as empty)
            label: Name of the setting, used in log messages

        Returns:
            PatternMatcher holding every valid pattern
        """
        compiled: List[Tuple[str, Pattern[str]]] = []
        errors: List[TxEventsError] = []

        for raw in patterns or ():
            try:
                regex = compile_pattern(raw)
            except ValueError as e:
                logger.warning(f"Ignoring malformed entry in {label}: {raw!r}")
                errors.append(create_configuration_error(
                    message=f"Malformed pattern in {label}",
                    detail=str(e),
                ))
                continue
            compiled.append((raw.strip(), regex))

        return cls(
            sources=tuple(source for source, _ in compiled),
            errors=errors,
            _compiled=compiled,
        )

    def match(self, name: str) -> Optional[str]:
        """
        Find the first pattern matching a name.

        Returns:
            The matching pattern text, or None
        """
        for source, regex in self._compiled:
            if regex.fullmatch(name):
                return source
        return None

    def matches(self, name: str) -> bool:
        """Check if any pattern matches a name."""
        return self.match(name) is not None

    def __len__(self) -> int:
        return len(self._compiled)

    def __bool__(self) -> bool:
        return bool(self._compiled)
