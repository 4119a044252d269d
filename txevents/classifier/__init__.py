"""
classifier/ - Event classification

Compiled name patterns and the rules that pick an event's disposition.
"""

from .patterns import (
    compile_pattern,
    is_wildcard,
    PatternMatcher,
)

from .classifier import (
    EventDisposition,
    EventClassifier,
)

__all__ = [
    # Patterns
    "compile_pattern",
    "is_wildcard",
    "PatternMatcher",
    # Classifier
    "EventDisposition",
    "EventClassifier",
]
