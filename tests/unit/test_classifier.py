"""
Unit tests for EventClassifier.

Covers the rule precedence: marker, feature flag, exclusions,
inclusions, default.
"""

from dataclasses import dataclass

from txevents.bootstrap.config import TransactionalEventsConfig
from txevents.classifier import EventClassifier, EventDisposition
from txevents.events import Event, TransactionalEvent


@dataclass
class OrderPlaced(Event):
    event_name: str = "orders.placed"


@dataclass
class OrderAudited(Event, TransactionalEvent):
    event_name: str = "orders.audit.recorded"


class InvoiceSent(TransactionalEvent):
    pass


class PlainNotice:
    pass


class TestPrecedence:
    """Tests for the rule order."""

    def test_marker_overrides_exclusion(self, classifier):
        """An excluded name with the marker is still transactional."""
        assert classifier.classify("orders.audit.recorded") == EventDisposition.BYPASS
        assert classifier.classify(OrderAudited()) == EventDisposition.TRANSACTIONAL

    def test_marker_overrides_disabled_flag(self):
        classifier = EventClassifier(enabled=False, included_patterns=["*"])
        assert classifier.classify(InvoiceSent()) == EventDisposition.TRANSACTIONAL

    def test_marker_without_any_pattern(self):
        classifier = EventClassifier()
        assert classifier.classify(InvoiceSent()) == EventDisposition.TRANSACTIONAL

    def test_disabled_flag_bypasses_included(self):
        classifier = EventClassifier(enabled=False, included_patterns=["orders.*"])
        assert classifier.classify("orders.placed") == EventDisposition.BYPASS

    def test_exclusion_beats_inclusion(self):
        classifier = EventClassifier(
            included_patterns=["orders.*"],
            excluded_patterns=["orders.audit.*"],
        )
        assert classifier.classify("orders.audit.recorded") == EventDisposition.BYPASS
        assert classifier.classify("orders.placed") == EventDisposition.TRANSACTIONAL

    def test_inclusion_by_glob(self, classifier):
        assert classifier.classify(OrderPlaced()) == EventDisposition.TRANSACTIONAL

    def test_default_is_bypass(self, classifier):
        assert classifier.classify("users.created") == EventDisposition.BYPASS
        assert classifier.classify(PlainNotice()) == EventDisposition.BYPASS


class TestNaming:
    """Tests for how event objects are named for matching."""

    def test_class_name_matches_namespace(self):
        """Objects without a declared name use module.QualName."""
        classifier = EventClassifier(included_patterns=[PlainNotice.__module__])
        assert classifier.classify(PlainNotice()) == EventDisposition.TRANSACTIONAL

    def test_classify_name_with_marker_flag(self):
        classifier = EventClassifier()
        assert classifier.classify_name("anything", transactional=True) == EventDisposition.TRANSACTIONAL
        assert classifier.classify_name("anything") == EventDisposition.BYPASS


class TestConfiguration:
    """Tests for building from configuration."""

    def test_from_config(self):
        config = TransactionalEventsConfig(
            enabled=True,
            included_patterns=["orders.*"],
            excluded_patterns=["orders.audit.*"],
        )
        classifier = EventClassifier.from_config(config)

        assert classifier.enabled is True
        assert classifier.included.sources == ("orders.*",)
        assert classifier.excluded.sources == ("orders.audit.*",)

    def test_malformed_pattern_falls_through(self):
        """A bad exclusion is ignored, so the inclusion still applies."""
        classifier = EventClassifier(
            included_patterns=["orders.*"],
            excluded_patterns=["", 12],
        )

        assert classifier.classify("orders.placed") == EventDisposition.TRANSACTIONAL
        assert len(classifier.config_errors) == 2

    def test_disposition_values(self):
        assert EventDisposition.TRANSACTIONAL.value == "transactional"
        assert EventDisposition.BYPASS.value == "bypass"
