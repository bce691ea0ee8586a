"""Data models for generated Prometheus SLO rules.

Rules arrive here already computed (expressions, labels and annotations are
final strings). These models only carry them to the grouper and the rule file
renderer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence, Union

from slothrules.core.errors import ValidationError


def _sorted_map(values: Mapping[str, str]) -> dict[str, str]:
    return {key: values[key] for key in sorted(values)}


@dataclass(frozen=True)
class RecordingRule:
    """A Prometheus recording rule.

    Recording rules precompute frequently needed or expensive expressions
    and save their result as a new time series.
    """

    record: str
    """The name of the time series to output to."""

    expr: str
    """The PromQL expression to evaluate."""

    labels: Mapping[str, str] | None = None
    """Labels to add or overwrite before storing the result."""

    def to_dict(self) -> dict[str, Any]:
        """Convert to Prometheus rule format.

        Returns:
            Dictionary in Prometheus recording rule format
        """
        rule: dict[str, Any] = {
            "record": self.record,
            "expr": self.expr,
        }

        if self.labels is not None:
            rule["labels"] = _sorted_map(self.labels)

        return rule


@dataclass(frozen=True)
class AlertingRule:
    """A Prometheus alerting rule."""

    alert: str
    expr: str  # PromQL expression
    labels: Mapping[str, str] | None = None
    annotations: Mapping[str, str] | None = None
    for_: str | None = None  # Pending duration, rendered as `for`

    def to_dict(self) -> dict[str, Any]:
        """Convert to Prometheus rule format.

        Example output:
            {
                "alert": "SLOErrorBudgetBurn",
                "expr": "slo:sli_error:ratio_rate5m > (14.4 * 0.001)",
                "labels": {"severity": "page"},
                "annotations": {"summary": "High error budget burn"}
            }
        """
        rule: dict[str, Any] = {
            "alert": self.alert,
            "expr": self.expr,
        }

        if self.for_:
            rule["for"] = self.for_
        if self.labels is not None:
            rule["labels"] = _sorted_map(self.labels)
        if self.annotations is not None:
            rule["annotations"] = _sorted_map(self.annotations)

        return rule


Rule = Union[RecordingRule, AlertingRule]


def rule_from_dict(data: Mapping[str, Any]) -> Rule:
    """
    Parse a rule from a Prometheus rule file mapping.

    Example input:
        {
            "record": "slo:sli_error:ratio_rate5m",
            "expr": "sum(rate(http_requests_total{code=~\"5..\"}[5m]))",
            "labels": {"sloth_id": "myservice-requests-availability"}
        }

    Raises:
        ValidationError: If the mapping is neither a recording nor an alerting rule
    """
    record = data.get("record")
    alert = data.get("alert")

    if bool(record) == bool(alert):
        raise ValidationError(
            "rule must define exactly one of 'record' or 'alert'",
            details={"record": record, "alert": alert},
        )
    if not data.get("expr"):
        raise ValidationError("rule has no 'expr'", details={"rule": record or alert})

    if record:
        if "annotations" in data:
            raise ValidationError(
                "recording rule can't have annotations", details={"rule": record}
            )
        return RecordingRule(record=record, expr=data["expr"], labels=data.get("labels"))

    return AlertingRule(
        alert=alert,
        expr=data["expr"],
        labels=data.get("labels"),
        annotations=data.get("annotations"),
        for_=data.get("for"),
    )


@dataclass(frozen=True)
class SLORules:
    """Rules generated for a single SLO, by category."""

    sli_error_recording_rules: Sequence[RecordingRule] = ()
    metadata_recording_rules: Sequence[RecordingRule] = ()
    alert_rules: Sequence[AlertingRule] = ()

    def __post_init__(self):
        # Freeze caller lists so later mutation can't leak into a document
        object.__setattr__(self, "sli_error_recording_rules", tuple(self.sli_error_recording_rules))
        object.__setattr__(self, "metadata_recording_rules", tuple(self.metadata_recording_rules))
        object.__setattr__(self, "alert_rules", tuple(self.alert_rules))

    @property
    def total(self) -> int:
        return (
            len(self.sli_error_recording_rules)
            + len(self.metadata_recording_rules)
            + len(self.alert_rules)
        )


@dataclass(frozen=True)
class SLO:
    """Identity of an SLO as needed to name its rule groups."""

    id: str = ""
    interval: str | None = None
    """Optional evaluation interval applied to every group of this SLO."""


@dataclass(frozen=True)
class StorageSLO:
    """An SLO paired with the rules generated for it."""

    slo: SLO = field(default_factory=SLO)
    rules: SLORules = field(default_factory=SLORules)


@dataclass(frozen=True)
class RuleGroup:
    """A named Prometheus rule group.

    Groups are never empty and never mix recording and alerting rules.
    """

    name: str
    rules: Sequence[Rule]
    interval: str | None = None

    def __post_init__(self):
        rules = tuple(self.rules)
        if not rules:
            raise ValidationError("rule group can't be empty", details={"group": self.name})

        for rule in rules:
            if not isinstance(rule, (RecordingRule, AlertingRule)):
                raise ValidationError(
                    "rule group only accepts recording or alerting rules",
                    details={"group": self.name, "rule_type": type(rule).__name__},
                )

        kinds = {type(rule) for rule in rules}
        if len(kinds) > 1:
            raise ValidationError(
                "rule group can't mix recording and alerting rules",
                details={"group": self.name},
            )

        object.__setattr__(self, "rules", rules)

    @property
    def is_alerting(self) -> bool:
        return isinstance(self.rules[0], AlertingRule)

    def to_dict(self) -> dict[str, Any]:
        """Convert to Prometheus rule group format."""
        group: dict[str, Any] = {"name": self.name}
        if self.interval:
            group["interval"] = self.interval
        group["rules"] = [rule.to_dict() for rule in self.rules]
        return group
