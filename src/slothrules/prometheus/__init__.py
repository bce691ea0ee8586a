"""Prometheus rule file generation for SLOs.

Group generated SLO rules and store them as a Prometheus rules file.
"""

from slothrules.prometheus.groups import build_rule_groups
from slothrules.prometheus.models import (
    SLO,
    AlertingRule,
    RecordingRule,
    Rule,
    RuleGroup,
    SLORules,
    StorageSLO,
    rule_from_dict,
)
from slothrules.prometheus.sinks import FileSink, RuleSink, StreamSink
from slothrules.prometheus.storage import GroupedRulesYAMLRepository, render_rule_file

__all__ = [
    "AlertingRule",
    "FileSink",
    "GroupedRulesYAMLRepository",
    "RecordingRule",
    "Rule",
    "RuleGroup",
    "RuleSink",
    "SLO",
    "SLORules",
    "StorageSLO",
    "StreamSink",
    "build_rule_groups",
    "render_rule_file",
    "rule_from_dict",
]
