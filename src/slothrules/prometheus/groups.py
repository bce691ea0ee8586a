"""Grouping of per-SLO rules into named Prometheus rule groups."""

from __future__ import annotations

from typing import Sequence

from slothrules.prometheus.models import Rule, RuleGroup, StorageSLO

SLI_RECORDINGS_GROUP_PREFIX = "sloth-slo-sli-recordings-"
META_RECORDINGS_GROUP_PREFIX = "sloth-slo-meta-recordings-"
ALERTS_GROUP_PREFIX = "sloth-slo-alerts-"


def build_rule_groups(slos: Sequence[StorageSLO]) -> list[RuleGroup]:
    """Build the ordered rule groups for a set of SLOs.

    Each SLO contributes up to three groups, always in the same order: SLI
    error recordings, metadata recordings and alerts. Categories without
    rules are skipped. SLO order and rule order are kept as given.

    Args:
        slos: SLOs with their generated rules

    Returns:
        List of RuleGroup objects, possibly empty
    """
    groups: list[RuleGroup] = []

    for storage_slo in slos:
        slo = storage_slo.slo
        rules = storage_slo.rules

        categories: list[tuple[str, Sequence[Rule]]] = [
            (SLI_RECORDINGS_GROUP_PREFIX, rules.sli_error_recording_rules),
            (META_RECORDINGS_GROUP_PREFIX, rules.metadata_recording_rules),
            (ALERTS_GROUP_PREFIX, rules.alert_rules),
        ]

        for prefix, category_rules in categories:
            if not category_rules:
                continue
            groups.append(
                RuleGroup(
                    name=prefix + slo.id,
                    rules=category_rules,
                    interval=slo.interval,
                )
            )

    return groups
