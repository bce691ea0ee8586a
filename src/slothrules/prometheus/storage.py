"""
Prometheus rule file storage.

Groups the rules of a set of SLOs and writes them as a single Prometheus
rule file with a generated header.

Output example:

    ---
    # Code generated by Sloth (dev): https://github.com/slok/sloth.
    # DO NOT EDIT.

    groups:
    - name: sloth-slo-sli-recordings-myservice-requests-availability
      rules:
      - record: slo:sli_error:ratio_rate5m
        expr: ...
"""

from __future__ import annotations

import threading
from typing import Any, Iterable, Sequence

import yaml

from slothrules.config.settings import get_settings
from slothrules.core.errors import (
    OperationCancelledError,
    SerializationError,
    SinkWriteError,
    ValidationError,
)
from slothrules.logging import bind_context
from slothrules.prometheus.groups import build_rule_groups
from slothrules.prometheus.models import RuleGroup, StorageSLO
from slothrules.prometheus.sinks import RuleSink

HEADER_TEMPLATE = """
---
# Code generated by {generator} ({version}): {project_url}.
# DO NOT EDIT.

"""


class RuleFileDumper(yaml.SafeDumper):
    """YAML dumper producing Prometheus rule files.

    Multi-line strings (usually alert expressions) are written as literal
    blocks and anchors/aliases are never emitted.
    """

    def ignore_aliases(self, data: Any) -> bool:
        return True


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


RuleFileDumper.add_representer(str, _represent_str)


def render_rule_file(
    groups: Sequence[RuleGroup],
    *,
    generator: str,
    version: str,
    project_url: str,
) -> bytes:
    """Render rule groups as a Prometheus rule file.

    Args:
        groups: Ordered rule groups
        generator: Generator name written in the header
        version: Generator version written in the header
        project_url: Project URL written in the header

    Returns:
        UTF-8 encoded rule file

    Raises:
        SerializationError: If a rule can't be represented in YAML
    """
    try:
        data = {"groups": [group.to_dict() for group in groups]}
        body = yaml.dump(
            data,
            Dumper=RuleFileDumper,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
            width=float("inf"),
        )
    except (yaml.YAMLError, TypeError) as e:
        raise SerializationError(
            f"could not format rules: {e}", details={"stage": SerializationError.stage}
        ) from e

    header = HEADER_TEMPLATE.format(
        generator=generator, version=version, project_url=project_url
    )
    return (header + body).encode("utf-8")


class GroupedRulesYAMLRepository:
    """Stores SLO rules as a grouped Prometheus rules YAML document.

    Every call renders a full document from scratch and hands it to the sink
    in a single write.
    """

    def __init__(
        self,
        sink: RuleSink,
        *,
        version: str | None = None,
        generator: str | None = None,
        project_url: str | None = None,
        logger: Any = None,
    ) -> None:
        settings = get_settings()
        self._sink = sink
        self._version = version if version is not None else settings.version
        self._generator = generator if generator is not None else settings.generator_name
        self._project_url = project_url if project_url is not None else settings.project_url
        if logger is None:
            logger = bind_context(component="prometheus_storage")
        self._logger = logger

    def render(self, groups: Sequence[RuleGroup]) -> bytes:
        """Render groups with this repository's header."""
        return render_rule_file(
            groups,
            generator=self._generator,
            version=self._version,
            project_url=self._project_url,
        )

    def store_slos(
        self, slos: Iterable[StorageSLO], ctx: threading.Event | None = None
    ) -> None:
        """Group, render and write the rules of the given SLOs.

        Args:
            slos: SLOs with their generated rules, in output order
            ctx: Optional cancellation event; when set before the write
                nothing is written

        Raises:
            ValidationError: No SLOs were given or they have no rules
            SerializationError: The rules could not be rendered
            OperationCancelledError: ctx was set before the write
            SinkWriteError: The sink failed the write
        """
        slos = list(slos)
        if not slos:
            raise ValidationError("no SLOs", details={"stage": ValidationError.stage})

        groups = build_rule_groups(slos)
        if not groups:
            raise ValidationError(
                "no rules generated",
                details={"stage": ValidationError.stage, "slos": len(slos)},
            )

        log = self._logger.bind(slos=len(slos), sink=repr(self._sink))
        data = self.render(groups)

        if ctx is not None and ctx.is_set():
            raise OperationCancelledError(
                "operation cancelled before writing rules",
                details={"stage": OperationCancelledError.stage},
            )

        try:
            self._sink.write(data)
        except (OSError, ValueError) as e:
            # ValueError: write on a closed stream
            log.warning("prometheus_rules_store_failed", error=str(e))
            raise SinkWriteError(
                f"could not write rules: {e}", details={"stage": SinkWriteError.stage}
            ) from e

        log.debug(
            "prometheus_rules_stored",
            groups=len(groups),
            rules=sum(len(group.rules) for group in groups),
            bytes=len(data),
        )
