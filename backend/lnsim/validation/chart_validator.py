"""
Chart Validator - Checks that a chart is consistent with its network.

Catches issues like:
- Links whose endpoints are not on the chart
- Selection or hover pointing at something that no longer exists
- Lightning nodes without their backend connection link
- Network nodes missing from the chart
- A scale outside the configured zoom bounds
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from lnsim import config
from lnsim.ir.chart import Chart, EntityRef
from lnsim.ir.network import Network
from lnsim.visual.topology import link_id


class ValidationSeverity(Enum):
    ERROR = "error"      # An invariant is broken
    WARNING = "warning"  # Chart renders but is out of step with the network


@dataclass
class ValidationIssue:
    """A single problem found in a chart"""
    severity: ValidationSeverity
    code: str           # Machine-readable issue code
    message: str        # Human-readable description
    node_id: Optional[str] = None
    link_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "node_id": self.node_id,
            "link_id": self.link_id,
        }


@dataclass
class ChartValidationResult:
    is_valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def error_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.WARNING)

    @property
    def codes(self) -> List[str]:
        return [i.code for i in self.issues]

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "issues": [i.to_dict() for i in self.issues],
            "stats": self.stats,
        }

    def get_summary(self) -> str:
        status = "Valid" if self.is_valid else "Invalid"
        return f"{status} | Errors: {self.error_count}, Warnings: {self.warning_count}"


class ChartValidator:
    """
    Usage:
        result = ChartValidator().validate(chart, network)
        for issue in result.issues:
            print(f"[{issue.severity.value}] {issue.message}")
    """

    def validate(self, chart: Chart, network: Network) -> ChartValidationResult:
        issues: List[ValidationIssue] = []

        issues.extend(self._check_dangling_links(chart))
        issues.extend(self._check_refs(chart))
        issues.extend(self._check_missing_chart_nodes(chart, network))
        issues.extend(self._check_backend_links(chart, network))
        issues.extend(self._check_scale(chart))

        return ChartValidationResult(
            is_valid=not any(i.severity == ValidationSeverity.ERROR for i in issues),
            issues=issues,
            stats={
                "nodes": len(chart.nodes),
                "links": len(chart.links),
                "network_nodes": len(network.all_nodes()),
            },
        )

    def _check_dangling_links(self, chart: Chart) -> List[ValidationIssue]:
        issues = []
        for lid, link in chart.links.items():
            if link.from_.node_id not in chart.nodes:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="DANGLING_LINK_SOURCE",
                    message=f"Link '{lid}' starts at missing node '{link.from_.node_id}'",
                    node_id=link.from_.node_id,
                    link_id=lid,
                ))
            if link.to.node_id not in chart.nodes:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="DANGLING_LINK_TARGET",
                    message=f"Link '{lid}' ends at missing node '{link.to.node_id}'",
                    node_id=link.to.node_id,
                    link_id=lid,
                ))
        return issues

    def _check_refs(self, chart: Chart) -> List[ValidationIssue]:
        def _exists(ref: EntityRef) -> bool:
            if ref.type == "node":
                return ref.id in chart.nodes
            return ref.id in chart.links

        issues = []
        if chart.selected is not None and not _exists(chart.selected):
            issues.append(ValidationIssue(
                severity=ValidationSeverity.ERROR,
                code="ORPHANED_SELECTION",
                message=f"Selected {chart.selected.type} '{chart.selected.id}' does not exist",
            ))
        if chart.hovered is not None and not _exists(chart.hovered):
            issues.append(ValidationIssue(
                severity=ValidationSeverity.ERROR,
                code="ORPHANED_HOVER",
                message=f"Hovered {chart.hovered.type} '{chart.hovered.id}' does not exist",
            ))
        return issues

    def _check_missing_chart_nodes(self, chart: Chart, network: Network) -> List[ValidationIssue]:
        return [
            ValidationIssue(
                severity=ValidationSeverity.WARNING,
                code="MISSING_CHART_NODE",
                message=f"Node '{node.name}' is not on the chart",
                node_id=node.name,
            )
            for node in network.all_nodes()
            if node.name not in chart.nodes
        ]

    def _check_backend_links(self, chart: Chart, network: Network) -> List[ValidationIssue]:
        issues = []
        for ln in network.nodes.lightning:
            lid = link_id(ln.name, ln.backend_name, "backend")
            if lid not in chart.links:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="MISSING_BACKEND_LINK",
                    message=f"Lightning node '{ln.name}' has no link to '{ln.backend_name}'",
                    node_id=ln.name,
                    link_id=lid,
                ))
        return issues

    def _check_scale(self, chart: Chart) -> List[ValidationIssue]:
        if config.MIN_SCALE <= chart.scale <= config.MAX_SCALE:
            return []
        return [ValidationIssue(
            severity=ValidationSeverity.WARNING,
            code="INVALID_SCALE",
            message=f"Scale {chart.scale} is outside [{config.MIN_SCALE}, {config.MAX_SCALE}]",
        )]


def validate_chart(chart: Chart, network: Network) -> ChartValidationResult:
    return ChartValidator().validate(chart, network)
