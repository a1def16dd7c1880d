"""
Chart Auto-Fixer - Rule-based repair of charts that drifted from their network.

Used when charts come back from persistence: every issue the validator
reports has a deterministic fix, applied on a copy of the chart.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from lnsim.ir.chart import Chart
from lnsim.ir.network import Network
from lnsim.validation.chart_validator import (
    ChartValidationResult,
    ChartValidator,
    ValidationIssue,
)
from lnsim.visual.chart_mapper import create_bitcoin_chart_node, create_lightning_chart_node
from lnsim.visual.topology import add_link, remove_link, reset_zoom


@dataclass
class FixResult:
    success: bool
    issues_fixed: List[str] = field(default_factory=list)
    issues_remaining: List[str] = field(default_factory=list)
    changes_made: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "issues_fixed": self.issues_fixed,
            "issues_remaining": self.issues_remaining,
            "changes_made": self.changes_made,
        }


class ChartAutoFixer:
    """
    Usage:
        fixer = ChartAutoFixer()
        fixed_chart, result = fixer.fix(chart, network)
    """

    # chart nodes must exist before backend links can be recreated
    FIX_ORDER = [
        "MISSING_CHART_NODE",
        "DANGLING_LINK_SOURCE",
        "DANGLING_LINK_TARGET",
        "MISSING_BACKEND_LINK",
        "ORPHANED_SELECTION",
        "ORPHANED_HOVER",
        "INVALID_SCALE",
    ]

    def __init__(self, max_iterations: int = 3):
        self.max_iterations = max_iterations
        self.validator = ChartValidator()

    def fix(self, chart: Chart, network: Network) -> Tuple[Chart, FixResult]:
        fixed_chart = chart.model_copy(deep=True)

        all_changes = []
        all_fixed = []

        for iteration in range(self.max_iterations):
            validation = self.validator.validate(fixed_chart, network)
            if not validation.issues:
                break

            issues = sorted(
                validation.issues,
                key=lambda i: self.FIX_ORDER.index(i.code),
            )
            for issue in issues:
                change = self._apply_fix(fixed_chart, network, issue)
                if change:
                    all_changes.append(change)
                    all_fixed.append(issue.code)

        final = self.validator.validate(fixed_chart, network)
        result = FixResult(
            success=final.is_valid,
            issues_fixed=sorted(set(all_fixed)),
            issues_remaining=final.codes,
            changes_made=all_changes,
        )

        if all_changes:
            print(f"[FIXER] Network {network.id}: {len(all_changes)} change(s) applied")
        return fixed_chart, result

    def _apply_fix(self, chart: Chart, network: Network, issue: ValidationIssue):
        if issue.code in ("DANGLING_LINK_SOURCE", "DANGLING_LINK_TARGET"):
            if remove_link(chart, issue.link_id):
                return f"Removed dangling link: {issue.link_id}"

        elif issue.code == "ORPHANED_SELECTION":
            chart.selected = None
            return "Cleared orphaned selection"

        elif issue.code == "ORPHANED_HOVER":
            chart.hovered = None
            return "Cleared orphaned hover"

        elif issue.code == "MISSING_CHART_NODE":
            for index, ln in enumerate(network.nodes.lightning):
                if ln.name == issue.node_id:
                    chart.nodes[ln.name] = create_lightning_chart_node(ln, index)
                    return f"Placed missing node: {ln.name}"
            for index, btc in enumerate(network.nodes.bitcoin):
                if btc.name == issue.node_id:
                    chart.nodes[btc.name] = create_bitcoin_chart_node(btc, index)
                    return f"Placed missing node: {btc.name}"

        elif issue.code == "MISSING_BACKEND_LINK":
            ln = network.find_lightning(issue.node_id)
            if ln and add_link(chart, ln.name, ln.backend_name, "backend"):
                return f"Recreated backend link: {issue.link_id}"

        elif issue.code == "INVALID_SCALE":
            reset_zoom(chart)
            return "Reset invalid scale"

        return None


def fix_chart(chart: Chart, network: Network) -> Tuple[Chart, FixResult]:
    return ChartAutoFixer().fix(chart, network)


def validate_and_fix_chart(
    chart: Chart, network: Network
) -> Tuple[Chart, ChartValidationResult, FixResult]:
    """
    Validate a chart and repair it when needed.

    Returns:
        Tuple of (chart, final_validation, fix_result)
    """
    validator = ChartValidator()
    initial = validator.validate(chart, network)

    if not initial.issues:
        return chart, initial, FixResult(success=True)

    fixed_chart, fix_result = fix_chart(chart, network)
    return fixed_chart, validator.validate(fixed_chart, network), fix_result
