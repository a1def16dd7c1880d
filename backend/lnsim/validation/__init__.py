"""
Validation module for chart consistency checks and repairs.
"""

from lnsim.validation.chart_validator import (
    ChartValidationResult,
    ChartValidator,
    ValidationIssue,
    ValidationSeverity,
    validate_chart,
)

from lnsim.validation.chart_fixer import (
    ChartAutoFixer,
    FixResult,
    fix_chart,
    validate_and_fix_chart,
)

__all__ = [
    "ChartValidationResult",
    "ChartValidator",
    "ValidationIssue",
    "ValidationSeverity",
    "validate_chart",
    "ChartAutoFixer",
    "FixResult",
    "fix_chart",
    "validate_and_fix_chart",
]
