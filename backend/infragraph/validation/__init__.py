from infragraph.validation.diagram_validator import (
    DiagramValidator,
    ValidationIssue,
    ValidationOptions,
    ValidationResult,
    ValidationSeverity,
    raise_on_errors,
    validate,
)

__all__ = [
    "DiagramValidator",
    "ValidationIssue",
    "ValidationOptions",
    "ValidationResult",
    "ValidationSeverity",
    "raise_on_errors",
    "validate",
]
