"""
Exception hierarchy for the diagram compilation pipeline.

Validation findings are reported as ValidationIssue data, not raised.
The exceptions below cover the cases where a stage cannot produce a
result at all.
"""

from typing import Any, Dict, List, Optional


class InfragraphError(Exception):
    """Base error. Carries a machine-readable code next to the message."""

    code = "INTERNAL"

    def __init__(self, message: str, code: Optional[str] = None, metadata: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.metadata = metadata or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "metadata": self.metadata,
        }


class GraphRequiredError(InfragraphError):
    code = "GRAPH_REQUIRED"

    def __init__(self, message: str = "diagram graph is required"):
        super().__init__(message)


class ArchitectureRequiredError(InfragraphError):
    code = "ARCHITECTURE_REQUIRED"

    def __init__(self, message: str = "architecture is required"):
        super().__init__(message)


class DiagramParseError(InfragraphError):
    code = "DIAGRAM_PARSE_ERROR"


class SchemaRegistrationError(InfragraphError):
    code = "SCHEMA_REGISTRATION_ERROR"


class ResourceTypeResolutionError(InfragraphError):
    code = "UNKNOWN_RESOURCE_TYPE"

    def __init__(self, ir_type: str, provider: str, node_id: Optional[str] = None):
        target = f" for node {node_id}" if node_id else ""
        super().__init__(
            f"failed to map resource type '{ir_type}'{target} for provider '{provider}'",
            metadata={"ir_type": ir_type, "provider": provider, "node_id": node_id},
        )
        self.ir_type = ir_type
        self.provider = provider
        self.node_id = node_id


class DependencyCycleError(InfragraphError):
    code = "DEPENDENCY_CYCLE"

    def __init__(self, resource_ids: List[str]):
        super().__init__(
            f"circular dependency detected involving resources: {resource_ids}",
            metadata={"resource_ids": list(resource_ids)},
        )
        self.resource_ids = list(resource_ids)


class DiagramValidationError(InfragraphError):
    """Raised when a caller asks to proceed past a failed validation."""

    code = "DIAGRAM_INVALID"

    def __init__(self, result):
        lines = [f"[{e.code}] {e.message}" for e in result.errors]
        super().__init__(
            f"Diagram validation failed with {len(result.errors)} errors:\n" + "\n".join(lines)
        )
        self.result = result


class UnsupportedProviderError(InfragraphError):
    code = "UNSUPPORTED_PROVIDER"

    def __init__(self, provider: str):
        super().__init__(f"unsupported cloud provider '{provider}'", metadata={"provider": provider})
        self.provider = provider
