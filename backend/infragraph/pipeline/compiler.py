"""
Diagram compiler: validate -> map -> sort.

Validation gates the rest of the pipeline. Warnings travel with the
result; any error stops compilation with DiagramValidationError.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional, Union

from infragraph import config
from infragraph.diagram.graph import NormalizedGraph
from infragraph.diagram.parser import parse_and_normalize
from infragraph.domain.architecture import Architecture
from infragraph.domain.mapper import map_diagram_to_architecture
from infragraph.domain.resource import CloudProvider
from infragraph.domain.toposort import TopologicalSortResult, topological_sort
from infragraph.errors import DiagramValidationError, GraphRequiredError
from infragraph.validation import ValidationOptions, ValidationResult, validate

logger = logging.getLogger(__name__)


@dataclass
class CompilationResult:
    validation: ValidationResult
    architecture: Architecture
    sort_result: TopologicalSortResult

    @property
    def warnings(self):
        return self.validation.warnings


def compile_diagram(graph: NormalizedGraph,
                    provider: Optional[Union[CloudProvider, str]] = None,
                    options: Optional[ValidationOptions] = None) -> CompilationResult:
    if graph is None:
        raise GraphRequiredError()

    provider = provider or (options.provider if options and options.provider else config.DEFAULT_PROVIDER)
    provider_name = provider.value if isinstance(provider, CloudProvider) else provider.lower()
    if options is None:
        options = ValidationOptions(provider=provider_name)
    elif not options.provider:
        options = replace(options, provider=provider_name)

    validation = validate(graph, options)
    for issue in validation.warnings:
        logger.warning("[COMPILER] [%s] %s", issue.code, issue.message)
    if not validation.is_valid:
        logger.info("[COMPILER] Validation failed: %s", validation.summary())
        raise DiagramValidationError(validation)

    architecture = map_diagram_to_architecture(graph, provider)
    sort_result = topological_sort(architecture)

    logger.info(
        "[COMPILER] Compiled %d resources into %d levels%s",
        len(architecture.resources),
        len(sort_result.levels),
        " (cycle detected)" if sort_result.has_cycle else "",
    )
    return CompilationResult(validation=validation, architecture=architecture, sort_result=sort_result)


def compile_document(data: Any,
                     provider: Optional[Union[CloudProvider, str]] = None,
                     options: Optional[ValidationOptions] = None) -> CompilationResult:
    """Parse raw canvas JSON, then compile it."""
    graph = parse_and_normalize(data)
    return compile_diagram(graph, provider=provider, options=options)
