import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from infragraph import config
from infragraph.api.serializers import serialize_architecture
from infragraph.diagram.parser import parse_and_normalize
from infragraph.errors import (
    DiagramParseError,
    DiagramValidationError,
    InfragraphError,
    ResourceTypeResolutionError,
)
from infragraph.pipeline import compile_diagram
from infragraph.schemas import CompileResponse, DiagramRequest, ValidationResponse
from infragraph.validation import ValidationOptions, validate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/diagrams", tags=["diagrams"])
health_router = APIRouter(tags=["health"])


def _options(request: DiagramRequest) -> ValidationOptions:
    known = None
    if request.valid_resource_types:
        known = {t.lower() for t in request.valid_resource_types}
    return ValidationOptions(
        valid_resource_types=known,
        provider=(request.provider or config.DEFAULT_PROVIDER).lower(),
    )


def _parse(request: DiagramRequest):
    try:
        return parse_and_normalize(request.diagram)
    except DiagramParseError as e:
        logger.info("[Routes] Rejected diagram: %s", e.message)
        raise HTTPException(status_code=400, detail=e.to_dict())


@router.post("/validate", response_model=ValidationResponse)
def validate_diagram(request: DiagramRequest):
    graph = _parse(request)
    result = validate(graph, _options(request))
    return result.to_dict()


@router.post("/compile", response_model=CompileResponse)
def compile_diagram_route(request: DiagramRequest):
    graph = _parse(request)
    options = _options(request)

    try:
        compiled = compile_diagram(graph, provider=options.provider, options=options)
    except DiagramValidationError as e:
        return JSONResponse(
            status_code=422,
            content={
                "status": "invalid",
                "message": e.message,
                "validation": e.result.to_dict(),
            },
        )
    except ResourceTypeResolutionError as e:
        raise HTTPException(status_code=422, detail=e.to_dict())
    except InfragraphError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())

    sort_result = compiled.sort_result
    return {
        "status": "success" if not compiled.warnings else "warning",
        "validation": compiled.validation.to_dict(),
        "architecture": serialize_architecture(compiled.architecture),
        "order": sort_result.sorted_ids(),
        "levels": sort_result.levels,
        "has_cycle": sort_result.has_cycle,
        "cycle_info": sort_result.cycle_info,
    }


@health_router.get("/health")
def health():
    return {"status": "ok"}
