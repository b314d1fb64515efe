from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class DiagramRequest(BaseModel):
    """Canvas JSON plus compilation options"""
    diagram: Any                                    # object or JSON string
    provider: Optional[str] = None                  # defaults to INFRAGRAPH_DEFAULT_PROVIDER
    valid_resource_types: Optional[List[str]] = None


class IssueResponse(BaseModel):
    code: str
    message: str
    node_id: Optional[str] = None


class ValidationResponse(BaseModel):
    valid: bool
    error_count: int
    warning_count: int
    errors: List[IssueResponse] = []
    warnings: List[IssueResponse] = []


class CompileResponse(BaseModel):
    status: str
    validation: ValidationResponse
    architecture: Dict[str, Any]
    order: List[str]
    levels: List[List[str]]
    has_cycle: bool = False
    cycle_info: List[str] = []
