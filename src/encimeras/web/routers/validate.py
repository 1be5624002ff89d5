"""Project validation endpoints."""

from fastapi import APIRouter

from encimeras.application.config import load_config_from_dict, validate_config
from encimeras.web.schemas.requests import ProjectRequest
from encimeras.web.schemas.responses import ValidationResultSchema

router = APIRouter(prefix="/validate", tags=["validate"])


@router.post("", response_model=ValidationResultSchema)
async def validate_project(request: ProjectRequest) -> ValidationResultSchema:
    """Validate a project without computing its layout.

    Schema errors are returned as a 422 by the ConfigError handler.
    """
    result = validate_config(load_config_from_dict(request.config))
    return ValidationResultSchema(
        is_valid=result.is_valid,
        errors=[{"message": e.message, "path": e.path} for e in result.errors],
        warnings=[
            {"message": w.message, "path": w.path, "suggestion": w.suggestion}
            for w in result.warnings
        ],
    )
