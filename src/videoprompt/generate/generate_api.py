"""HTTP routes for generate operations."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from .generate_errors import GenerateError, InputValidationError, PayloadTooLargeError
from .generate_models import FailureReason, GenerationResult, SubmissionMode
from .generate_schemas import (
    GenerateErrorSchema,
    GenerateResultSchema,
    ModelInfoSchema,
    ModelListSchema,
    UriSubmissionSchema,
)
from .generate_service import GenerateService

router = APIRouter(tags=["generate"])
logger = logging.getLogger(__name__)

HTTP_413_CONTENT_TOO_LARGE = 413

_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": GenerateErrorSchema},
    HTTP_413_CONTENT_TOO_LARGE: {"model": GenerateErrorSchema},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": GenerateErrorSchema},
}


def get_generate_service(request: Request) -> GenerateService:
    """Fetch generate service from application state."""
    try:
        return request.app.state.generate_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("GenerateService is not configured") from exc


@router.post(
    "/generate",
    response_model=GenerateResultSchema,
    responses=_ERROR_RESPONSES,
)
async def generate(
    request: Request,
    service: GenerateService = Depends(get_generate_service),
) -> JSONResponse:
    """Turn a style video and a target video into a generation prompt."""
    try:
        mode = _submission_mode(request)
        if not service.accepts(mode):
            raise InputValidationError(
                f"Submission mode '{mode.value}' is disabled on this server"
            )
        if mode is SubmissionMode.UPLOAD:
            result = await _generate_from_form(request, service)
        else:
            result = await _generate_from_json(request, service)
    except InputValidationError as exc:
        logger.warning(
            "generate.invalid_request",
            extra={"error": exc.message, "failure_reason": exc.failure_reason.value},
        )
        code = (
            HTTP_413_CONTENT_TOO_LARGE
            if isinstance(exc, PayloadTooLargeError)
            else status.HTTP_400_BAD_REQUEST
        )
        return _error_response(code, exc)
    except GenerateError as exc:
        logger.error(
            "generate.request.failed",
            extra={
                "error": exc.message,
                "details": exc.details,
                "failure_reason": exc.failure_reason.value,
            },
        )
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc)
    except Exception as exc:  # pragma: no cover - defensive
        logger.exception("generate.unexpected_error")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=GenerateErrorSchema(
                error=str(exc) or "Internal Server Error",
                details=repr(exc),
                failure_reason=FailureReason.INTERNAL_ERROR.value,
            ).model_dump(),
        )

    return JSONResponse(content=GenerateResultSchema(result=result.text).model_dump())


@router.get("/models", response_model=ModelListSchema, responses=_ERROR_RESPONSES)
async def list_models(
    service: GenerateService = Depends(get_generate_service),
) -> JSONResponse:
    """List models available to the configured API key."""
    try:
        models = await service.list_models()
    except GenerateError as exc:
        logger.error(
            "generate.models.failed",
            extra={"error": exc.message, "details": exc.details},
        )
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc)
    payload = ModelListSchema(
        models=[ModelInfoSchema(name=m.name, display_name=m.display_name) for m in models]
    )
    return JSONResponse(content=payload.model_dump())


def _submission_mode(request: Request) -> SubmissionMode:
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith("multipart/form-data"):
        return SubmissionMode.UPLOAD
    if content_type.startswith("application/json"):
        return SubmissionMode.URI
    raise InputValidationError(
        "Expected a multipart/form-data or application/json body",
        details=f"content-type={content_type or 'missing'}",
    )


async def _generate_from_form(
    request: Request, service: GenerateService
) -> GenerationResult:
    try:
        async with request.form() as form:
            style = _upload_field(form, "styleVideo")
            target = _upload_field(form, "targetVideo")
            if style is None or target is None:
                raise InputValidationError(
                    "Both 'styleVideo' and 'targetVideo' are required."
                )
            return await service.generate_from_uploads(style, target)
    except StarletteHTTPException as exc:
        raise InputValidationError("Malformed multipart body", details=exc.detail) from exc


async def _generate_from_json(
    request: Request, service: GenerateService
) -> GenerationResult:
    try:
        body = UriSubmissionSchema.model_validate(await request.json())
    except ValueError as exc:
        raise InputValidationError(
            "Request body must be a JSON object", details=str(exc)
        ) from exc
    style_uri = (body.style_uri or "").strip()
    target_uri = (body.target_uri or "").strip()
    if not style_uri or not target_uri:
        raise InputValidationError("Both 'styleUri' and 'targetUri' are required.")
    return await service.generate_from_uris(style_uri, target_uri)


def _upload_field(form: FormData, name: str) -> UploadFile | None:
    value = form.get(name)
    if isinstance(value, UploadFile) and value.filename:
        return value
    return None


def _error_response(code: int, exc: GenerateError) -> JSONResponse:
    body = GenerateErrorSchema(
        error=exc.message,
        details=exc.details or f"{type(exc).__name__}: {exc.message}",
        failure_reason=exc.failure_reason.value,
    )
    return JSONResponse(status_code=code, content=body.model_dump())
