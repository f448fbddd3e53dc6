import logging

from fastapi import APIRouter, Depends, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from polite_proxy.core import CORS_HEADERS, JSON_HEADERS, PipelineError
from polite_proxy.core.errors import INTERNAL_ERROR_MESSAGE
from polite_proxy.dependencies import get_pipeline
from polite_proxy.schemas import ErrorResponse, SubmitMessageResponse
from polite_proxy.services import SubmitMessagePipeline

logger = logging.getLogger(__name__)

SUBMIT_MESSAGE_PATH = "/submit-message"

router = APIRouter(tags=["messages"])


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        ErrorResponse(error=message).model_dump(),
        status_code=status_code,
        headers=JSON_HEADERS,
    )


@router.options(SUBMIT_MESSAGE_PATH)
async def submit_message_preflight():
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@router.post(
    SUBMIT_MESSAGE_PATH,
    response_model=SubmitMessageResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def submit_message(
    request: Request,
    pipeline: SubmitMessagePipeline = Depends(get_pipeline),
):
    """Rewrite the caller's message politely and store only the rewritten text."""
    try:
        stored = await pipeline.run(
            request.headers.get("Authorization"),
            await request.body(),
        )
    except PipelineError as e:
        logger.warning(
            "submit-message failed stage=%s kind=%s: %s",
            e.stage.value if e.stage else None,
            e.kind.value,
            e.message,
        )
        return error_response(e.public_message, e.status_code)
    except Exception:
        logger.exception("submit-message unexpected error")
        return error_response(INTERNAL_ERROR_MESSAGE, 500)
    return JSONResponse(
        SubmitMessageResponse(data=stored).model_dump(mode="json"),
        headers=JSON_HEADERS,
    )


async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    """Unmatched methods on /submit-message get the JSON error body and CORS headers."""
    if exc.status_code == 405 and request.url.path == SUBMIT_MESSAGE_PATH:
        return error_response("Method not allowed", 405)
    return await http_exception_handler(request, exc)
