"""Mapping of pipeline errors onto HTTP responses."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException

from utils.errors import AgentError, ErrorKind

STATUS_BY_KIND = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.INVALID_SYMBOL: 400,
    ErrorKind.SOURCE_UNAVAILABLE: 503,
    ErrorKind.GENERATION_FAILURE: 502,
    ErrorKind.INTERNAL_FAILURE: 500,
}


def status_for(error: AgentError) -> int:
    return STATUS_BY_KIND.get(error.kind, 500)


async def agent_error_handler(request: Request, exc: AgentError) -> JSONResponse:
    status_code = status_for(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log(f"{request.method} {request.url.path} -> {status_code} ({exc.kind.value}): {exc.message}")
    return JSONResponse(status_code=status_code, content={"message": exc.message})


async def http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    return JSONResponse(status_code=400, content={"message": f"Invalid request: {details}"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AgentError, agent_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
