from typing import Any, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from resticapi.core.results import Failure, OperationOutcome
from resticapi.core.session import RepositorySession
from resticapi.services.restic import ResticService


def get_session(request: Request) -> RepositorySession:
    return request.app.state.session


def get_restic(request: Request) -> ResticService:
    return request.app.state.restic


def error_response(message: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def outcome_response(outcome: OperationOutcome, success_body: Optional[Any] = None) -> JSONResponse:
    """Success returns ``success_body`` if given, else the parsed restic output."""
    if isinstance(outcome, Failure):
        return error_response(outcome.message, outcome.status_code)
    body = success_body if success_body is not None else outcome.value
    return JSONResponse(status_code=200, content=body)
