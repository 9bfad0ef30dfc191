import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from kafka_records.core.exceptions import ProblemDetail, RecordOperationError

logger = logging.getLogger(__name__)

PROBLEM_JSON = "application/problem+json"


def _problem(status: int, title: str, detail: str) -> JSONResponse:
    body = ProblemDetail(type="about:blank", status=status, title=title, detail=detail)
    return JSONResponse(status_code=status, content=body.model_dump(mode="json"), media_type=PROBLEM_JSON)


def install_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RecordOperationError)
    async def record_error_handler(_: Request, exc: RecordOperationError):
        problem = exc.problem()
        return JSONResponse(
            status_code=problem.status,
            content=problem.model_dump(mode="json"),
            media_type=PROBLEM_JSON,
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Request, exc: ValueError):
        return _problem(400, "Bad Request", str(exc))

    # Catch-all
    @app.exception_handler(Exception)
    async def unhandled(_: Request, exc: Exception):
        logger.exception("Unhandled error", exc_info=exc)
        return _problem(500, "Internal Server Error", str(exc))
