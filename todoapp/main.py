import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from todoapp.config import LOG_LEVEL
from todoapp.database import init_db
from todoapp.errors import TaskServiceError
from todoapp.logging_setup import setup_logging
from todoapp.routers import auth, tasks

setup_logging(LOG_LEVEL)
logger = logging.getLogger(__name__)

init_db()

app = FastAPI(title="Todo API")

# API routers
app.include_router(auth.router)
app.include_router(tasks.router)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.exception_handler(TaskServiceError)
async def task_service_error_handler(request: Request, exc: TaskServiceError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def _field_name(loc) -> str:
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header", "cookie")]
    return ".".join(parts) or "body"


# Malformed request bodies are client input errors: 400 with one message per field
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [{"field": _field_name(e["loc"]), "message": e["msg"]} for e in exc.errors()]
    detail = errors[0]["message"] if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"detail": detail, "errors": errors})


# Generic error handler to return JSON errors for unexpected exceptions
@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
