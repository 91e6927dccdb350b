from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from notifier import __version__
from notifier.ask.registry import QuestionRegistry
from notifier.exceptions import AnswerMissing, AnswerNotFound
from notifier.middleware import RequestSizeLimitMiddleware, SecurityHeadersMiddleware
from notifier.routers import ask


def create_app(registry: Optional[QuestionRegistry] = None) -> FastAPI:
    """Build the answer-form app around ``registry``."""
    app = FastAPI(
        title="Notifier Ask",
        description="Answer questions posted by the notifier.",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.registry = registry if registry is not None else QuestionRegistry()

    app.add_middleware(RequestSizeLimitMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Exception Handlers ---

    @app.exception_handler(AnswerNotFound)
    async def answer_not_found_handler(request: Request, exc: AnswerNotFound):
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(AnswerMissing)
    async def answer_missing_handler(request: Request, exc: AnswerMissing):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = []
        for err in exc.errors():
            clean = {k: v for k, v in err.items() if k not in ("ctx", "input")}
            if "msg" in clean:
                clean["msg"] = str(clean["msg"])
            errors.append(clean)
        return JSONResponse(
            status_code=422,
            content={"error": "Validation error", "details": errors},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    # --- Routes ---

    @app.get("/health", summary="Health check")
    async def health(request: Request):
        return {
            "status": "ok",
            "pending": len(request.app.state.registry),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": __version__,
        }

    # Catch-all /{question_id} lives here, so it goes last
    app.include_router(ask.router)

    return app
