import logging
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from resume_api.config import Settings, configure_logging, load_settings
from resume_api.errors import RelayError, ValidationError
from resume_api.routes import router
from resume_api.services.llm import GeminiClient, LLMClient

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


def _validation_message(exc: RequestValidationError) -> str:
    fields = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        if loc:
            fields.append(".".join(loc))
    if not fields:
        return "Invalid request body."
    return "Missing or invalid required field(s): " + ", ".join(dict.fromkeys(fields))


async def relay_error_handler(request, exc: RelayError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def request_validation_handler(request, exc: RequestValidationError):
    err = ValidationError(_validation_message(exc))
    return JSONResponse(status_code=err.status_code, content=err.to_body())


async def http_error_handler(request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail), "kind": "http_error"},
        headers=getattr(exc, "headers", None),
    )


def create_app(settings: Optional[Settings] = None, llm_client: Optional[LLMClient] = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="AI Resume Builder API", version="1.0")
    app.state.settings = settings
    app.state.llm_client = llm_client or GeminiClient(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.web_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RelayError, relay_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    app.include_router(router)

    @app.get("/", include_in_schema=False)
    def index():
        return FileResponse(STATIC_DIR / "index.html")

    logger.info("Resume API ready (model=%s)", settings.gemini_model)
    return app


app = create_app()


def run() -> None:
    settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port)
