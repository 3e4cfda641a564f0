"""HTTP endpoint for the processing pipeline."""

import json
import time
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.concurrency import run_in_threadpool

from .. import __version__
from ..core.config import PipelineSettings
from ..core.exceptions import FetchError, ValidationError
from ..core.factories import ProcessingPipelineFactory
from ..core.logging_config import get_logger
from ..core.services import ImagePipelineOrchestrator
from .auth import AuthenticationError, BearerAuthenticator

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}

PROCESS_PATHS = ("/process-image", "/functions/v1/process-image")

logger = get_logger("api")


def _json(content: Dict[str, Any], status_code: int) -> JSONResponse:
    return JSONResponse(content=content, status_code=status_code, headers=CORS_HEADERS)


def _failure(message: str, status_code: int, start_time: Optional[float] = None) -> JSONResponse:
    content: Dict[str, Any] = {"success": False, "message": message}
    if start_time is not None:
        content["processingTimeMs"] = int((time.time() - start_time) * 1000)
    return _json(content, status_code)


def create_app(
    orchestrator: Optional[ImagePipelineOrchestrator] = None,
    settings: Optional[PipelineSettings] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        orchestrator: Pipeline to run; built from ``settings`` when omitted.
        settings: Startup settings; read from the environment when omitted.
    """
    if settings is None:
        settings = PipelineSettings.from_env()
    if orchestrator is None:
        orchestrator = ProcessingPipelineFactory.create_pipeline(settings=settings)

    app = FastAPI(title="Photo Variants", version=__version__)
    app.state.orchestrator = orchestrator
    app.state.authenticator = BearerAuthenticator(settings.jwt_secret, settings.jwt_audience)

    async def preflight() -> PlainTextResponse:
        return PlainTextResponse("ok", headers=CORS_HEADERS)

    async def process_image(request: Request) -> JSONResponse:
        start_time = time.time()

        try:
            request.app.state.authenticator.authenticate(request.headers.get("authorization"))
        except AuthenticationError as exc:
            logger.warning(f"Rejected request: {exc}")
            return _failure(str(exc), 401)

        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return _failure("Invalid JSON body", 400)
        if not isinstance(payload, dict):
            return _failure("Request body must be a JSON object", 400)

        pipeline: ImagePipelineOrchestrator = request.app.state.orchestrator
        try:
            result = await run_in_threadpool(pipeline.process_image, payload)
        except ValidationError as exc:
            return _failure(str(exc), 400)
        except FetchError as exc:
            logger.error(f"Error: {exc}")
            return _failure(f"Error processing image: {exc}", 500, start_time)
        except Exception as exc:  # noqa: BLE001
            logger.error(f"Error: {exc}", exc_info=True)
            return _failure(f"Error processing image: {exc}", 500, start_time)

        return _json(result.to_response(), 200)

    for path in PROCESS_PATHS:
        app.add_api_route(path, preflight, methods=["OPTIONS"], include_in_schema=False)
        app.add_api_route(path, process_image, methods=["POST"])

    @app.get("/health")
    async def health(request: Request) -> Dict[str, Any]:
        pipeline: ImagePipelineOrchestrator = request.app.state.orchestrator
        return {"status": "ok", "variants": [v.name for v in pipeline.variants]}

    return app
