#!/usr/bin/env python3
"""
PodRunner - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Verifies cluster permissions and initializes modules
3. Runs the API server

All business logic is in the modules, following black box principles.
"""

import asyncio
import logging
import uuid
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import FastAPI, Header, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from podrunner.config.provider import ConfigProvider, EnvConfigProvider
from podrunner.errors import ExecutionError, PodRunnerError
from podrunner.logging_config import configure_logging, get_logging_config
from podrunner.modules.api import ExecuteScriptRequest, ExecuteScriptResponse, ScriptSummary
from podrunner.modules.cluster import PermissionChecker
from podrunner.modules.orchestrator import ExecutionOrchestrator, ExecutionRequest

# Configuration provider (centralized config access)
config_provider: ConfigProvider = EnvConfigProvider()

configure_logging(config_provider.get_api_config().log_level)
logger = logging.getLogger("podrunner.main")

# Module instances (initialized at startup)
orchestrator: Optional[ExecutionOrchestrator] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle - verify permissions and build modules.
    """
    global orchestrator

    catalog_config = config_provider.get_catalog_config()
    target_config = config_provider.get_target_config()
    tracking_config = config_provider.get_tracking_config()

    logger.info("Starting PodRunner API with configuration:")
    logger.info(f"- Scripts Definition Path: {catalog_config.path}")
    logger.info(f"- Pod Label Selector: {target_config.label_selector}")
    logger.info(f"- Namespace: {target_config.namespace}")
    logger.info(
        f"- Process Tracking: {tracking_config.url if tracking_config.is_configured else 'disabled'}"
    )

    # Refuse to serve without the permissions we need; PermissionCheckError aborts startup
    checker = PermissionChecker(target_config.namespace, timeout=target_config.kubectl_timeout)
    await asyncio.to_thread(checker.check)

    orchestrator = ExecutionOrchestrator.from_config(
        catalog_config, target_config, tracking_config
    )
    logger.info("PodRunner API started successfully")

    yield

    logger.info("PodRunner API shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="PodRunner API",
    description="PodRunner - Maintenance scripts executed inside Kubernetes pods",
    version="1.0.0",
    lifespan=lifespan,
)


def get_orchestrator() -> ExecutionOrchestrator:
    if not orchestrator:
        raise HTTPException(503, "Service not initialized")
    return orchestrator


# Script Endpoints


@app.get("/v1/options", response_model=List[ScriptSummary])
async def list_scripts():
    """
    List the script catalog.

    Only names and parameter declarations are returned; command text
    never leaves the service.

    Returns:
        200: Catalog entries in catalog order
        500: Catalog missing or invalid
    """
    definitions = get_orchestrator().list_scripts()
    return [ScriptSummary.from_definition(d) for d in definitions]


@app.post("/v1/execute", response_model=ExecuteScriptResponse)
async def execute_script(
    request: ExecuteScriptRequest,
    x_correlation_id: Optional[str] = Header(None, description="Correlation ID for request tracking"),
):
    """
    Run a catalogued script inside the target pod.

    Returns:
        200: Script ran successfully
        400: Malformed request or missing required parameter
        404: Unknown script
        500: Catalog invalid or script failed (output still included)
        503: No target pod available
    """
    runner = get_orchestrator()
    correlation_id = request.tracking_id or x_correlation_id or str(uuid.uuid4())

    logger.info(
        f"Received execute request - taskName: '{request.task_name}', "
        f"script: '{request.script_name}', trackingId: {correlation_id}"
    )

    outcome = await runner.execute(
        ExecutionRequest(
            script_name=request.script_name,
            payload=request.task_data,
            correlation_id=correlation_id,
        )
    )

    return ExecuteScriptResponse(
        task_name=outcome.script_name,
        script_id=outcome.script_id,
        tracking_id=outcome.correlation_id,
        process_id=outcome.process_id,
        output=outcome.result.output,
    )


# Health/Monitoring Endpoints


@app.get("/healthz")
async def healthz():
    """
    Minimal health check endpoint for Kubernetes readiness/liveness probes.

    Relies on the startup permission check having passed.

    Returns:
        200: Service is running
    """
    return {"status": "ok"}


# Error handlers


@app.exception_handler(ExecutionError)
async def execution_error_handler(request: Request, exc: ExecutionError):
    """Handle failed scripts; the captured output is still returned."""
    outcome = exc.outcome
    body = ExecuteScriptResponse(
        task_name=outcome.script_name,
        script_id=outcome.script_id,
        tracking_id=outcome.correlation_id,
        process_id=outcome.process_id,
        output=outcome.result.output,
        error=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(by_alias=True))


@app.exception_handler(PodRunnerError)
async def podrunner_error_handler(request: Request, exc: PodRunnerError):
    """Handle request-level errors raised before the script ran."""
    logger.error(f"{type(exc).__name__}: {exc.message}. trackingId: {exc.correlation_id}")
    content = {"error": exc.message}
    if exc.correlation_id:
        content["trackingId"] = exc.correlation_id
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Handle malformed request payloads."""
    messages = [str(err.get("msg", err)) for err in exc.errors()]

    correlation_id = None
    if isinstance(exc.body, dict) and isinstance(exc.body.get("trackingId"), str):
        correlation_id = exc.body["trackingId"] or None
    correlation_id = correlation_id or request.headers.get("X-Correlation-ID")

    logger.error(f"Invalid request payload: {messages}. trackingId: {correlation_id}")
    content = {"error": "Invalid request payload format", "details": messages}
    if correlation_id:
        content["trackingId"] = correlation_id
    return JSONResponse(status_code=400, content=content)


if __name__ == "__main__":
    api_config = config_provider.get_api_config()
    uvicorn.run(
        "podrunner.main:app",
        host=api_config.host,
        port=api_config.port,
        log_level=api_config.log_level.lower(),
        reload=api_config.debug,
        log_config=get_logging_config(api_config.log_level),
    )
