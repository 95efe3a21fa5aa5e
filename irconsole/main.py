#!/usr/bin/env python3
"""
irconsole - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Builds the application context and one controller per entity kind
3. Serves the HTTP/SSE API

All business logic is in the modules, following black box principles.
"""

import asyncio
import json
import logging
import logging.config as log_config
import os
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Optional

import uvicorn
from fastapi import Body, Depends, FastAPI, Header, HTTPException, Query
from fastapi.responses import JSONResponse
from sse_starlette.sse import EventSourceResponse

from irconsole import __version__
from irconsole.config.provider import JsonSettingsProvider
from irconsole.logging_config import get_logging_config

# Import modules through their black box interfaces
from irconsole.modules.api import AccountSelectionRequest, AccountsResponse, CatalogResponse
from irconsole.modules.catalog import ENTITY_TYPES, ActionCategory, EntityKind, get_catalog
from irconsole.modules.config import get_config
from irconsole.modules.controller import AppContext, EntityController, build_controllers
from irconsole.modules.explain import StreamingExplanationClient
from irconsole.modules.gateway import HttpExecutionGateway

# Configure logging with health check suppression
log_config.dictConfig(get_logging_config(os.getenv("LOG_LEVEL", "INFO")))
logger = logging.getLogger(__name__)

# Application state (initialized at startup)
app_context: Optional[AppContext] = None
controllers: Dict[EntityKind, EntityController] = {}
api_keys: List[str] = []


def init_context(context: AppContext, keys: Optional[List[str]] = None) -> None:
    """Install the application context and build the controllers."""
    global app_context, controllers, api_keys
    app_context = context
    controllers = build_controllers(context)
    api_keys = list(keys or [])


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle - initialize and cleanup resources.
    """
    global app_context

    config = get_config()
    logger.info("Starting irconsole API...")

    gateway = HttpExecutionGateway(config.get("backend_url"), token=config.get("backend_token"))
    explanation_client = StreamingExplanationClient(JsonSettingsProvider(config.get("settings_path")))
    init_context(AppContext(gateway=gateway, explanation_client=explanation_client), config.get("api_keys"))
    if not api_keys:
        logger.warning("API_KEYS is not set - the console API is unauthenticated")

    logger.info(f"irconsole API started (backend: {config.get('backend_url')})")

    yield

    logger.info("Shutting down irconsole API...")
    for controller in controllers.values():
        controller.hide()
    await explanation_client.close()
    await gateway.close()
    app_context = None
    logger.info("irconsole API shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="irconsole API",
    description="Incident-response console - remote diagnostics with AI explanations",
    version=__version__,
    lifespan=lifespan,
)


# Dependency injection helpers
async def verify_api_key(
    x_api_key: Optional[str] = Header(None, description="API key for authentication")
) -> Optional[str]:
    """Check X-API-Key when API keys are configured."""
    if not api_keys:
        return None
    if not x_api_key or x_api_key not in api_keys:
        raise HTTPException(401, "Invalid API key")
    return x_api_key


def _parse_kind(kind: str) -> EntityKind:
    try:
        return EntityKind(kind)
    except ValueError:
        raise HTTPException(404, f"Unknown entity kind: {kind}")


def get_controller(kind: str) -> EntityController:
    entity_kind = _parse_kind(kind)
    if app_context is None:
        raise HTTPException(503, "Service not initialized")
    return controllers[entity_kind]


# Catalog and account endpoints


@app.get("/catalog/{kind}", response_model=CatalogResponse)
async def list_actions(
    kind: str,
    category: Optional[str] = Query(None, description="Only actions of this category"),
    _: Optional[str] = Depends(verify_api_key),
):
    """
    List the actions offered for an entity kind.

    Returns:
        200: Actions in menu order
        400: Unknown category
        404: Unknown kind
    """
    catalog = get_catalog(_parse_kind(kind))
    selected = ActionCategory(category) if category else None
    return {"kind": catalog.kind.value, "actions": [a.to_dict() for a in catalog.actions(selected)]}


@app.get("/accounts", response_model=AccountsResponse)
async def list_accounts(_: Optional[str] = Depends(verify_api_key)):
    """List the selectable execution accounts of the first connection."""
    if app_context is None:
        raise HTTPException(503, "Service not initialized")
    options = await app_context.accounts.load()
    return {"accounts": [option.to_dict() for option in options]}


# Modal endpoints


@app.post("/modals/{kind}/show")
async def show_menu(
    kind: str,
    entity: Dict[str, Any] = Body(..., description="Entity snapshot"),
    _: Optional[str] = Depends(verify_api_key),
):
    """
    Open the action menu for an entity snapshot.

    Returns:
        200: Modal view
        400: Snapshot does not match the kind
    """
    controller = get_controller(kind)
    entity.setdefault("kind", controller.kind.value)
    snapshot = ENTITY_TYPES[controller.kind].model_validate(entity)
    await controller.show(snapshot)
    return controller.view()


@app.put("/modals/{kind}/account")
async def select_account(
    kind: str,
    selection: AccountSelectionRequest,
    _: Optional[str] = Depends(verify_api_key),
):
    controller = get_controller(kind)
    controller.select_account(selection.username)
    return controller.view()


@app.post("/modals/{kind}/actions/{key}")
async def run_action(kind: str, key: str, _: Optional[str] = Depends(verify_api_key)):
    """
    Run an action on the entity whose menu is open.

    Failures of the action itself are part of the returned view.

    Returns:
        200: Modal view with the result
        409: No menu is open
    """
    controller = get_controller(kind)
    if not controller.menu_visible:
        raise HTTPException(409, "No action menu is open")
    await controller.select_action(key)
    return controller.view()


@app.post("/modals/{kind}/explain")
async def explain_result(kind: str, _: Optional[str] = Depends(verify_api_key)):
    """
    Stream an AI explanation of the displayed result.

    Returns:
        SSE stream: `chunk` events in arrival order, then `done` or `error`
        409: Nothing to explain yet
    """
    controller = get_controller(kind)
    if not controller.can_explain:
        raise HTTPException(409, "Nothing to explain: run an action first")

    async def event_generator() -> AsyncGenerator:
        queue: asyncio.Queue = asyncio.Queue()

        async def run():
            try:
                await controller.explain(sink=queue.put)
            finally:
                await queue.put(None)

        task = asyncio.create_task(run())
        try:
            while True:
                fragment = await queue.get()
                if fragment is None:
                    break
                yield {"event": "chunk", "data": json.dumps({"text": fragment})}

            await task
            panel = controller.explanation
            if panel.error:
                yield {"event": "error", "data": json.dumps({"error": panel.error, "text": panel.text})}
            else:
                yield {"event": "done", "data": json.dumps({"text": panel.text})}
        except asyncio.CancelledError:
            logger.info(f"Explanation stream for {kind} closed by client")
            task.cancel()
            raise

    return EventSourceResponse(event_generator())


@app.post("/modals/{kind}/hide")
async def hide_modal(kind: str, _: Optional[str] = Depends(verify_api_key)):
    controller = get_controller(kind)
    controller.hide()
    return controller.view()


@app.get("/modals/{kind}")
async def get_modal(kind: str, _: Optional[str] = Depends(verify_api_key)):
    return get_controller(kind).view()


# Health check


@app.get("/health")
async def health_check():
    """
    Health check endpoint.

    Returns:
        200: Service healthy
        503: Service not initialized
    """
    if app_context is None:
        return JSONResponse(status_code=503, content={"status": "unhealthy", "version": __version__})
    return {"status": "healthy", "controllers": len(controllers), "version": __version__}


# Error handlers


@app.exception_handler(ValueError)
async def validation_error_handler(request, exc):
    """Handle validation errors."""
    logger.error(f"Validation error: {exc}")
    return JSONResponse(status_code=400, content={"error": str(exc)})


def run() -> None:
    """Serve the API with uvicorn using the environment configuration."""
    config = get_config()
    uvicorn.run(
        "irconsole.main:app",
        host=config.get("host"),
        port=config.get("port"),
        log_level=config.get("log_level").lower(),
        reload=config.get("debug"),
        log_config=get_logging_config(config.get("log_level")),
    )


if __name__ == "__main__":
    run()
