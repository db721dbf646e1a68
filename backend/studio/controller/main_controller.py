"""FastAPI application bootstrap and routing setup."""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from termcolor import colored

from studio.config.settings import Settings, load_settings
from studio.controller.studio_controller import router as studio_router
from studio.handlers.error_handler import MapExceptions as me
from studio.services.capability.base import GenerativeCapability
from studio.services.capability.main import build_capability
from studio.services.refinement_service.orchestrator import PromptRefinementOrchestrator
from studio.services.session_service.session import SessionStore
from studio.services.session_service.workflow import StudioWorkflow
from studio.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    capability: Optional[GenerativeCapability] = None,
) -> FastAPI:
    """Build the studio API. Tests pass their own settings and capability."""
    settings = settings or load_settings()
    AppLogger.init(level=settings.log_level_value, log_to_file=settings.log_to_file)

    capability = capability or build_capability(settings)
    orchestrator = PromptRefinementOrchestrator(capability)

    app = FastAPI(title="Product Photo Studio")
    app.state.settings = settings
    app.state.sessions = SessionStore(max_sessions=settings.max_sessions)
    app.state.workflow = StudioWorkflow(orchestrator)
    me.register_exception_handlers(app)

    mode = settings.run_mode
    logger.info(colored(f"Running in {mode} mode", "yellow"))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )
    app.include_router(studio_router)

    @app.get("/", tags=["Health"])
    def root():
        """Health probe indicating API wiring and logger setup succeeded."""
        return {"status": "ok", "message": "Setup Successfull", "mode": mode}

    @app.get("/health", tags=["Health"])
    def health_check():
        """Secondary health endpoint used by deployments and monitoring probes."""
        return {"status": "ok", "message": "FastAPI server running!", "mode": mode}

    return app


app = create_app()
