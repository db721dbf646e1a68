"""Dependency providers for the studio router."""

from fastapi import Request

from studio.config.options import Options
from studio.services.session_service.session import SessionStore
from studio.services.session_service.workflow import StudioWorkflow


class StudioServices:
    """Expose the app-scoped services to request handlers.

    The store and workflow live on ``app.state`` and are built by the app factory.
    """

    @staticmethod
    def get_store(request: Request) -> SessionStore:
        """Return the session store owned by this app."""
        return request.app.state.sessions

    @staticmethod
    def get_workflow(request: Request) -> StudioWorkflow:
        """Return the workflow wired to this app's capability."""
        return request.app.state.workflow

    @staticmethod
    def get_options() -> Options:
        """Return the option catalog used by the studio controls."""
        return Options()
