"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated, Any

from fastapi import Body, FastAPI, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from body_monitor.api.schemas import LoginRequest, SessionPayload, session_payload
from body_monitor.app_logging import configure_logging
from body_monitor.containers import AppContainer
from body_monitor.services.notifications import NoticeKind
from body_monitor.services.sessions import SessionHandle
from body_monitor.services.sync import Outcome

_OUTCOME_STATUS = {
    Outcome.APPLIED: status.HTTP_200_OK,
    Outcome.BUSY: status.HTTP_409_CONFLICT,
    Outcome.REJECTED: status.HTTP_409_CONFLICT,
    Outcome.FAILED: status.HTTP_502_BAD_GATEWAY,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Body monitor started (%s)", container.settings.environment)
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/sessions", status_code=status.HTTP_201_CREATED)
    async def login(payload: LoginRequest, request: Request) -> SessionPayload:
        """Sign an account in and load its record."""
        state_container: AppContainer = request.app.state.container
        try:
            handle = await state_container.session_registry.login(payload.account_id)
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, detail=str(exc)
            ) from exc
        return session_payload(handle.controller.view(), handle.inbox.drain())

    @app.get("/sessions/{account_id}")
    async def get_session(account_id: str, request: Request) -> SessionPayload:
        """Return the current render input for a session."""
        handle = _require_handle(request, account_id)
        return session_payload(handle.controller.view(), handle.inbox.drain())

    @app.post("/sessions/{account_id}/refresh")
    async def refresh(account_id: str, request: Request) -> SessionPayload:
        """Retry loading the record after a failed check."""
        handle = _require_handle(request, account_id)
        await handle.controller.refresh()
        return session_payload(handle.controller.view(), handle.inbox.drain())

    @app.post("/sessions/{account_id}/registration")
    async def register(
        account_id: str,
        form: Annotated[dict[str, Any], Body()],
        request: Request,
    ) -> JSONResponse:
        """Submit the first-time registration form."""
        handle = _require_handle(request, account_id)
        outcome = await handle.controller.submit_registration(form)
        return _outcome_response(handle, outcome)

    @app.post("/sessions/{account_id}/weights")
    async def add_weight(
        account_id: str,
        form: Annotated[dict[str, Any], Body()],
        request: Request,
    ) -> JSONResponse:
        """Submit a new weight sample."""
        handle = _require_handle(request, account_id)
        outcome = await handle.controller.submit_weight(form)
        return _outcome_response(handle, outcome)

    @app.delete("/sessions/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def logout(account_id: str, request: Request) -> Response:
        """Sign an account out."""
        state_container: AppContainer = request.app.state.container
        if not state_container.session_registry.logout(account_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app


def _require_handle(request: Request, account_id: str) -> SessionHandle:
    container: AppContainer = request.app.state.container
    handle = container.session_registry.get(account_id)
    if handle is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Not signed in"
        )
    return handle


def _outcome_response(handle: SessionHandle, outcome: Outcome) -> JSONResponse:
    notices = handle.inbox.drain()
    status_code = _OUTCOME_STATUS[outcome]
    if outcome is Outcome.REJECTED and any(
        notice.kind is NoticeKind.INVALID_INPUT for notice in notices
    ):
        status_code = status.HTTP_422_UNPROCESSABLE_CONTENT
    payload = session_payload(handle.controller.view(), notices, outcome.value)
    return JSONResponse(status_code=status_code, content=payload.model_dump(mode="json"))
