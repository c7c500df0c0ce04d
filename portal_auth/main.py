"""
Email Service Portal
Handles: login / register form events, token display, authorized email sends
Port: 8000

The browser page only fires events (toggle form, pick a tab, submit). All
auth state lives in the AuthController held on app.state; display
preferences live in their own DisplaySettings object next to it.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .client import EmailServiceClient
from .controller import AuthController, Outcome, describe_failure
from .database import SqlTokenStore
from .exceptions import AuthClientError, SubmissionInProgress, TokenStoreError, TransportError
from .models import DisplaySettings, EmailMessage, ModeSwitch, SubmitRequest
from .notifications import NotificationFeed

logger = logging.getLogger(__name__)


def build_controller() -> AuthController:
    return AuthController(
        service=EmailServiceClient(),
        token_store=SqlTokenStore(),
        notifier=NotificationFeed(),
    )


def get_controller(request: Request) -> AuthController:
    return request.app.state.controller


def get_display(request: Request) -> DisplaySettings:
    return request.app.state.display


def create_app(
    controller: Optional[AuthController] = None,
    display: Optional[DisplaySettings] = None,
) -> FastAPI:

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        config.configure_logging()
        if getattr(app.state, "controller", None) is None:
            app.state.controller = build_controller()
        logger.info("[portal] Started against %s", config.EMAIL_SERVICE_URL)
        yield

    app = FastAPI(title="Email Service Portal", version="1.0.0", lifespan=lifespan)
    app.state.controller = controller
    app.state.display = display or DisplaySettings()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Endpoints ─────────────────────────────────────────────────────────────

    @app.get("/")
    async def root():
        return {"app": "Email Service Portal", "version": "1.0.0", "status": "operational", "docs": "/docs"}

    @app.get("/health")
    async def health():
        return {"status": "ok", "service": "portal"}

    @app.get("/session")
    async def session(ctrl: AuthController = Depends(get_controller)):
        return ctrl.snapshot()

    @app.post("/auth/toggle")
    async def toggle_form(ctrl: AuthController = Depends(get_controller)):
        ctrl.toggle_form()
        return ctrl.snapshot()

    @app.post("/auth/mode")
    async def switch_mode(body: ModeSwitch, ctrl: AuthController = Depends(get_controller)):
        try:
            ctrl.switch_mode(body.mode)
        except SubmissionInProgress as e:
            raise HTTPException(status_code=409, detail=e.detail)
        return ctrl.snapshot()

    @app.post("/auth/submit")
    async def submit(body: SubmitRequest, ctrl: AuthController = Depends(get_controller)):
        result = await ctrl.submit(ctrl.mode, body.model_dump(exclude_none=True))

        if result.outcome is Outcome.IGNORED:
            raise HTTPException(status_code=409, detail="Submission not accepted right now")
        if result.outcome is Outcome.INVALID:
            raise HTTPException(status_code=400, detail={"field_errors": result.field_errors})
        if result.outcome is Outcome.FAILED:
            if isinstance(result.error, TransportError):
                status = 503
            elif isinstance(result.error, TokenStoreError):
                status = 500
            else:
                status = 400
            raise HTTPException(status_code=status, detail=result.message)

        return {"outcome": result.outcome.value, "message": result.message, "session": ctrl.snapshot()}

    @app.get("/notifications")
    async def notifications(ctrl: AuthController = Depends(get_controller)):
        return {"notifications": [n.model_dump() for n in ctrl.notifier.recent()]}

    @app.get("/display")
    async def get_display_settings(display: DisplaySettings = Depends(get_display)):
        return display.model_dump()

    @app.post("/display/dark-mode")
    async def toggle_dark_mode(display: DisplaySettings = Depends(get_display)):
        display.dark_mode = not display.dark_mode
        return display.model_dump()

    @app.post("/email/send")
    async def send_email(message: EmailMessage, ctrl: AuthController = Depends(get_controller)):
        if not ctrl.session.is_authenticated:
            raise HTTPException(status_code=401, detail="Log in to get a token first")
        try:
            return await ctrl.service.send_email(ctrl.session.token, message)
        except TransportError:
            raise HTTPException(status_code=503, detail="Email service unavailable")
        except AuthClientError as e:
            status = getattr(e, "status_code", 502)
            raise HTTPException(status_code=status, detail=describe_failure(e))

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("portal_auth.main:app", host="0.0.0.0", port=8000, reload=True)
