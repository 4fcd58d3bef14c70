from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import services
from .api import router as api_router
from .auth import (
    STAFF_ROLES,
    AuthCookieMiddleware,
    clear_login_cookie,
    get_token,
    is_permitted,
    set_login_cookie,
)
from .db import dispose_db, get_session, init_db, session_factory
from .errors import APIError, api_error_handler, store_error_handler
from .security import SessionToken
from .settings import Settings, get_settings, request_settings
from .views import EMPTY_MESSAGE, RunnerTable, client_config, delete_toast, toast_for_notice

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    init_db(settings.LAPTRACKER_DB_URL)
    s = session_factory()()
    try:
        services.ensure_superadmin(s, settings)
    finally:
        s.close()
    yield
    dispose_db()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.LAPTRACKER_LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Laptracker", lifespan=lifespan)
    app.state.settings = settings
    app.add_middleware(
        AuthCookieMiddleware,
        max_age=settings.LAPTRACKER_SESSION_MAX_AGE,
        secure=settings.LAPTRACKER_COOKIE_SECURE,
    )
    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)

    app.include_router(api_router, prefix="/api", tags=["api"])
    _register_pages(app)
    return app


def _register_pages(app: FastAPI) -> None:

    @app.get("/")
    def home():
        return RedirectResponse(url="/runners", status_code=302)

    # ---------------------------
    # Auth
    # ---------------------------

    @app.get("/login", response_class=HTMLResponse)
    def login_form(request: Request, token=Depends(get_token)):
        if token:
            return RedirectResponse(url="/runners", status_code=302)
        return templates.TemplateResponse(request, "login.html", {"user": None, "error": None})

    @app.post("/login")
    def login_submit(
        request: Request,
        email: str = Form(...),
        password: str = Form(...),
        session: Session = Depends(get_session),
        settings: Settings = Depends(request_settings),
    ):
        u = services.authenticate_user(session, email=email.strip(), password=password)
        if not u:
            logger.info("failed login for %s", email.strip())
            return templates.TemplateResponse(
                request,
                "login.html",
                {"user": None, "error": "E-Mail oder Passwort falsch."},
                status_code=401,
            )
        set_login_cookie(request, SessionToken(email=u.email, user_role=u.role), settings)
        return RedirectResponse(url="/runners", status_code=302)

    @app.post("/logout")
    def logout(request: Request):
        clear_login_cookie(request)
        return RedirectResponse(url="/login", status_code=302)

    # ---------------------------
    # Runners
    # ---------------------------

    @app.get("/runners", response_class=HTMLResponse)
    def runners_page(
        request: Request,
        notice: Optional[str] = Query(default=None),
        token=Depends(get_token),
        session: Session = Depends(get_session),
    ):
        if not is_permitted(token, STAFF_ROLES):
            return templates.TemplateResponse(
                request, "access_denied.html", {"user": token}, status_code=403
            )
        table = RunnerTable(services.list_runners(session))
        return templates.TemplateResponse(
            request,
            "runners.html",
            {
                "user": token,
                "table": table,
                "initial_runners": table.to_json(),
                "client_config": client_config(),
                "empty_message": EMPTY_MESSAGE,
                "toast": toast_for_notice(notice),
            },
        )

    # Form fallback for the delete button when scripts are off.
    @app.post("/runners/{number}/delete")
    def runner_delete_submit(number: int, token=Depends(get_token), session: Session = Depends(get_session)):
        if token is None or not token.email:
            return RedirectResponse(url="/login", status_code=302)
        if not is_permitted(token, STAFF_ROLES):
            status = 403
        else:
            try:
                services.delete_runner(session, number)
                status = 200
            except services.RunnerNotFound:
                status = 404
        toast = delete_toast(status)
        return RedirectResponse(url=f"/runners?notice={toast.key}", status_code=302)


app = create_app()
