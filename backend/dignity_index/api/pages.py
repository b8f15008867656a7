"""Evaluator page: server-rendered form backed by per-page ``AnalyzerPage`` state."""

from __future__ import annotations

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse

from dignity_index.core.config import get_settings
from dignity_index.services.page_controller import PageSessionStore
from dignity_index.services.page_html import render_page

router = APIRouter()

SESSION_COOKIE = "dignity_page"

page_sessions = PageSessionStore(max_sessions=get_settings().page_session_cap)


def _page_headers() -> dict:
    return {
        "Cache-Control": "no-store",
        "Pragma": "no-cache",
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Content-Security-Policy": (
            "default-src 'self'; "
            "script-src 'self' 'unsafe-inline'; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data:; "
            "form-action 'self'; "
            "connect-src 'self'"
        ),
    }


def _html(session_id: str, body: str) -> HTMLResponse:
    response = HTMLResponse(body, headers=_page_headers())
    response.set_cookie(
        SESSION_COOKIE,
        session_id,
        httponly=True,
        samesite="lax",
        secure=get_settings().session_cookie_secure,
    )
    return response


@router.get("/", response_class=HTMLResponse)
async def evaluator_page(request: Request):
    # A reload starts over: the previous page's result is dropped.
    page_sessions.discard(request.cookies.get(SESSION_COOKIE))
    session_id, page = page_sessions.create()
    return _html(session_id, render_page(page))


@router.post("/", response_class=HTMLResponse)
async def evaluator_submit(request: Request, text: str = Form("")):
    session_id, page = page_sessions.get_or_create(request.cookies.get(SESSION_COOKIE))
    await page.handle_analyze(text)
    return _html(session_id, render_page(page))
