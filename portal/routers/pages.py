from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, PlainTextResponse

router = APIRouter(prefix="", tags=["pages"])

HOME_MESSAGE = (
    "This portal demonstrates server-side rendering with Jinja2 layouts and partials. "
    "JSON APIs are available under /api/clients for a browser frontend."
)


def _templates(request: Request):
    tpl = getattr(getattr(request.app, "state", None), "templates", None)
    if tpl:
        return tpl
    raise RuntimeError("Templates not configured")


def render_message(request: Request, title: str, message: str, status_code: int = 200) -> HTMLResponse:
    """Render the home layout with a custom title/message (also used as the 404 page)."""
    context = {
        "page_title": title,
        "message": message,
        "now": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
    }
    return _templates(request).TemplateResponse(request, "home.html", context, status_code=status_code)


@router.get("/", response_class=HTMLResponse)
def home(request: Request):
    return render_message(request, "Home", HOME_MESSAGE)


# Browsers probe this path; answer quietly instead of logging a 404
@router.get("/.well-known/appspecific/com.chrome.devtools.json")
def chrome_devtools_wellknown():
    return PlainTextResponse("", status_code=204)
