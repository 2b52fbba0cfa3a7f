"""Server-rendered client pages: list, profile, create/edit forms and delete confirmation."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from portal.core import csrf
from portal.domain.clients import ClientFields, clean_client_fields
from portal.routers.pages import render_message
from portal.services.client_service import (
    ClientNotFoundError,
    ClientService,
    ClientValidationError,
)

router = APIRouter(prefix="/clients", tags=["clients"])


def _get_client_service(request: Request) -> ClientService:
    svc = getattr(getattr(request.app, "state", None), "client_service", None)
    if not svc:
        raise RuntimeError("ClientService not configured")
    return svc


def _render(request: Request, template: str, status_code: int = 200, **context) -> HTMLResponse:
    tpl = getattr(getattr(request.app, "state", None), "templates", None)
    if not tpl:
        raise RuntimeError("Templates not configured")
    token = csrf.issue_token(request)
    context.setdefault("errors", [])
    context.update(now=datetime.now().strftime("%Y-%m-%d %H:%M:%S"), csrf_token=token)
    response = tpl.TemplateResponse(request, template, context, status_code=status_code)
    return csrf.attach_token(response, token)


def _not_found(request: Request, client_id: str) -> HTMLResponse:
    return render_message(
        request,
        "Client Not Found",
        f"No client record found for id: {client_id}",
        status_code=404,
    )


def _submitted(full_name: str, email: str, risk_category: str) -> ClientFields:
    return clean_client_fields({"fullName": full_name, "email": email, "riskCategory": risk_category})


def _form_values(fields: ClientFields, fallback_risk: str) -> dict:
    return {
        "fullName": fields.full_name,
        "email": fields.email,
        "riskCategory": fields.risk_category or fallback_risk,
    }


@router.get("", response_class=HTMLResponse)
def clients_list(request: Request):
    clients = _get_client_service(request).list_all()
    return _render(
        request,
        "clients.html",
        page_title="Clients",
        clients=[c.to_dict() for c in clients],
        total_clients=len(clients),
    )


@router.get("/new", response_class=HTMLResponse)
def client_create_form(request: Request):
    return _render(
        request,
        "client_create.html",
        page_title="Create Client",
        form={"fullName": "", "email": "", "riskCategory": "Low"},
    )


@router.post("")
def client_create(
    request: Request,
    full_name: str = Form("", alias="fullName"),
    email: str = Form(""),
    risk_category: str = Form("", alias="riskCategory"),
    csrf_token: str = Form(""),
):
    csrf.validate_csrf(request, csrf_token)
    fields = _submitted(full_name, email, risk_category)
    try:
        client = _get_client_service(request).create(fields)
    except ClientValidationError as exc:
        return _render(
            request,
            "client_create.html",
            status_code=400,
            page_title="Create Client",
            errors=exc.details,
            form=_form_values(fields, "Low"),
        )
    return RedirectResponse(f"/clients/{client.id}", status_code=303)


@router.get("/{client_id}", response_class=HTMLResponse)
def client_details(request: Request, client_id: str):
    client = _get_client_service(request).find_by_id(client_id)
    if client is None:
        return _not_found(request, client_id)
    return _render(request, "client_details.html", page_title="Client Profile", client=client.to_dict())


@router.get("/{client_id}/edit", response_class=HTMLResponse)
def client_edit_form(request: Request, client_id: str):
    client = _get_client_service(request).find_by_id(client_id)
    if client is None:
        return _not_found(request, client_id)
    current = client.to_dict()
    return _render(
        request,
        "client_edit.html",
        page_title="Edit Client",
        client=current,
        form={key: current[key] for key in ("fullName", "email", "riskCategory")},
    )


@router.post("/{client_id}")
def client_update(
    request: Request,
    client_id: str,
    full_name: str = Form("", alias="fullName"),
    email: str = Form(""),
    risk_category: str = Form("", alias="riskCategory"),
    csrf_token: str = Form(""),
):
    csrf.validate_csrf(request, csrf_token)
    svc = _get_client_service(request)
    fields = _submitted(full_name, email, risk_category)
    try:
        client = svc.update(client_id, fields)
    except ClientNotFoundError:
        return _not_found(request, client_id)
    except ClientValidationError as exc:
        current = svc.find_by_id(client_id)
        if current is None:
            return _not_found(request, client_id)
        return _render(
            request,
            "client_edit.html",
            status_code=400,
            page_title="Edit Client",
            errors=exc.details,
            client=current.to_dict(),
            form=_form_values(fields, current.risk_category),
        )
    return RedirectResponse(f"/clients/{client.id}", status_code=303)


@router.get("/{client_id}/delete", response_class=HTMLResponse)
def client_delete_confirm(request: Request, client_id: str):
    client = _get_client_service(request).find_by_id(client_id)
    if client is None:
        return _not_found(request, client_id)
    return _render(request, "client_delete.html", page_title="Delete Client", client=client.to_dict())


@router.post("/{client_id}/delete")
def client_delete(request: Request, client_id: str, csrf_token: str = Form("")):
    csrf.validate_csrf(request, csrf_token)
    try:
        _get_client_service(request).delete(client_id)
    except ClientNotFoundError:
        return _not_found(request, client_id)
    return RedirectResponse("/clients", status_code=303)
