"""JSON API over the client store, mirroring the server-rendered pages."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Request, Response
from fastapi.responses import JSONResponse

from portal.domain.clients import api_messages
from portal.services.client_service import (
    ClientNotFoundError,
    ClientService,
    ClientValidationError,
)

router = APIRouter(prefix="/api/clients", tags=["clients-api"])


def _get_client_service(request: Request) -> ClientService:
    svc = getattr(getattr(request.app, "state", None), "client_service", None)
    if not svc:
        raise RuntimeError("ClientService not configured")
    return svc


def _not_found(client_id: str) -> JSONResponse:
    return JSONResponse({"error": "Client Not Found", "id": client_id}, status_code=404)


def _as_fields(payload: Any) -> dict:
    # arrays, strings and other non-object bodies carry no fields at all
    return payload if isinstance(payload, dict) else {}


def _invalid(exc: ClientValidationError) -> JSONResponse:
    return JSONResponse({"error": "ValidationError", "details": api_messages(exc.details)}, status_code=400)


@router.get("")
def api_list_clients(request: Request):
    clients = _get_client_service(request).list_all()
    return {"total": len(clients), "clients": [c.to_dict() for c in clients]}


@router.get("/{client_id}")
def api_get_client(request: Request, client_id: str):
    try:
        client = _get_client_service(request).get(client_id)
    except ClientNotFoundError:
        return _not_found(client_id)
    return {"client": client.to_dict()}


@router.post("", status_code=201)
def api_create_client(request: Request, payload: Any = Body(None)):
    try:
        client = _get_client_service(request).create(_as_fields(payload))
    except ClientValidationError as exc:
        return _invalid(exc)
    return {"client": client.to_dict()}


@router.put("/{client_id}")
def api_update_client(request: Request, client_id: str, payload: Any = Body(None)):
    try:
        client = _get_client_service(request).update(client_id, _as_fields(payload))
    except ClientNotFoundError:
        return _not_found(client_id)
    except ClientValidationError as exc:
        return _invalid(exc)
    return {"client": client.to_dict()}


@router.delete("/{client_id}", status_code=204)
def api_delete_client(request: Request, client_id: str):
    try:
        _get_client_service(request).delete(client_id)
    except ClientNotFoundError:
        return _not_found(client_id)
    return Response(status_code=204)
