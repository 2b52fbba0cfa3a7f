"""
Server-rendered pages, including the CSRF-protected forms.
"""
from __future__ import annotations

from portal.core.csrf import CSRF_COOKIE_NAME

ADA_FORM = {"fullName": "Ada Lovelace", "email": "ada@example.com", "riskCategory": "low"}


def _token(http, path="/clients/new"):
    resp = http.get(path)
    assert resp.status_code == 200
    token = http.cookies.get(CSRF_COOKIE_NAME)
    assert token
    assert token in resp.text
    return token


def _create(http, form=ADA_FORM):
    return http.post("/clients", data={**form, "csrf_token": _token(http)}, follow_redirects=False)


def test_home_page(http):
    resp = http.get("/")
    assert resp.status_code == 200
    assert "server-side rendering" in resp.text
    assert resp.headers["x-frame-options"] == "DENY"


def test_empty_list_page(http):
    resp = http.get("/clients")
    assert resp.status_code == 200
    assert "0 clients on file" in resp.text


def test_create_redirects_to_profile(http, seed):
    seed([{"id": 1, "fullName": "Grace Hopper", "email": "grace@example.com", "riskCategory": "Low", "createdDate": "2026-01-01"}])

    resp = _create(http)

    assert resp.status_code == 303
    assert resp.headers["location"] == "/clients/2"
    profile = http.get("/clients/2")
    assert profile.status_code == 200
    assert "Ada Lovelace" in profile.text
    assert "Low" in profile.text


def test_create_errors_echo_form_values(http, data_file):
    resp = _create(http, {"fullName": "  ", "email": "nope", "riskCategory": "purple"})

    assert resp.status_code == 400
    assert "Full name is required." in resp.text
    assert "Email format is invalid." in resp.text
    assert "Risk category must be Low, Medium, or High." in resp.text
    assert 'value="nope"' in resp.text
    assert '<option value="Low" selected>' in resp.text
    assert not data_file.exists()


def test_form_post_without_csrf_token_is_rejected(http, data_file):
    http.get("/clients/new")
    resp = http.post("/clients", data=ADA_FORM, follow_redirects=False)
    assert resp.status_code == 403
    assert not data_file.exists()


def test_form_post_with_foreign_origin_is_rejected(http):
    token = _token(http)
    resp = http.post(
        "/clients",
        data={**ADA_FORM, "csrf_token": token},
        headers={"origin": "https://evil.example"},
        follow_redirects=False,
    )
    assert resp.status_code == 403


def test_missing_client_renders_not_found_page(http):
    for path in ("/clients/999", "/clients/999/edit", "/clients/999/delete", "/clients/abc"):
        resp = http.get(path)
        assert resp.status_code == 404
        assert "Client Not Found" in resp.text
    assert "No client record found for id: 999" in http.get("/clients/999").text


def test_edit_flow(http):
    _create(http)
    form = http.get("/clients/1/edit")
    assert form.status_code == 200
    assert 'value="Ada Lovelace"' in form.text

    token = http.cookies.get(CSRF_COOKIE_NAME)
    resp = http.post(
        "/clients/1",
        data={"fullName": "Ada King", "email": "king@example.com", "riskCategory": "HIGH", "csrf_token": token},
        follow_redirects=False,
    )
    assert resp.status_code == 303
    assert resp.headers["location"] == "/clients/1"
    assert "Ada King" in http.get("/clients/1").text


def test_edit_errors_fall_back_to_current_risk(http):
    _create(http, {**ADA_FORM, "riskCategory": "medium"})
    token = _token(http, "/clients/1/edit")

    resp = http.post(
        "/clients/1",
        data={"fullName": "", "email": "x@x.com", "riskCategory": "purple", "csrf_token": token},
    )

    assert resp.status_code == 400
    assert "Full name is required." in resp.text
    assert '<option value="Medium" selected>' in resp.text


def test_update_missing_client_is_404(http):
    token = _token(http)
    resp = http.post("/clients/999", data={**ADA_FORM, "csrf_token": token})
    assert resp.status_code == 404


def test_delete_flow(http):
    _create(http)
    confirm = http.get("/clients/1/delete")
    assert confirm.status_code == 200
    token = http.cookies.get(CSRF_COOKIE_NAME)

    resp = http.post("/clients/1/delete", data={"csrf_token": token}, follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/clients"
    assert http.get("/clients/1").status_code == 404

    again = http.post("/clients/1/delete", data={"csrf_token": token})
    assert again.status_code == 404
