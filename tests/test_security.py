"""Tests for session tokens and the actor dependency."""

import jwt
import pytest
from fastapi import HTTPException
from starlette.requests import Request

from adoption_api.core.config import settings
from adoption_api.core.deps import COOKIE_NAME, get_current_actor, require_csrf_header
from adoption_api.core.security import create_session_token, decode_session_token
from adoption_api.db.enums import Role


def _request(cookies: dict | None = None, headers: dict | None = None) -> Request:
    raw_headers = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    if cookies:
        cookie = "; ".join(f"{k}={v}" for k, v in cookies.items())
        raw_headers.append((b"cookie", cookie.encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw_headers})


def test_token_round_trip_claims():
    token = create_session_token("officer-1", Role.HMCTS_CASE_OFFICER.value, "Birmingham Family Court", "hmcts")
    payload = decode_session_token(token)
    assert payload["sub"] == "officer-1"
    assert payload["role"] == "HMCTS_CASE_OFFICER"
    assert payload["court"] == "Birmingham Family Court"
    assert payload["org"] == "hmcts"


def test_decode_accepts_previous_secret(monkeypatch):
    token = jwt.encode({"sub": "judge-1", "role": "JUDGE_LEGAL_ADVISER"}, "old-secret", algorithm="HS256")
    monkeypatch.setattr(settings, "JWT_SECRET_PREVIOUS", "old-secret")
    assert decode_session_token(token)["sub"] == "judge-1"


def test_decode_rejects_unknown_secret():
    token = jwt.encode({"sub": "judge-1", "role": "JUDGE_LEGAL_ADVISER"}, "someone-else", algorithm="HS256")
    with pytest.raises(jwt.InvalidTokenError):
        decode_session_token(token)


def test_get_current_actor_builds_context():
    token = create_session_token("adopter-1", Role.ADOPTER.value)
    actor = get_current_actor(_request(cookies={COOKIE_NAME: token}))
    assert actor.user_id == "adopter-1"
    assert actor.role is Role.ADOPTER
    assert actor.court_assignment is None


@pytest.mark.parametrize(
    "cookies",
    [
        {},
        {COOKIE_NAME: "garbage"},
        {COOKIE_NAME: create_session_token("u-1", "SUPERUSER")},
    ],
)
def test_get_current_actor_rejects(cookies):
    with pytest.raises(HTTPException) as exc:
        get_current_actor(_request(cookies=cookies))
    assert exc.value.status_code == 401


def test_require_csrf_header():
    require_csrf_header(_request(headers={"X-Requested-With": "XMLHttpRequest"}))
    with pytest.raises(HTTPException) as exc:
        require_csrf_header(_request())
    assert exc.value.status_code == 403
