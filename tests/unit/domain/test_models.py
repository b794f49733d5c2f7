import base64
from datetime import timedelta

import pytest

from findapi.domain.models.auth import Credentials, Token, TokenResponse
from findapi.domain.models.request import RequestDescriptor


def test_credentials_basic_auth_header():
    credentials = Credentials("alice", "s3cret")
    header = credentials.basic_auth_header()
    assert header.startswith("Basic ")
    assert base64.b64decode(header[len("Basic "):]).decode() == "alice:s3cret"


def test_credentials_repr_masks_password():
    text = repr(Credentials("alice", "s3cret"))
    assert "alice" in text
    assert "s3cret" not in text


def test_token_requires_expiry_after_issue(fixed_now):
    with pytest.raises(ValueError):
        Token(value="t", issued_at=fixed_now, expires_at=fixed_now)
    with pytest.raises(ValueError):
        Token(value="t", issued_at=fixed_now, expires_at=fixed_now - timedelta(seconds=1))


def test_token_requires_value(fixed_now):
    with pytest.raises(ValueError):
        Token(value="", issued_at=fixed_now, expires_at=fixed_now + timedelta(minutes=1))


def test_token_is_valid_honors_margin(make_token, fixed_now):
    token = make_token(expires_in=timedelta(minutes=10))
    margin = timedelta(minutes=1)

    assert token.is_valid(fixed_now, margin)
    assert token.is_valid(fixed_now + timedelta(minutes=8, seconds=59), margin)
    # Exactly at the margin boundary the token is no longer usable.
    assert not token.is_valid(fixed_now + timedelta(minutes=9), margin)
    assert not token.is_valid(fixed_now + timedelta(minutes=11), margin)


def test_token_repr_hides_value(make_token):
    assert "very-secret" not in repr(make_token(value="very-secret"))


def test_token_response_to_token(fixed_now, token_json):
    response = TokenResponse(**token_json(value="jwt", lifetime=600))
    token = response.to_token(now=fixed_now + timedelta(seconds=5))

    assert token.value == "jwt"
    assert token.issued_at == fixed_now
    assert token.expires_at == fixed_now + timedelta(seconds=600)


def test_token_response_without_iat_uses_now(fixed_now):
    response = TokenResponse(access_token="jwt", exp=int(fixed_now.timestamp()) + 60)
    assert response.issued_at is None
    assert response.to_token(now=fixed_now).issued_at == fixed_now


def test_token_response_already_expired_is_rejected(fixed_now):
    response = TokenResponse(access_token="jwt", exp=int(fixed_now.timestamp()) - 60)
    with pytest.raises(ValueError):
        response.to_token(now=fixed_now)


def test_request_descriptor_normalizes_method_and_freezes_query():
    query = {"height": "1"}
    descriptor = RequestDescriptor(method="get", path="/simple/v1/blocks", query=query)
    query["height"] = "2"

    assert descriptor.method == "GET"
    assert descriptor.query["height"] == "1"
    with pytest.raises(TypeError):
        descriptor.query["height"] = "3"
    assert descriptor.requires_auth is True
    assert descriptor.describe() == "GET /simple/v1/blocks"


def test_request_descriptor_get_helper():
    descriptor = RequestDescriptor.get("/simple/v1/blocks")
    assert descriptor.method == "GET"
    assert dict(descriptor.query) == {}
