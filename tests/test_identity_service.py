import json

import pytest
import requests

from oficina.exceptions import UnexpectedError
from oficina.models.account import Account
from oficina.services.identity_service import HttpIdentityService


def _response(status, body=None):
    resp = requests.Response()
    resp.status_code = status
    resp._content = json.dumps(body).encode("utf-8") if body is not None else b"not json"
    return resp


class FakeSession:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class TestAccountDirectory:

    def test_find_existing(self, directory):
        account = directory.find_by_id("admin-1")
        assert account.username == "chefe"
        assert account.is_admin

    def test_find_missing(self, directory):
        assert directory.find_by_id("ghost") is None
        assert directory.find_by_id(None) is None

    def test_list_accounts(self, directory):
        directory.add_account(Account(id="new", username="novo"))
        assert {a.id for a in directory.list_accounts()} == {"author-1", "other-1", "admin-1", "new"}


class TestHttpIdentityService:

    def test_found(self):
        session = FakeSession(_response(200, {"id": "u1", "username": "ana", "roles": ["ADMIN"]}))
        service = HttpIdentityService("http://auth.local/", timeout=(2.0, 3.0), session=session)

        account = service.find_by_id("u1")

        assert account.id == "u1" and account.is_admin
        assert session.calls == [("http://auth.local/accounts/u1", (2.0, 3.0))]

    def test_not_found(self):
        service = HttpIdentityService("http://auth.local", session=FakeSession(_response(404, {})))
        assert service.find_by_id("u1") is None

    def test_server_error(self):
        service = HttpIdentityService("http://auth.local", session=FakeSession(_response(500, {})))
        with pytest.raises(UnexpectedError):
            service.find_by_id("u1")

    def test_invalid_body(self):
        service = HttpIdentityService("http://auth.local", session=FakeSession(_response(200)))
        with pytest.raises(UnexpectedError):
            service.find_by_id("u1")

    def test_timeout_not_retried(self):
        session = FakeSession(requests.Timeout("slow"))
        service = HttpIdentityService("http://auth.local", session=session)
        with pytest.raises(UnexpectedError) as exc_info:
            service.find_by_id("u1")
        assert isinstance(exc_info.value.__cause__, requests.Timeout)
        assert len(session.calls) == 1
