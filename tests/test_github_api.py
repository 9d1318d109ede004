"""
test_github_api.py — Tests para GitHubClient.

Verifica:
- Request exacto de POST /user/repos (URL, headers, body)
- Clasificación 2xx / 422 / otros
- Detección de "already exists" en el cuerpo del 422
- Errores de red y de GET /user
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from repo_publisher.config import GitHubConfig
from repo_publisher.publishing.errors import GitHubAPIError
from repo_publisher.publishing.github_api import (
    CreateOutcome,
    GitHubClient,
    RepoRequest,
    is_already_exists_error,
)

ALREADY_EXISTS_BODY = {
    "message": "Repository creation failed.",
    "errors": [{
        "resource": "Repository",
        "code": "custom",
        "field": "name",
        "message": "name already exists on this account",
    }],
}


def _response(status_code: int, data=None, reason: str = "", text: str | None = None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.reason = reason
    if data is None:
        resp.json.side_effect = ValueError("no json")
        resp.text = text or ""
    else:
        resp.json.return_value = data
        resp.text = text if text is not None else str(data)
    return resp


def _client(response=None, token: str = "ghp_test", **config):
    session = MagicMock()
    session.post.return_value = response
    session.get.return_value = response
    return GitHubClient(token, GitHubConfig(**config), session=session), session


# ================================================================
# RepoRequest
# ================================================================

class TestRepoRequest:
    def test_payload_sin_descripcion(self):
        assert RepoRequest(name="demo").to_payload() == {
            "name": "demo",
            "description": "",
            "private": False,
        }

    def test_payload_completo(self):
        payload = RepoRequest(name="demo", description="Mi demo", private=True).to_payload()
        assert payload == {"name": "demo", "description": "Mi demo", "private": True}


# ================================================================
# create_repo
# ================================================================

class TestCreateRepo:
    def test_request_exacto(self):
        client, session = _client(_response(201, {"owner": {"login": "dev"}}))

        client.create_repo(RepoRequest(name="demo", description="d", private=True))

        session.post.assert_called_once()
        args, kwargs = session.post.call_args
        assert args[0] == "https://api.github.com/user/repos"
        assert kwargs["json"] == {"name": "demo", "description": "d", "private": True}
        assert kwargs["headers"]["Authorization"] == "Bearer ghp_test"
        assert kwargs["headers"]["Content-Type"] == "application/json"
        assert kwargs["headers"]["User-Agent"] == "GitHub-Repo-Manager"
        assert kwargs["timeout"] == 30.0

    def test_api_url_configurable(self):
        client, session = _client(
            _response(201, {}), api_url="https://ghe.example.com/api/v3/"
        )
        client.create_repo(RepoRequest(name="demo"))
        assert session.post.call_args[0][0] == "https://ghe.example.com/api/v3/user/repos"

    def test_201_es_created(self):
        client, _ = _client(_response(201, {"owner": {"login": "dev"}, "name": "demo"}))
        result = client.create_repo(RepoRequest(name="demo"))
        assert result.outcome is CreateOutcome.CREATED
        assert result.owner_login == "dev"

    def test_422_already_exists_confirmado(self):
        client, _ = _client(_response(422, ALREADY_EXISTS_BODY))
        result = client.create_repo(RepoRequest(name="demo"))
        assert result.outcome is CreateOutcome.ALREADY_EXISTS
        assert result.confirmed

    def test_422_sin_confirmar(self):
        body = {
            "message": "Validation Failed",
            "errors": [{"resource": "Repository", "code": "invalid", "field": "name"}],
        }
        client, _ = _client(_response(422, body))
        result = client.create_repo(RepoRequest(name="demo"))
        assert result.outcome is CreateOutcome.ALREADY_EXISTS
        assert not result.confirmed
        assert result.message == "Validation Failed"

    def test_422_sin_json(self):
        client, _ = _client(_response(422, None, reason="Unprocessable Entity", text="nope"))
        result = client.create_repo(RepoRequest(name="demo"))
        assert result.outcome is CreateOutcome.ALREADY_EXISTS
        assert not result.confirmed
        assert result.message == "Unprocessable Entity"

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 500])
    def test_otros_status_son_rejected(self, status):
        client, _ = _client(_response(status, {"message": "Bad credentials"}, text="Bad credentials"))
        result = client.create_repo(RepoRequest(name="demo"))
        assert result.outcome is CreateOutcome.REJECTED
        assert result.status_code == status
        assert result.body == "Bad credentials"

    def test_error_de_red(self):
        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("sin red")
        client = GitHubClient("ghp_test", session=session)

        with pytest.raises(GitHubAPIError, match="Error de red"):
            client.create_repo(RepoRequest(name="demo"))

    def test_header_invalido_es_error_de_api(self):
        session = MagicMock()
        session.post.side_effect = requests.exceptions.InvalidHeader("bad header")
        client = GitHubClient("ghp\nbad", session=session)

        with pytest.raises(GitHubAPIError):
            client.create_repo(RepoRequest(name="demo"))


# ================================================================
# is_already_exists_error
# ================================================================

class TestAlreadyExists:
    def test_mensaje_en_errors(self):
        assert is_already_exists_error(ALREADY_EXISTS_BODY)

    def test_codigo_already_exists(self):
        assert is_already_exists_error({"errors": [{"code": "already_exists"}]})

    def test_errors_como_strings(self):
        assert is_already_exists_error({"errors": ["name already exists on this account"]})

    def test_mensaje_principal(self):
        assert is_already_exists_error({"message": "Repository already exists"})

    def test_otro_error(self):
        assert not is_already_exists_error({"message": "Validation Failed", "errors": []})

    def test_cuerpo_vacio(self):
        assert not is_already_exists_error({})


# ================================================================
# get_authenticated_login
# ================================================================

class TestGetAuthenticatedLogin:
    def test_login(self):
        resp = _response(200, {"login": "devdannetworks"})
        client, session = _client(resp)

        assert client.get_authenticated_login() == "devdannetworks"
        assert session.get.call_args[0][0] == "https://api.github.com/user"

    def test_http_error(self):
        resp = _response(401, {"message": "Bad credentials"}, text="Bad credentials")
        resp.raise_for_status.side_effect = requests.HTTPError("401", response=resp)
        client, _ = _client(resp)

        with pytest.raises(GitHubAPIError) as exc:
            client.get_authenticated_login()
        assert exc.value.status_code == 401

    def test_sin_login(self):
        client, _ = _client(_response(200, {"id": 1}))
        with pytest.raises(GitHubAPIError, match="login"):
            client.get_authenticated_login()

    def test_error_de_red(self):
        session = MagicMock()
        session.get.side_effect = requests.Timeout("timeout")
        client = GitHubClient("ghp_test", session=session)
        with pytest.raises(GitHubAPIError, match="/user"):
            client.get_authenticated_login()


class TestClose:
    def test_close_cierra_la_sesion(self):
        session = MagicMock()
        GitHubClient("ghp_test", session=session).close()
        session.close.assert_called_once()

    def test_context_manager(self):
        session = MagicMock()
        with GitHubClient("ghp_test", session=session) as client:
            assert isinstance(client, GitHubClient)
        session.close.assert_called_once()
