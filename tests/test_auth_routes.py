"""
Registration, login and bearer-token handling.
"""
import pytest

from conftest import API, DEFAULT_PASSWORD, auth_headers, register_user


class TestRegister:

    def test_register_returns_token_and_user(self, client):
        response = client.post(f"{API}/auth/register", json={
            "name": "Maria Souza",
            "email": "Maria@Escola.edu.br",
            "password": "segredo1",
            "confirm_password": "segredo1",
        })
        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["token"]
        assert data["token_type"] == "bearer"
        assert data["user"]["email"] == "maria@escola.edu.br"
        assert data["user"]["role"] == "professor"
        assert "hashed_password" not in data["user"]

    def test_register_rejects_invalid_form(self, client):
        response = client.post(f"{API}/auth/register", json={
            "name": "Maria",
            "email": "maria-sem-arroba",
            "password": "segredo1",
        })
        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "E-mail inválido"}

    def test_register_rejects_short_password(self, client):
        response = client.post(f"{API}/auth/register", json={
            "name": "Maria",
            "email": "maria@escola.edu.br",
            "password": "123",
        })
        assert response.status_code == 400
        assert "6 caracteres" in response.json()["message"]

    def test_register_rejects_duplicate_email(self, client):
        register_user(client, email="dup@example.com")
        response = client.post(f"{API}/auth/register", json={
            "name": "Outra Pessoa",
            "email": "DUP@example.com",
            "password": "segredo1",
        })
        assert response.status_code == 409
        assert response.json()["success"] is False

    @pytest.mark.parametrize("email", ["ana@escola.local", "x@y.test", "ana..lima@example.com"])
    def test_register_rejects_email_without_creating_account(self, client, email):
        response = client.post(f"{API}/auth/register", json={
            "name": "Ana Lima",
            "email": email,
            "password": "segredo1",
        })
        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "E-mail inválido"}

        login = client.post(f"{API}/auth/login", json={"email": email, "password": "segredo1"})
        assert login.status_code == 401


class TestLogin:

    def test_login_with_valid_credentials(self, client):
        register_user(client, email="ana@example.com")
        response = client.post(f"{API}/auth/login", json={"email": "ana@example.com", "password": DEFAULT_PASSWORD})
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["user"]["email"] == "ana@example.com"

        me = client.get(f"{API}/users/me", headers=auth_headers(data["token"]))
        assert me.status_code == 200
        assert me.json()["user"]["id"] == data["user"]["id"]

    def test_login_touches_updated_at(self, client):
        registered = register_user(client, email="ana@example.com")
        response = client.post(f"{API}/auth/login", json={"email": "ana@example.com", "password": DEFAULT_PASSWORD})
        assert response.json()["user"]["updated_at"] >= registered["user"]["updated_at"]

    def test_login_with_wrong_password(self, client):
        register_user(client, email="ana@example.com")
        response = client.post(f"{API}/auth/login", json={"email": "ana@example.com", "password": "errada"})
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert response.json() == {"success": False, "message": "E-mail ou senha incorretos"}

    def test_login_unknown_email(self, client):
        response = client.post(f"{API}/auth/login", json={"email": "ninguem@example.com", "password": "qualquer"})
        assert response.status_code == 401

    def test_login_requires_both_fields(self, client):
        response = client.post(f"{API}/auth/login", json={"email": "ana@example.com", "password": ""})
        assert response.status_code == 400
        assert response.json()["message"] == "Preencha todos os campos"


class TestTokens:

    def test_missing_token(self, client):
        response = client.get(f"{API}/devices")
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_garbage_token(self, client):
        response = client.get(f"{API}/devices", headers=auth_headers("nao-e-um-jwt"))
        assert response.status_code == 401
        assert response.json()["message"] == "Token inválido ou expirado"

    def test_expired_token(self, client):
        from datetime import timedelta
        from axii.core.security import create_access_token

        user = register_user(client)
        token = create_access_token({"sub": str(user["user"]["id"])}, expires_delta=timedelta(minutes=-1))
        response = client.get(f"{API}/users/me", headers=auth_headers(token))
        assert response.status_code == 401

    def test_token_for_deleted_user(self, client):
        user = register_user(client)
        response = client.request(
            "DELETE", f"{API}/users/me", headers=user["headers"], json={"confirmation": "EXCLUIR CONTA"}
        )
        assert response.status_code == 200

        response = client.get(f"{API}/users/me", headers=user["headers"])
        assert response.status_code == 401
