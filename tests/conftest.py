import os

# must be set before the package reads its configuration
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient

from meeting_scheduler.core.db import Database
from meeting_scheduler.main import create_app
from meeting_scheduler.services import user_service

PASSWORD = "Abcdef1!"

REGISTER = """
mutation Register($input: RegisterInput!) {
  register(input: $input) { id name email imageUrl }
}
"""

LOGIN = """
mutation Login($input: LoginInput!) {
  login(input: $input) { token tokenExpiration user { id name email imageUrl } }
}
"""


class GraphQLClient:
    def __init__(self, client: TestClient):
        self.client = client

    def post(self, query, variables=None, token=None, headers=None):
        headers = dict(headers or {})
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return self.client.post("/graphql", json={"query": query, "variables": variables or {}}, headers=headers)

    def execute(self, query, variables=None, token=None, headers=None) -> dict:
        return self.post(query, variables, token, headers).json()

    def register(self, name, email, password=PASSWORD) -> dict:
        return self.execute(REGISTER, {"input": {"name": name, "email": email, "password": password}})

    def login(self, email, password=PASSWORD) -> dict:
        return self.execute(LOGIN, {"input": {"email": email, "password": password}})

    def signup(self, name, email, password=PASSWORD):
        """Register and log in; returns (user_id, token)."""
        registered = self.register(name, email, password)
        assert "errors" not in registered, registered
        payload = self.login(email, password)["data"]["login"]
        return payload["user"]["id"], payload["token"]


def error_of(result: dict) -> dict:
    assert result.get("errors"), result
    return result["errors"][0]


def code_of(result: dict) -> str:
    return error_of(result)["extensions"]["code"]


@pytest.fixture
def database():
    db = Database("sqlite://")
    db.create_all()
    yield db
    db.close()


@pytest.fixture
def db_session(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def client(database):
    app = create_app(database)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def gql(client):
    return GraphQLClient(client)


@pytest.fixture
def make_user(db_session):
    """Insert a user directly; the password hash is irrelevant to service tests."""

    def _make(name="Alice", email="alice@example.com", **fields):
        return user_service.create_user(db_session, name=name, email=email, hashed_password="!", **fields)

    return _make
