from __future__ import annotations

import base64
import time

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose import jwt
from starlette.testclient import TestClient

from worksphere_admin.core.auth import jwks_cache
from worksphere_admin.core.dependencies import get_current_user
from worksphere_admin.main import app
from worksphere_admin.models.auth import UserInfo
from worksphere_admin.models.employee import Employee

TEST_TENANT_ID = "test-tenant-00000000-0000-0000-0000-000000000000"
TEST_CLIENT_ID = "test-client-00000000-0000-0000-0000-000000000000"
TEST_KID = "test-kid-1"


def _int_to_base64url(value: int) -> str:
    byte_length = (value.bit_length() + 7) // 8
    return base64.urlsafe_b64encode(value.to_bytes(byte_length, byteorder="big")).rstrip(b"=").decode("ascii")


@pytest.fixture(autouse=True)
def _test_settings():
    from worksphere_admin.core.config import settings

    original_tenant = settings.AZURE_AD_TENANT_ID
    original_client = settings.AZURE_AD_CLIENT_ID
    original_base_url = settings.EMPLOYEE_API_BASE_URL
    settings.AZURE_AD_TENANT_ID = TEST_TENANT_ID
    settings.AZURE_AD_CLIENT_ID = TEST_CLIENT_ID
    # keep the lifespan from pointing the shared client at a real backend
    settings.EMPLOYEE_API_BASE_URL = ""
    jwks_cache.clear()
    yield
    settings.AZURE_AD_TENANT_ID = original_tenant
    settings.AZURE_AD_CLIENT_ID = original_client
    settings.EMPLOYEE_API_BASE_URL = original_base_url
    jwks_cache.clear()


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def rsa_test_keys():
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode("utf-8")

    pub = private_key.public_key().public_numbers()
    jwk_dict = {
        "kty": "RSA",
        "kid": TEST_KID,
        "use": "sig",
        "alg": "RS256",
        "n": _int_to_base64url(pub.n),
        "e": _int_to_base64url(pub.e),
    }
    jwks_response = {"keys": [jwk_dict]}
    return private_pem, jwks_response


def make_token(
    private_pem: str,
    *,
    oid: str = "test-oid-123",
    name: str = "Test User",
    email: str = "test@worksphere.io",
    roles: list[str] | None = None,
    expired: bool = False,
) -> str:
    now = int(time.time())
    claims = {
        "oid": oid,
        "name": name,
        "preferred_username": email,
        "roles": roles or [],
        "iss": f"https://login.microsoftonline.com/{TEST_TENANT_ID}/v2.0",
        "aud": TEST_CLIENT_ID,
        "exp": now - 3600 if expired else now + 3600,
        "iat": now - 60,
        "nbf": now - 60,
    }
    return jwt.encode(claims, private_pem, algorithm="RS256", headers={"kid": TEST_KID})


@pytest.fixture
def token_factory():
    return make_token


@pytest.fixture
def mock_user_viewer():
    return UserInfo(id="viewer-1", name="Viewer User", email="viewer@worksphere.io", roles=["viewer"])


@pytest.fixture
def mock_user_admin():
    return UserInfo(id="admin-1", name="Admin User", email="admin@worksphere.io", roles=["admin"])


@pytest.fixture
def authenticated_client(mock_user_admin):
    app.dependency_overrides[get_current_user] = lambda: mock_user_admin
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def viewer_client(mock_user_viewer):
    app.dependency_overrides[get_current_user] = lambda: mock_user_viewer
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_employee(employee_id: int, **overrides) -> Employee:
    data = {
        "id": employee_id,
        "firstName": f"First{employee_id}",
        "lastName": f"Last{employee_id}",
        "email": f"employee{employee_id}@worksphere.io",
        "department": "IT",
        "position": "Engineer",
        "salary": 50000.0,
        "status": "Active",
    }
    data.update(overrides)
    return Employee.model_validate(data)


@pytest.fixture
def employee_factory():
    return make_employee


@pytest.fixture
def sample_employees() -> list[Employee]:
    return [
        make_employee(1, firstName="Alice", lastName="Smith", email="alice@worksphere.io", department="IT",
                      position="Developer", phone="+91-98765-43210", status="Active"),
        make_employee(2, firstName="bob", lastName="Jones", email="bob@worksphere.io", department="HR",
                      position="Recruiter", status="On Leave"),
        make_employee(3, firstName="Carol", lastName="White", email="carol@worksphere.io", department="Sales",
                      position=None, status="Inactive"),
        make_employee(42, firstName="Dave", lastName="Brown", email="dave@worksphere.io", department="IT",
                      position="Manager", status="Active"),
    ]
