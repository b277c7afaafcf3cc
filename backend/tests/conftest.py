"""Root conftest - temporary domain roots, settings, RSA keys and signing.

Invariants:
    - Every test gets fresh static/business/user roots under tmp_path
    - Settings never read a developer's .env file
    - RSA keys generated once per session (key generation is slow)
"""

import base64

import pytest
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from app.config import Settings
from app.core.domain_types import IdStrategy
from app.services.document_store import build_document_store

INDEX_HTML = b"<html><body>bootstrap</body></html>"
PRELOAD_JS = b"export const preload = true;\n"
PROFILE_PAGE_JS = b"export default function profile() {}\n"


def _write(path, data: bytes):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


@pytest.fixture
def domain_roots(tmp_path):
    """Static, business and user roots laid out like a small deployment."""
    static = tmp_path / "static"
    business = tmp_path / "business"
    user = tmp_path / "user"

    _write(static / "index.html", INDEX_HTML)
    _write(static / "js" / "preload.js", PRELOAD_JS)
    _write(business / "profile" / "page.js", PROFILE_PAGE_JS)
    _write(business / "folder" / "instance" / "page.js", b"// folder\n")
    _write(business / "user" / "instance" / "page.js", b"// user page\n")

    (user / "files").mkdir(parents=True)
    _write(user / "user" / "type", b"users")
    _write(user / "profile" / "type", b"profile")
    return {"static": static, "business": business, "user": user}


@pytest.fixture
def settings(domain_roots):
    return Settings(
        _env_file=None,
        static_root=domain_roots["static"],
        business_root=domain_roots["business"],
        user_root=domain_roots["user"],
        id_strategy=IdStrategy.COUNTER,
        log_format="text",
    )


@pytest.fixture
def document_store(settings):
    return build_document_store(settings)


# ─── Keys & signatures ──────────────────────────────────────────

@pytest.fixture(scope="session")
def private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def foreign_private_key():
    """A second key pair that owns nothing."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def public_key_b64(private_key) -> str:
    """Owner key as stored in identity profiles: base64 PKCS#1 DER."""
    der = private_key.public_key().public_bytes(
        serialization.Encoding.DER, serialization.PublicFormat.PKCS1,
    )
    return base64.b64encode(der).decode("ascii")


@pytest.fixture(scope="session")
def sign():
    """sign(private_key, payload) -> base64 PKCS#1 v1.5 SHA-256 signature."""
    def _sign(key, payload: bytes) -> str:
        signature = key.sign(payload, padding.PKCS1v15(), hashes.SHA256())
        return base64.b64encode(signature).decode("ascii")
    return _sign


@pytest.fixture
def index_html() -> bytes:
    return INDEX_HTML
