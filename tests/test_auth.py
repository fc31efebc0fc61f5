"""오너 로그인 / 세션"""

from app.core.security import hash_password, verify_password
from app.core.session_store import InMemorySessionStore
from app.services import owner_service

OWNER_EMAIL = "owner@example.com"
OWNER_PASSWORD = "correct-horse-battery"


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestSessionStore:
    def test_create_and_get(self):
        store = InMemorySessionStore()

        session_id = store.create(7, ttl_seconds=60)

        assert store.get(session_id) == 7
        assert store.get("unknown") is None

    def test_expiry(self):
        clock = FakeClock()
        store = InMemorySessionStore(clock=clock)
        session_id = store.create(7, ttl_seconds=60)

        clock.now += 59
        assert store.get(session_id) == 7
        clock.now += 1
        assert store.get(session_id) is None

    def test_delete(self):
        store = InMemorySessionStore()
        session_id = store.create(7, ttl_seconds=60)

        store.delete(session_id)
        store.delete(session_id)

        assert store.get(session_id) is None

    def test_purge_expired(self):
        clock = FakeClock()
        store = InMemorySessionStore(clock=clock)
        store.create(1, ttl_seconds=10)
        keep = store.create(2, ttl_seconds=100)

        clock.now += 50

        assert store.purge_expired() == 1
        assert store.get(keep) == 2


def test_password_hashing():
    digest = hash_password("secret")

    assert digest != "secret"
    assert verify_password("secret", digest)
    assert not verify_password("wrong", digest)
    assert not verify_password("secret", "not-a-bcrypt-hash")


def test_ensure_owner(db):
    assert owner_service.ensure_owner(db, "", "") is None

    created = owner_service.ensure_owner(db, OWNER_EMAIL, hash_password(OWNER_PASSWORD))
    again = owner_service.ensure_owner(db, OWNER_EMAIL, hash_password("other"))

    assert created.id == again.id
    assert owner_service.authenticate(db, OWNER_EMAIL, OWNER_PASSWORD).id == created.id
    assert owner_service.authenticate(db, OWNER_EMAIL, "other") is None


def test_wrong_password(client, owner):
    response = client.post("/api/v1/auth/login", json={"email": OWNER_EMAIL, "password": "nope"})

    assert response.status_code == 401
    assert client.get("/api/v1/auth/status").json() == {"logged_in": False}


def test_login_and_logout(owner_client):
    assert owner_client.get("/api/v1/auth/status").json() == {"logged_in": True}

    response = owner_client.post("/api/v1/auth/logout")

    assert response.json() == {"logged_in": False}
    assert owner_client.get("/api/v1/auth/status").json() == {"logged_in": False}
    assert owner_client.delete("/api/v1/visuals/1").status_code == 401


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
