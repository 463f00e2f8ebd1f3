from app.core import config as app_config
from app.core.password_policy import evaluate_password


def test_signup_rejects_common_password(anon_client):
    res = anon_client.post("/api/auth/signup", json={"email": "weak@example.com", "password": "password123"})
    assert res.status_code == 400
    body = res.json()
    assert body["error"] == "Password does not meet requirements."
    assert body["details"]["code"] == "WEAK_PASSWORD"
    assert "denylist_common" in body["details"]["violations"]


def test_signup_rejects_password_containing_email(anon_client):
    res = anon_client.post(
        "/api/auth/signup",
        json={"email": "jordan@example.com", "password": "xxJordan-2026"},
    )
    assert res.status_code == 400
    assert "contains_email" in res.json()["details"]["violations"]


def test_signup_too_short_is_weak_password(anon_client):
    res = anon_client.post("/api/auth/signup", json={"email": "tiny@example.com", "password": "short"})
    assert res.status_code == 400
    body = res.json()
    assert body["error"] == "Password does not meet requirements."
    assert body["details"]["violations"] == ["min_length"]


def test_signup_length_follows_settings(anon_client):
    app_config.settings.PASSWORD_MIN_LENGTH = 6
    res = anon_client.post("/api/auth/signup", json={"email": "six@example.com", "password": "qz7!mk"})
    assert res.status_code == 201

    app_config.settings.PASSWORD_MIN_LENGTH = 12
    res2 = anon_client.post("/api/auth/signup", json={"email": "twelve@example.com", "password": "longenough1"})
    assert res2.status_code == 400
    assert res2.json()["details"]["violations"] == ["min_length"]


def test_min_length_follows_settings():
    app_config.settings.PASSWORD_MIN_LENGTH = 12
    assert "min_length" in evaluate_password("longenough1")

    app_config.settings.PASSWORD_MIN_LENGTH = 8
    assert evaluate_password("longenough1") == []


def test_short_local_part_is_not_matched():
    # "a@b.com" would otherwise reject any password containing an "a".
    assert evaluate_password("longenough1", email="a@b.com") == []


def test_max_length():
    assert "max_length" in evaluate_password("x" * 129)
