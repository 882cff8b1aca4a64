from restaurant_backend.domain.errors import UpstreamError

REGISTRATION = {
    "fullName": "Bob Smith",
    "username": "bob",
    "email": "bob@example.com",
    "phone": "+1 555 0101",
    "address": "2 Side Street",
    "password": "Secret123!",
}


def test_register_stores_hashed_password(client, identities):
    response = client.post("/register", json=REGISTRATION)

    assert response.status_code == 201
    assert response.json() == {"message": "User registered successfully"}
    stored = identities.records["bob@example.com"]
    assert stored.full_name == "Bob Smith"
    assert stored.password_hash != "Secret123!"
    assert stored.password_hash.startswith("$2")
    assert stored.otp_code is None
    assert stored.otp_cooldown_until is None


def test_register_rejects_same_email_in_other_case(client, identities):
    first = client.post("/register", json={**REGISTRATION, "email": "a@X.COM"})
    second = client.post("/register", json={**REGISTRATION, "email": "a@x.com"})

    assert first.status_code == 201
    assert second.status_code == 400
    assert second.json()["message"] == "Email already registered"
    assert list(identities.records) == ["a@x.com"]


def test_register_lowercases_local_part(client, identities):
    response = client.post("/register", json={**REGISTRATION, "email": "Mixed.Case@Example.com"})

    assert response.status_code == 201
    assert "mixed.case@example.com" in identities.records


def test_register_rejects_malformed_email(client, identities):
    response = client.post("/register", json={**REGISTRATION, "email": "not-an-email"})

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid request"
    assert identities.records == {}


def test_register_requires_every_profile_field(client):
    payload = dict(REGISTRATION)
    del payload["address"]

    response = client.post("/register", json=payload)

    assert response.status_code == 400
    assert any(error["loc"][-1] == "address" for error in response.json()["errors"])


def test_register_reports_database_failure(client, identities):
    identities.fail_with = UpstreamError("down")

    response = client.post("/register", json=REGISTRATION)

    assert response.status_code == 400
    assert response.json()["message"] == "Error registering user"


def test_login_returns_profile_without_secrets(client, register_user):
    register_user()

    response = client.post("/login", json={"email": "alice@example.com", "password": "Password123!"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["message"] == "Login successful"
    user = payload["user"]
    assert user["email"] == "alice@example.com"
    assert user["fullName"] == "Alice Doe"
    for field in ("password", "passwordHash", "password_hash", "otpCode", "otp_code"):
        assert field not in user


def test_login_accepts_email_in_any_case(client, register_user):
    register_user()

    response = client.post("/login", json={"email": "ALICE@EXAMPLE.COM", "password": "Password123!"})

    assert response.status_code == 200


def test_login_failures_are_indistinguishable(client, register_user):
    register_user()

    wrong_password = client.post("/login", json={"email": "alice@example.com", "password": "nope"})
    unknown_user = client.post("/login", json={"email": "ghost@example.com", "password": "Password123!"})

    assert wrong_password.status_code == unknown_user.status_code == 400
    assert wrong_password.json() == unknown_user.json()
    assert wrong_password.json()["message"] == "Invalid email or password. Please register first."


def test_login_reports_database_failure(client, register_user, identities):
    register_user()
    identities.fail_with = UpstreamError("down")

    response = client.post("/login", json={"email": "alice@example.com", "password": "Password123!"})

    assert response.status_code == 500
    assert response.json() == {"message": "Server error"}
