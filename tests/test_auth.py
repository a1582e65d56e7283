from smart_tasker.models import User
from smart_tasker.services.auth import hash_password, verify_password


def test_signup_creates_user_with_hashed_password(client, db):
    response = client.post("/api/signup", json={"email": "ann@example.com", "password": "s3cret"})

    assert response.status_code == 201
    assert response.json() == {"message": "User registered successfully"}

    user = db.query(User).filter(User.email == "ann@example.com").one()
    assert user.password_hash != "s3cret"
    assert verify_password("s3cret", user.password_hash)


def test_duplicate_signup_is_rejected_and_keeps_original_hash(client, db):
    client.post("/api/signup", json={"email": "ann@example.com", "password": "first"})
    original_hash = db.query(User).filter(User.email == "ann@example.com").one().password_hash

    response = client.post("/api/signup", json={"email": "ann@example.com", "password": "second"})

    assert response.status_code == 409
    assert response.json() == {"message": "Email already registered"}
    db.expire_all()
    users = db.query(User).filter(User.email == "ann@example.com").all()
    assert len(users) == 1
    assert users[0].password_hash == original_hash


def test_signup_requires_email_and_password(client):
    for body in ({}, {"email": "ann@example.com"}, {"password": "x"}, {"email": "", "password": "x"}):
        response = client.post("/api/signup", json=body)
        assert response.status_code == 400
        assert response.json() == {"message": "Email and password required"}


def test_login_echoes_email(client):
    client.post("/api/signup", json={"email": "bob@example.com", "password": "hunter2"})

    response = client.post("/api/login", json={"email": "bob@example.com", "password": "hunter2"})

    assert response.status_code == 200
    assert response.json() == {"message": "Login successful", "email": "bob@example.com"}


def test_login_failures_are_indistinguishable(client):
    client.post("/api/signup", json={"email": "bob@example.com", "password": "hunter2"})

    wrong_password = client.post("/api/login", json={"email": "bob@example.com", "password": "nope"})
    unknown_email = client.post("/api/login", json={"email": "eve@example.com", "password": "hunter2"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"message": "Invalid email or password"}


def test_login_requires_both_fields(client):
    response = client.post("/api/login", json={"email": "bob@example.com"})

    assert response.status_code == 400
    assert response.json() == {"message": "Email and password required"}


def test_hashes_are_salted():
    assert hash_password("same") != hash_password("same")
    assert not verify_password("other", hash_password("same"))
