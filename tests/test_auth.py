from database.db import db
from models import User
from utils.auth import generate_token
from conftest import PASSWORD, auth_header


def signup_payload(**overrides):
    payload = {
        "name": "Nusrat Jahan",
        "email": "Nusrat@Example.com",
        "password": "hunter22",
        "number": "01711111111",
        "address": "Mirpur 10, Dhaka",
    }
    payload.update(overrides)
    return payload


def test_signup_creates_customer_by_default(client):
    res = client.post('/api/users/signup', json=signup_payload())
    assert res.status_code == 201
    body = res.get_json()
    assert body["msg"] == "User registered successfully"
    assert body["user"]["role"] == "customer"
    assert body["user"]["email"] == "nusrat@example.com"
    assert "password" not in body["user"]
    assert "passwordHash" not in body["user"]


def test_signup_as_vendor(client):
    res = client.post('/api/users/signup', json=signup_payload(role="vendor"))
    assert res.status_code == 201
    assert res.get_json()["user"]["role"] == "vendor"


def test_signup_rejects_admin_role(client):
    res = client.post('/api/users/signup', json=signup_payload(role="admin"))
    assert res.status_code == 400
    assert User.query.count() == 0


def test_signup_duplicate_email(client):
    client.post('/api/users/signup', json=signup_payload())
    res = client.post('/api/users/signup', json=signup_payload(email="nusrat@example.com"))
    assert res.status_code == 400
    assert res.get_json() == {"msg": "User already exists"}


def test_signup_requires_all_fields(client):
    res = client.post('/api/users/signup', json=signup_payload(address=""))
    assert res.status_code == 400
    assert "msg" in res.get_json()


def test_signup_short_password(client):
    res = client.post('/api/users/signup', json=signup_payload(password="abc"))
    assert res.status_code == 400


def test_password_is_hashed(client):
    client.post('/api/users/signup', json=signup_payload())
    user = User.query.filter_by(email="nusrat@example.com").one()
    assert user.password_hash != "hunter22"
    assert user.check_password("hunter22")


def test_login_returns_token_that_opens_session(client, make_user):
    vendor = make_user("vendor")
    res = client.post('/api/users/login', json={"email": vendor.email, "password": PASSWORD})
    assert res.status_code == 200
    body = res.get_json()
    assert body["user"]["id"] == vendor.id
    assert "list_services" in body["capabilities"]
    assert "book_services" not in body["capabilities"]

    session = client.get('/api/users/session',
                         headers={"Authorization": f"Bearer {body['token']}"})
    assert session.status_code == 200
    assert session.get_json()["user"]["email"] == vendor.email


def test_login_wrong_password(client, make_user):
    customer = make_user()
    res = client.post('/api/users/login', json={"email": customer.email, "password": "nope-nope"})
    assert res.status_code == 400
    assert res.get_json() == {"msg": "Invalid credentials"}


def test_login_unknown_email(client):
    res = client.post('/api/users/login', json={"email": "ghost@example.com", "password": PASSWORD})
    assert res.status_code == 400


def test_session_requires_token(client):
    res = client.get('/api/users/session')
    assert res.status_code == 401
    assert res.get_json() == {"msg": "Missing authorization token"}


def test_expired_token_rejected(client, make_user):
    customer = make_user()
    token = generate_token(customer, expires_in=-10)
    res = client.get('/api/users/session', headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401
    assert res.get_json() == {"msg": "Invalid or expired token"}


def test_tampered_token_rejected(client, make_user):
    customer = make_user()
    token = generate_token(customer)
    res = client.get('/api/users/session', headers={"Authorization": f"Bearer {token}x"})
    assert res.status_code == 401


def test_token_signed_with_other_key_rejected(client, app, make_user):
    customer = make_user()
    app.config["SECRET_KEY"] = "another-secret-key"
    token = generate_token(customer)
    app.config["SECRET_KEY"] = "test-secret-key"
    res = client.get('/api/users/session', headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401


def test_token_for_deleted_account_rejected(client, make_user):
    customer = make_user()
    headers = auth_header(customer)
    db.session.delete(customer)
    db.session.commit()
    res = client.get('/api/users/session', headers=headers)
    assert res.status_code == 401
    assert res.get_json() == {"msg": "Account no longer exists"}


def test_payments_blueprint_uses_message_key(client):
    res = client.get('/api/payments/history/1')
    assert res.status_code == 401
    assert res.get_json() == {"message": "Missing authorization token"}


def test_health_route(client):
    res = client.get('/api/test')
    assert res.status_code == 200
    assert "running" in res.get_json()["message"]
