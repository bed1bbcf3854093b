import jwt
import pytest


def test_root_reports_status(client) -> None:
    response = client.get('/')

    assert response.status_code == 200
    assert response.json() == {'status': 'Eye Test API Running'}


def test_register_returns_created_message(client) -> None:
    response = client.post('/api/auth/register', json={'email': 'a@x.com', 'password': 'pw123456', 'name': 'Alice'})

    assert response.status_code == 201
    assert response.json() == {'message': 'User registered successfully'}
    assert 'token' not in response.json()


def test_register_rejects_duplicate_email_with_conflict(client) -> None:
    client.post('/api/auth/register', json={'email': 'a@x.com', 'password': 'pw123456', 'name': 'Alice'})

    response = client.post('/api/auth/register', json={'email': 'a@x.com', 'password': 'other-pw', 'name': 'Bob'})

    assert response.status_code == 409
    assert response.json() == {'error': 'Email already registered'}


@pytest.mark.parametrize(
    'body',
    [
        {'password': 'pw123456', 'name': 'Alice'},
        {'email': 'a@x.com', 'name': 'Alice'},
        {'email': 'a@x.com', 'password': 'pw123456'},
        {'email': '', 'password': 'pw123456', 'name': 'Alice'},
    ],
)
def test_register_rejects_missing_fields(client, body: dict) -> None:
    response = client.post('/api/auth/register', json=body)

    assert response.status_code == 400
    assert response.json() == {'error': 'Missing required fields (email, password, name)'}


def test_register_rejects_missing_body(client) -> None:
    response = client.post('/api/auth/register')

    assert response.status_code == 400
    assert response.json()['error'] == 'Invalid request body'


def test_login_returns_token_and_public_user(client, settings) -> None:
    client.post('/api/auth/register', json={'email': 'a@x.com', 'password': 'pw123456', 'name': 'Alice'})

    response = client.post('/api/auth/login', json={'email': 'a@x.com', 'password': 'pw123456'})

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {'token', 'user'}
    assert body['user'] == {'id': body['user']['id'], 'email': 'a@x.com', 'name': 'Alice', 'role': 'user'}

    payload = jwt.decode(body['token'], settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    assert payload['sub'] == str(body['user']['id'])
    assert payload['role'] == 'user'
    assert payload['email'] == 'a@x.com'


def test_login_failures_are_indistinguishable(client) -> None:
    client.post('/api/auth/register', json={'email': 'a@x.com', 'password': 'pw123456', 'name': 'Alice'})

    wrong_password = client.post('/api/auth/login', json={'email': 'a@x.com', 'password': 'nope-nope'})
    unknown_email = client.post('/api/auth/login', json={'email': 'ghost@x.com', 'password': 'pw123456'})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {'error': 'Invalid email or password'}


def test_login_rejects_missing_fields(client) -> None:
    response = client.post('/api/auth/login', json={'email': 'a@x.com'})

    assert response.status_code == 400
    assert response.json() == {'error': 'Missing required fields (email, password)'}


def test_me_returns_identity_from_token(client, register_and_login) -> None:
    login = register_and_login()

    response = client.get('/api/auth/me', headers={'Authorization': f"Bearer {login['token']}"})

    assert response.status_code == 200
    assert response.json() == {'id': login['user']['id'], 'email': 'a@x.com', 'role': 'user'}


def test_me_requires_token(client) -> None:
    response = client.get('/api/auth/me')

    assert response.status_code == 401


def _post_raw_json(client, path: str, raw_body: bytes):
    # lone surrogates are legal JSON escapes but cannot be encoded as UTF-8
    return client.post(path, content=raw_body, headers={'Content-Type': 'application/json'})


@pytest.mark.parametrize(
    'raw_body',
    [
        b'{"email": "a@x.com", "password": "\\ud800abc", "name": "Alice"}',
        b'{"email": "\\ud800@x.com", "password": "pw123456", "name": "Alice"}',
        b'{"email": "a@x.com", "password": "pw123456", "name": "Al\\udfffce"}',
    ],
)
def test_register_rejects_text_that_is_not_utf8(client, raw_body: bytes) -> None:
    response = _post_raw_json(client, '/api/auth/register', raw_body)

    assert response.status_code == 400
    assert 'error' in response.json()


def test_login_treats_unencodable_password_as_wrong_password(client) -> None:
    client.post('/api/auth/register', json={'email': 'a@x.com', 'password': 'pw123456', 'name': 'Alice'})

    response = _post_raw_json(client, '/api/auth/login', b'{"email": "a@x.com", "password": "\\ud800abc"}')

    assert response.status_code == 401
    assert response.json() == {'error': 'Invalid email or password'}


def test_login_rejects_unencodable_email(client) -> None:
    response = _post_raw_json(client, '/api/auth/login', b'{"email": "\\ud800@x.com", "password": "pw123456"}')

    assert response.status_code == 400
    assert response.json()['error'] == 'Invalid request body'
