import pytest

from conftest import auth_header, register_user


def test_register_returns_token_and_user_summary(client) -> None:
    body = register_user(client, 'Alice', ' Alice@X.edu ')

    assert body['message'] == 'User registered successfully'
    assert body['token']
    assert body['user']['email'] == 'alice@x.edu'
    assert body['user']['role'] == 'student'
    assert 'password' not in body['user']
    assert 'hashedPassword' not in body['user']


def test_register_rejects_duplicate_email_with_400(client) -> None:
    register_user(client, 'Alice', 'alice@x.edu')

    response = client.post(
        '/api/auth/register',
        json={'name': 'Alice 2', 'email': 'alice@x.edu', 'password': 'secret2'},
    )

    assert response.status_code == 400
    assert response.json() == {'error': 'User with this email already exists'}


@pytest.mark.parametrize(
    ('payload', 'field', 'message'),
    [
        ({'email': 'a@x.edu', 'password': 'secret1'}, 'name', 'Name is required'),
        ({'name': 'A', 'email': 'not-an-email', 'password': 'secret1'}, 'email', 'Valid email is required'),
        ({'name': 'A', 'email': 'a@x.edu', 'password': '123'}, 'password', 'Password must be at least 6 characters'),
        ({'name': 'A', 'email': 'a@x.edu', 'password': 'secret1', 'role': 'janitor'}, 'role', 'Role must be student or admin'),
    ],
)
def test_register_validation_errors_are_field_level(client, payload: dict, field: str, message: str) -> None:
    response = client.post('/api/auth/register', json=payload)

    assert response.status_code == 400
    assert {'field': field, 'message': message} in response.json()['errors']


@pytest.mark.parametrize('email', ['alice@x..edu', 'alice@-x.edu', '.alice@x.edu', 'alice@x.edu.', 'a"b@x.edu', 'alice'])
def test_register_rejects_malformed_email(client, email: str) -> None:
    response = client.post('/api/auth/register', json={'name': 'Alice', 'email': email, 'password': 'secret1'})

    assert response.status_code == 400
    assert response.json()['errors'] == [{'field': 'email', 'message': 'Valid email is required'}]


def test_login_rejects_malformed_email(client) -> None:
    response = client.post('/api/auth/login', json={'email': 'alice@x..edu', 'password': 'secret1'})

    assert response.status_code == 400
    assert response.json()['errors'] == [{'field': 'email', 'message': 'Valid email is required'}]


def test_login_with_valid_credentials(client) -> None:
    register_user(client, 'Alice', 'alice@x.edu')

    response = client.post('/api/auth/login', json={'email': 'alice@x.edu', 'password': 'secret1'})

    assert response.status_code == 200
    assert response.json()['message'] == 'Login successful'
    assert response.json()['user']['name'] == 'Alice'


@pytest.mark.parametrize('email', ['alice@x.edu', 'ghost@x.edu'])
def test_login_failure_is_generic_401(client, email: str) -> None:
    register_user(client, 'Alice', 'alice@x.edu')

    response = client.post('/api/auth/login', json={'email': email, 'password': 'wrong-pass'})

    assert response.status_code == 401
    assert response.json() == {'error': 'Invalid email or password'}


def test_me_returns_signed_in_user(client, student) -> None:
    response = client.get('/api/auth/me', headers=auth_header(student['token']))

    assert response.status_code == 200
    assert response.json()['user']['email'] == 'alice@x.edu'


def test_protected_route_requires_token(client) -> None:
    response = client.get('/api/issues/my-issues')

    assert response.status_code == 401
    assert response.json() == {'error': 'Access denied. No token provided.'}


def test_protected_route_rejects_bad_token(client) -> None:
    response = client.get('/api/issues/my-issues', headers=auth_header('tampered.token.value'))

    assert response.status_code == 401


def test_root_lists_endpoints(client) -> None:
    response = client.get('/')

    assert response.status_code == 200
    assert response.json()['endpoints']['admin']['resolveIssue'] == 'PUT /api/admin/issues/:id/resolve'
