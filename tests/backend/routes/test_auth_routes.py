from backend.core import config
from backend.models.user import User


def _register(client, email='lena@example.com', role='AZUBI', password='pw-1234', name='Lena'):
    return client.post(
        '/auth/register',
        json={'email': email, 'password': password, 'name': name, 'role': role},
    )


def test_register_returns_user_and_sets_auth_cookie(make_client) -> None:
    client = make_client()

    response = _register(client)

    assert response.status_code == 201
    body = response.json()
    assert body['user']['email'] == 'lena@example.com'
    assert body['user']['role'] == 'AZUBI'
    set_cookie = response.headers['set-cookie'].lower()
    assert set_cookie.startswith('authtoken=')
    assert 'httponly' in set_cookie
    assert 'samesite=lax' in set_cookie
    assert 'max-age=604800' in set_cookie
    assert '; secure' not in set_cookie


def test_register_duplicate_email_returns_400(make_client, db) -> None:
    client = make_client()
    _register(client)

    response = _register(make_client(), role='AUSBILDER')

    assert response.status_code == 400
    assert response.json() == {'error': 'User already exists.'}
    assert db.query(User).count() == 1


def test_register_rejects_admin_and_unknown_roles(make_client) -> None:
    client = make_client()

    assert _register(client, role='ADMIN').status_code == 400
    assert _register(client, role='CHEF').status_code == 400


def test_register_missing_fields_returns_400(make_client) -> None:
    response = make_client().post('/auth/register', json={'email': 'x@example.com'})

    assert response.status_code == 400
    assert 'error' in response.json()


def test_login_sets_cookie_and_me_reads_it(make_client) -> None:
    _register(make_client())
    client = make_client()

    login = client.post('/auth/login', json={'email': 'LENA@example.com', 'password': 'pw-1234'})
    me = client.get('/auth/me')

    assert login.status_code == 200
    assert login.json()['user']['email'] == 'lena@example.com'
    assert me.status_code == 200
    assert me.json() == {'id': login.json()['user']['id'], 'email': 'lena@example.com', 'role': 'AZUBI', 'name': 'Lena'}


def test_login_with_wrong_password_returns_401(make_client) -> None:
    _register(make_client())

    response = make_client().post('/auth/login', json={'email': 'lena@example.com', 'password': 'nope'})

    assert response.status_code == 401
    assert response.json() == {'error': 'Invalid credentials.'}


def test_login_missing_password_returns_400(make_client) -> None:
    response = make_client().post('/auth/login', json={'email': 'lena@example.com', 'password': ''})

    assert response.status_code == 400


def test_me_without_cookie_returns_401(make_client) -> None:
    response = make_client().get('/auth/me')

    assert response.status_code == 401
    assert response.json() == {'error': 'Not authenticated.'}


def test_me_with_invalid_cookie_returns_401(make_client) -> None:
    client = make_client()
    client.cookies.set('authToken', 'garbage')

    assert client.get('/auth/me').status_code == 401


def test_me_accepts_bearer_header(make_client) -> None:
    client = make_client()
    token = _register(client).cookies['authToken']

    response = make_client().get('/auth/me', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 200


def test_me_for_deleted_user_returns_401(make_client, db) -> None:
    client = make_client()
    _register(client)
    db.query(User).delete()
    db.commit()

    response = client.get('/auth/me')

    assert response.status_code == 401
    assert response.json() == {'error': 'User not found.'}


def test_logout_clears_cookie(make_client) -> None:
    client = make_client()
    _register(client)

    response = client.post('/auth/logout')

    assert response.status_code == 200
    assert client.get('/auth/me').status_code == 401


def test_register_sets_secure_cookie_in_production(make_client, monkeypatch) -> None:
    monkeypatch.setattr(config, 'APP_ENV', 'production')

    response = _register(make_client())

    assert response.status_code == 201
    assert '; secure' in response.headers['set-cookie'].lower()


def test_logout_clears_secure_cookie_in_production(make_client, monkeypatch) -> None:
    monkeypatch.setattr(config, 'APP_ENV', 'production')

    response = make_client().post('/auth/logout')

    set_cookie = response.headers['set-cookie'].lower()
    assert set_cookie.startswith('authtoken=')
    assert 'max-age=0' in set_cookie
    assert '; secure' in set_cookie
