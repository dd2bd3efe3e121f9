from conftest import login, register

from scoreboard.models import AuthSession, User


def test_register_logs_in(client):
    res = register(client)
    assert res.status_code == 200
    assert res.get_json() == {'message': 'Registered'}
    assert client.get_cookie('sid') is not None

    # The new session is usable straight away
    me = client.get('/api/me')
    assert me.status_code == 200
    data = me.get_json()
    assert data['name'] == 'Alice'
    assert data['email'] == 'alice@example.com'
    assert data['score'] is None
    assert 'password_hash' not in data


def test_register_duplicate_email(client, flask_app):
    assert register(client).status_code == 200
    res = register(client, name='Other Alice')
    assert res.status_code == 400
    assert res.get_json() == {'error': 'Email already registered'}
    # Case and whitespace do not make a different address
    res = register(client, email='  ALICE@example.com ')
    assert res.status_code == 400
    assert User.query.count() == 1


def test_register_rejects_malformed_body(client):
    assert client.post('/api/register', json={'email': 'a@b.co', 'password': 'x'}).status_code == 400
    res = client.post('/api/register', json={'name': 'A', 'email': 'not-an-email', 'password': 'x'})
    assert res.status_code == 400
    assert res.get_json() == {'error': 'Invalid email'}
    assert client.post('/api/register', data='nope').status_code == 400
    for bad in ('a@.b.c', 'a@b..c', 'a@b', '@example.com', 'a b@example.com'):
        res = register(client, email=bad)
        assert res.status_code == 400, bad
        assert res.get_json() == {'error': 'Invalid email'}
    assert User.query.count() == 0
    too_long = 'p' * 73
    assert register(client, password=too_long).status_code == 400


def test_password_is_hashed(client, flask_app):
    register(client)
    user = User.query.filter_by(email='alice@example.com').one()
    assert user.password_hash != 'hunter22'
    assert user.password_hash.startswith('$2')


def test_login_success_and_failure_shapes(client):
    register(client)
    client.post('/api/logout')

    ok = login(client)
    assert ok.status_code == 200
    assert ok.get_json() == {'message': 'Logged in'}

    wrong_password = login(client, password='wrong')
    unknown_user = login(client, email='nobody@example.com')
    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.get_json() == unknown_user.get_json() == {'error': 'Invalid credentials'}


def test_login_malformed_body_is_invalid_credentials(client):
    register(client)
    for body in ({'email': 5, 'password': 'hunter22'},
                 {'email': 'alice@example.com', 'password': ['hunter22']},
                 {'email': 'alice@example.com'},
                 {}):
        res = client.post('/api/login', json=body)
        assert res.status_code == 401, body
        assert res.get_json() == {'error': 'Invalid credentials'}


def test_login_with_oversized_password_is_just_invalid(client):
    register(client)
    res = login(client, password='x' * 200)
    assert res.status_code == 401
    assert res.get_json() == {'error': 'Invalid credentials'}


def test_remember_me_sets_persistent_cookie(client, flask_app):
    register(client)
    res = login(client, rememberMe=True)
    cookie = next(h for h in res.headers.getlist('Set-Cookie') if h.startswith('sid='))
    assert 'Max-Age=2592000' in cookie
    assert 'HttpOnly' in cookie

    res = login(client, rememberMe=False)
    cookie = next(h for h in res.headers.getlist('Set-Cookie') if h.startswith('sid='))
    assert 'Max-Age' not in cookie
    assert 'Expires' not in cookie


def test_login_keeps_other_sessions(client, flask_app):
    register(client)
    first = client.get_cookie('sid').value

    other = flask_app.test_client()
    assert login(other).status_code == 200

    # Logging in elsewhere does not invalidate the first session
    client.set_cookie('sid', first)
    assert client.get('/api/me').status_code == 200
    assert AuthSession.query.count() == 2


def test_logout_invalidates_session(client):
    register(client)
    token = client.get_cookie('sid').value

    res = client.post('/api/logout')
    assert res.status_code == 200
    assert res.get_json() == {'message': 'Logged out'}

    # Replaying the old cookie no longer works
    client.set_cookie('sid', token)
    res = client.get('/api/me')
    assert res.status_code == 401
    assert res.get_json() == {'error': 'Not logged in'}

    # Logging out again is harmless
    assert client.post('/api/logout').status_code == 200


def test_logout_without_session(client):
    res = client.post('/api/logout')
    assert res.status_code == 200


def test_protected_routes_require_session(client):
    assert client.get('/api/me').status_code == 401
    assert client.get('/api/profile').status_code == 401
    assert client.put('/api/profile', json={'name': 'x'}).status_code == 401
    assert client.post('/api/submit', json={'score': 10}).status_code == 401
    client.set_cookie('sid', 'made-up-token')
    assert client.get('/api/me').status_code == 401


def test_me_for_deleted_user(client, flask_app):
    from scoreboard import db

    register(client)
    user = User.query.one()
    # Remove the user behind the session's back
    db.session.execute(User.__table__.delete().where(User.__table__.c.id == user.id))
    db.session.commit()

    res = client.get('/api/me')
    assert res.status_code == 404
    assert res.get_json() == {'error': 'User not found'}
