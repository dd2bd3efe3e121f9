from flask import Blueprint, current_app, jsonify, request

from scoreboard.errors import InvalidCredentials
from scoreboard.schemas import LoginRequest, RegisterRequest, parse_body
from scoreboard.services import Identity, identity_manager

auth = Blueprint('auth', __name__)


def session_token():
    return request.cookies.get(current_app.config['AUTH_COOKIE_NAME'])


def require_identity() -> Identity:
    """Resolve the request's session cookie or raise Unauthenticated."""
    return identity_manager().resolve_session(session_token())


def _cookie_options():
    cfg = current_app.config
    samesite = cfg.get('AUTH_COOKIE_SAMESITE') or 'Lax'
    # Browsers drop SameSite=None cookies that are not Secure
    secure = bool(cfg.get('AUTH_COOKIE_SECURE')) or samesite.lower() == 'none'
    return {'httponly': True, 'secure': secure, 'samesite': samesite}


def set_session_cookie(response, token, persistent=False):
    max_age = None
    if persistent:
        max_age = int(current_app.config['REMEMBER_ME_DAYS']) * 24 * 60 * 60
    response.set_cookie(current_app.config['AUTH_COOKIE_NAME'], token,
                        max_age=max_age, **_cookie_options())
    return response


def clear_session_cookie(response):
    response.delete_cookie(current_app.config['AUTH_COOKIE_NAME'], **_cookie_options())
    return response


@auth.route('/register', methods=['POST'])
def register():
    body = parse_body(RegisterRequest, request.get_json(silent=True))
    token = identity_manager().register(body.name, body.email, body.password)
    return set_session_cookie(jsonify({'message': 'Registered'}), token)


@auth.route('/login', methods=['POST'])
def login():
    body = parse_body(LoginRequest, request.get_json(silent=True), error_cls=InvalidCredentials)
    remember = bool(body.remember_me)
    token = identity_manager().login(body.email, body.password, remember=remember)
    return set_session_cookie(jsonify({'message': 'Logged in'}), token, persistent=remember)


@auth.route('/logout', methods=['POST'])
def logout():
    identity_manager().logout(session_token())
    return clear_session_cookie(jsonify({'message': 'Logged out'}))

