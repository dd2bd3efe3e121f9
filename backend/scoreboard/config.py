import os

from dotenv import load_dotenv

load_dotenv(override=False)


def _env_bool(name, default=False):
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {'1', 'true', 'yes', 'on'}


def _split_csv(raw):
    if not raw:
        return []
    return [item.strip() for item in raw.split(',') if item.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///scoreboard.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # bcrypt cost factor (log2 rounds)
    BCRYPT_LOG_ROUNDS = int(os.environ.get('BCRYPT_LOG_ROUNDS', '10'))
    # Server-side lifetime of a browser-session login (hours)
    SESSION_LIFETIME_HOURS = int(os.environ.get('SESSION_LIFETIME_HOURS', '24'))
    # Lifetime of a "remember me" login (days)
    REMEMBER_ME_DAYS = int(os.environ.get('REMEMBER_ME_DAYS', '30'))
    AUTH_COOKIE_NAME = os.environ.get('AUTH_COOKIE_NAME', 'sid')
    AUTH_COOKIE_SECURE = _env_bool('AUTH_COOKIE_SECURE', False)
    # 'Lax', 'Strict' or 'None'; 'None' requires a secure cookie
    AUTH_COOKIE_SAMESITE = os.environ.get('AUTH_COOKIE_SAMESITE', 'Lax')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    CORS_ORIGINS = _split_csv(os.environ.get('CORS_ORIGINS')) or [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]
