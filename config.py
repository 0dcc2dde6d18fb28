import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _split_origins(value):
    if not value:
        return None
    if value.strip() == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    HOST = os.environ.get('SERVER_HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3000'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Built client bundle; files under static/ are content-hashed
    PUBLIC_DIR = os.environ.get('PUBLIC_DIR') or os.path.join(BASE_DIR, 'public')
    STATIC_CACHE_MAX_AGE = int(os.environ.get('STATIC_CACHE_MAX_AGE', str(365 * 24 * 60 * 60)))
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # None means same-origin only, e.g. "http://localhost:5173" for a dev client
    CORS_ALLOWED_ORIGINS = _split_origins(os.environ.get('CORS_ALLOWED_ORIGINS'))
    MAX_PLAYER_NAME_LENGTH = int(os.environ.get('MAX_PLAYER_NAME_LENGTH', '64'))
