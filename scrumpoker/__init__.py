from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)

REGISTRY_KEY = 'scrumpoker.registry'
SESSIONS_KEY = 'scrumpoker.sessions'


def create_app(config_class=Config):
    flask_app = Flask(__name__, static_folder=None)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ALLOWED_ORIGINS')
    if allowed_origins:
        CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One registry per app; it lives as long as the process
    from scrumpoker.state import Registry
    registry = Registry()
    flask_app.extensions[REGISTRY_KEY] = registry

    from scrumpoker.main import main
    flask_app.register_blueprint(main)

    from scrumpoker.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    # Importing here ensures the handlers bind to the initialized socketio instance
    from scrumpoker.broadcast import RoomChannel, socketio_publisher
    from scrumpoker.socketio_events import SessionHandler, register_socketio_handlers
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    channel = RoomChannel(socketio_publisher(socketio, namespace))
    handler = SessionHandler(registry, channel)
    flask_app.extensions[SESSIONS_KEY] = handler
    register_socketio_handlers(
        handler,
        namespace=namespace,
        testing=flask_app.config.get('TESTING', False),
    )

    flask_app.logger.info(f"[startup] namespace={namespace} public_dir={flask_app.config.get('PUBLIC_DIR')}")
    return flask_app
