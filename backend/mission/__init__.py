from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config
from mission.exceptions import ConfigurationError

socketio = SocketIO(async_mode=None)


def _allowed_origins(raw):
    origins = [o.strip() for o in (raw or '').split(',') if o.strip()]
    if not origins or '*' in origins:
        return '*'
    return origins


def _validate_config(config):
    required = config.get('REQUIRED_PLAYERS')
    if not isinstance(required, int) or required < 1:
        raise ConfigurationError(f'REQUIRED_PLAYERS must be an integer >= 1, got {required!r}')
    duration = config.get('LEADERBOARD_DURATION_MS')
    if not isinstance(duration, int) or duration < 0:
        raise ConfigurationError(f'LEADERBOARD_DURATION_MS must be an integer >= 0, got {duration!r}')


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    _validate_config(flask_app.config)

    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ALLOWED_ORIGINS'))
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(
        flask_app,
        cors_allowed_origins=allowed_origins,
        ping_timeout=flask_app.config.get('SOCKETIO_PING_TIMEOUT', 60),
        ping_interval=flask_app.config.get('SOCKETIO_PING_INTERVAL', 25),
    )

    from mission.main import main
    flask_app.register_blueprint(main)

    from mission.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    # One registry per app instance; handlers find it through the app extensions
    from mission.services.rooms import BackgroundScheduler, RoomCoordinator, RoomRegistry
    from mission.transport import SocketIOTransport
    flask_app.extensions['mission'] = RoomCoordinator(
        registry=RoomRegistry(),
        transport=SocketIOTransport(socketio),
        scheduler=BackgroundScheduler(socketio),
        required_players=flask_app.config['REQUIRED_PLAYERS'],
        leaderboard_duration_ms=flask_app.config['LEADERBOARD_DURATION_MS'],
        start_countdown_ms=flask_app.config.get('START_COUNTDOWN_MS', 3000),
    )

    from mission.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('show-config')
    def show_config_command():
        """Prints the effective coordinator settings."""
        for key in ('REQUIRED_PLAYERS', 'LEADERBOARD_DURATION_MS', 'START_COUNTDOWN_MS',
                    'HOST', 'PORT', 'CORS_ALLOWED_ORIGINS'):
            click.echo(f'{key}={flask_app.config.get(key)}')

    flask_app.cli.add_command(show_config_command)

    flask_app.logger.info(
        f"Mission coordinator ready: {flask_app.config['REQUIRED_PLAYERS']} players auto-start"
    )
    return flask_app
