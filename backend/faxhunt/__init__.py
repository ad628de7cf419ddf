from flask import Flask, jsonify, request
from flask_login import LoginManager
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

login_manager = LoginManager()
socketio = SocketIO(async_mode=None)


def _allowed_origins(config):
    origins = config.get('CORS_ORIGINS') or '*'
    if origins == '*':
        return '*'
    return [o.strip() for o in origins.split(',') if o.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = _allowed_origins(flask_app.config)
    login_manager.init_app(flask_app)
    CORS(flask_app, origins=allowed_origins, expose_headers=['Retry-After'])
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One authoritative session per app, shared by routes, sockets and loops
    from faxhunt.services.broadcast import Broadcaster
    from faxhunt.services.scheduler import Scheduler, start_background_loops
    from faxhunt.services.session import GameSession

    testing = flask_app.config.get('TESTING', False)
    broadcaster = Broadcaster(socketio.emit)
    scheduler = Scheduler(manual=testing)
    session = GameSession.from_config(flask_app.config, broadcaster, scheduler)
    flask_app.extensions['game_session'] = session

    from faxhunt.main import main
    flask_app.register_blueprint(main)

    from faxhunt.api.game import game
    flask_app.register_blueprint(game, url_prefix='/api')

    from faxhunt.errors import GameError

    @flask_app.errorhandler(GameError)
    def handle_game_error(exc):
        return jsonify(exc.to_dict()), exc.status_code

    from faxhunt.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @login_manager.user_loader
    def load_player(token):
        return session.player_for_token(token)

    @login_manager.request_loader
    def load_player_from_header(req):
        token = bearer_token(req)
        return session.player_for_token(token) if token else None

    @login_manager.unauthorized_handler
    def unauthorized():
        header = request.headers.get('Authorization')
        if not header:
            return jsonify({'error': 'Missing Authorization header'}), 401
        if not bearer_token(request):
            return jsonify({'error': 'Invalid Authorization header format'}), 400
        return jsonify({'error': 'Invalid token'}), 400

    @click.command('generate-secret')
    @click.argument('client_id')
    def generate_secret_command(client_id):
        """Prints the join secret for CLIENT_ID."""
        from faxhunt.client_secret import get_client_secret
        click.echo(f"Client ID: {client_id}")
        click.echo(f"Client Secret: {get_client_secret(client_id, flask_app.config['GAME_SECRET'])}")

    @click.command('reset-game')
    def reset_game_command():
        """Resets the in-process game session."""
        session.reset(reason='cli')
        click.echo('Game has been reset!')

    flask_app.cli.add_command(generate_secret_command)
    flask_app.cli.add_command(reset_game_command)

    if not testing:
        start_background_loops(flask_app, session)

    return flask_app


def bearer_token(req):
    """Token from ``Authorization: Bearer <token>``, or None."""
    parts = (req.headers.get('Authorization') or '').split(' ')
    if len(parts) != 2 or not parts[1]:
        return None
    return parts[1]
