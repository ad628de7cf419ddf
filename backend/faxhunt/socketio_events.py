from flask import current_app, request
from flask_socketio import emit
from faxhunt import socketio
from faxhunt.client_secret import secrets_match

NAMESPACE = '/'


def _session():
    return current_app.extensions['game_session']


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    session = _session()
    sid = _get_sid()
    session.broadcaster.attach(sid)
    current_app.logger.info(f"[connect] viewer={sid} viewers={session.broadcaster.viewer_count}")
    # Fresh viewers get the current position right away, no shot backlog
    session.broadcaster.send_to(sid, session.snapshot())


def handle_disconnect(*args):
    session = _session()
    session.broadcaster.detach(_get_sid())
    current_app.logger.info(f"[disconnect] viewers={session.broadcaster.viewer_count}")


def handle_reset_game(data):
    secret = (data or {}).get('secret')
    if not secrets_match(secret, current_app.config['GAME_SECRET']):
        emit('error', {'message': 'Unauthorized'})
        return
    _session().reset(reason='socket')


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(namespace: str = NAMESPACE) -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('resetGame', handle_reset_game, namespace=namespace)
    socketio.on_event('ping', handle_ping, namespace=namespace)
