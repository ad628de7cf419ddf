from functools import wraps

from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user
from faxhunt import socketio
from faxhunt.client_secret import get_client_secret, secrets_match
from faxhunt.errors import AuthorizationError, CapacityError, ConflictError, ValidationError


game = Blueprint('game', __name__)


def _session():
    return current_app.extensions['game_session']


def rate_limited(endpoint, identity=None):
    """Admission gate: 429 with ``Retry-After`` once the window is full.

    ``identity`` picks the key from the request; by default it is the
    authenticated player's name.
    """
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            key = identity() if identity else current_user.name
            admission = _session().admit(key, endpoint)
            if not admission.allowed:
                current_app.logger.info(f"[rate-limit] endpoint={endpoint} identity={key} retry_after={admission.retry_after}s")
                res = jsonify({'error': 'Too many requests', 'retryAfter': admission.retry_after})
                res.headers['Retry-After'] = str(admission.retry_after)
                return res, 429
            return view(*args, **kwargs)
        return wrapped
    return decorator


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _remote_identity():
    return request.remote_addr or 'anonymous'


def _require_operator():
    if not secrets_match(request.headers.get('X-Secret'), current_app.config['GAME_SECRET']):
        raise AuthorizationError('Unauthorized')


@game.route('/secret', methods=['POST'])
def issue_secret():
    data = _json_body()
    secret = data.get('secret')
    client_id = data.get('clientId')
    if not secret or not client_id:
        raise ValidationError('secret and clientId are required')
    if not secrets_match(secret, current_app.config['GAME_SECRET']):
        raise AuthorizationError('Invalid secret')
    if _session().player_named(client_id):
        raise ConflictError('clientId already exists')
    return jsonify({
        'clientId': client_id,
        'secret': get_client_secret(client_id, current_app.config['GAME_SECRET']),
    })


@game.route('/join', methods=['POST'])
@rate_limited('join', identity=_remote_identity)
def join():
    session = _session()
    data = _json_body()
    client_id = data.get('clientId')
    secret = data.get('secret')
    # The cap only turns away new names; registered players get their assignment back
    if session.is_full and not session.player_named(client_id):
        raise CapacityError(CapacityError.default_message)

    if not client_id or not secret or not isinstance(client_id, str):
        return jsonify({'error': 'Invalid join request'}), 400

    expected = get_client_secret(client_id, current_app.config['GAME_SECRET'])
    if not secrets_match(secret, expected):
        return jsonify({'error': 'Unauthorized'}), 401

    player, created = session.join(client_id)
    if created:
        current_app.logger.info(f"[join] player {player.name} joined the game")
    return jsonify({'token': player.token, 'username': player.name, 'color': player.color})


@game.route('/fire', methods=['POST'])
@login_required
@rate_limited('fire')
def fire():
    data = _json_body()
    result = _session().fire(current_user._get_current_object(), data.get('x'), data.get('y'))
    if result.get('hit'):
        current_app.logger.info(f"[fire] player {current_user.name} won!")
    return jsonify(result)


@game.route('/target', methods=['GET'])
@login_required
@rate_limited('target')
def target():
    session = _session()
    # Read now, answer later: the reply reflects where the target was when asked
    position = session.position
    delay_ms = int(current_app.config.get('TARGET_QUERY_DELAY_MS', 0))
    if delay_ms > 0:
        socketio.sleep(delay_ms / 1000.0)
    return jsonify(session.noisy_position(position))


@game.route('/configure', methods=['POST'])
def configure():
    _require_operator()
    data = _json_body()
    settings = _session().configure(speed=data.get('speed'), area=data.get('area'))
    return jsonify({'message': 'Configuration updated successfully', **settings})


@game.route('/reset', methods=['POST'])
def reset():
    _require_operator()
    _session().reset(reason='operator')
    return jsonify({'message': 'Game reset successfully'})
