from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    session = current_app.extensions['game_session']
    return jsonify({
        'message': 'Welcome to the Fax Hunt game server!',
        'status': session.status.value,
        'winner': session.winner,
        'players': len(session.players),
    })
