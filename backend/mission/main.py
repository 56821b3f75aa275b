from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    required = current_app.config['REQUIRED_PLAYERS']
    return f'DKA Game Server Running. Mode: {required} Players Auto-Start.'


@main.route('/health')
def health():
    coordinator = current_app.extensions['mission']
    return jsonify({
        'status': 'healthy',
        'required_players': coordinator.required_players,
        'rooms': len(coordinator.registry),
    })
