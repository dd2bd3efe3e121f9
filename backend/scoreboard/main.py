from flask import Blueprint, jsonify

main = Blueprint('main', __name__)


@main.route('/health')
def health():
    """Readiness probe."""
    return jsonify({'ok': True})
