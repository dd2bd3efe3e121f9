from flask import Blueprint, jsonify, request

from scoreboard.api.auth import require_identity
from scoreboard.schemas import ProfileUpdateRequest, parse_body
from scoreboard.services import identity_manager

users = Blueprint('users', __name__)


@users.route('/me', methods=['GET'])
def me():
    identity = require_identity()
    user = identity_manager().get_profile(identity.user_id)
    return jsonify(user.to_dict())


@users.route('/profile', methods=['GET'])
def get_profile():
    identity = require_identity()
    user = identity_manager().get_profile(identity.user_id)
    return jsonify({'name': user.name, 'email': user.email})


@users.route('/profile', methods=['PUT'])
def update_profile():
    identity = require_identity()
    body = parse_body(ProfileUpdateRequest, request.get_json(silent=True))
    identity_manager().update_profile(identity.user_id, name=body.name, email=body.email)
    return jsonify({'message': 'Profile updated'})
