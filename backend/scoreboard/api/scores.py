from flask import Blueprint, jsonify, request

from scoreboard.api.auth import require_identity
from scoreboard.errors import InvalidScore
from scoreboard.schemas import ScoreSubmission, parse_body
from scoreboard.services import score_ledger

scores = Blueprint('scores', __name__)


@scores.route('/submit', methods=['POST'])
def submit_score():
    identity = require_identity()
    body = parse_body(ScoreSubmission, request.get_json(silent=True), error_cls=InvalidScore)
    total = score_ledger().submit_score(identity.user_id, body.score)
    return jsonify({'message': 'Score added successfully', 'totalScore': total})


@scores.route('/leaderboard', methods=['GET'])
def leaderboard():
    return jsonify([row.to_dict() for row in score_ledger().get_leaderboard()])
