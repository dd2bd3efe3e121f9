"""Domain services: identity/sessions and the score ledger.

Both are built once per app by ``create_app`` and kept in
``app.extensions['scoreboard']``; routes fetch them through the helpers below
instead of touching the database directly.
"""

from flask import current_app

from .identity import Identity, IdentityManager
from .ledger import LeaderboardRow, ScoreLedger


def identity_manager() -> IdentityManager:
    return current_app.extensions['scoreboard']['identity']


def score_ledger() -> ScoreLedger:
    return current_app.extensions['scoreboard']['ledger']


__all__ = [
    'Identity',
    'IdentityManager',
    'LeaderboardRow',
    'ScoreLedger',
    'identity_manager',
    'score_ledger',
]
