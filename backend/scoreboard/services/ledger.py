import math
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import func, select, update

from scoreboard.errors import InvalidScore, UserNotFound
from scoreboard.models import User

MIN_SCORE = 0
MAX_SCORE = 100


@dataclass(frozen=True)
class LeaderboardRow:
    id: int
    name: str
    score: float
    rank: int

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'score': self.score, 'rank': self.rank}


def check_score(value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidScore()
    if math.isnan(value) or not MIN_SCORE <= value <= MAX_SCORE:
        raise InvalidScore()
    return value


class ScoreLedger:
    """Per-user running totals and the leaderboard built from them.

    Submissions accumulate: each accepted value is added to the user's total,
    with a NULL total counting as 0.
    """

    def __init__(self, session, logger):
        self.session = session
        self.logger = logger

    def submit_score(self, user_id: int, value) -> float:
        value = check_score(value)
        # Read-modify-write happens inside one UPDATE statement.
        result = self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(score=func.coalesce(User.score, 0) + value)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.session.rollback()
            raise UserNotFound()
        total = self.session.execute(
            select(User.score).where(User.id == user_id)
        ).scalar_one()
        self.session.commit()
        self.logger.info(f"[submit] user={user_id} value={value} total={total}")
        return total

    def get_score(self, user_id: int) -> Optional[float]:
        """Current total, or None when the user has not submitted yet."""
        user = self.session.get(User, user_id)
        if user is None:
            raise UserNotFound()
        return user.score

    def get_leaderboard(self) -> List[LeaderboardRow]:
        users = self.session.execute(
            select(User.id, User.name, User.score)
            .where(User.score.is_not(None))
            .order_by(User.score.desc(), User.id.asc())
        ).all()

        rows: List[LeaderboardRow] = []
        for position, (user_id, name, score) in enumerate(users, start=1):
            # Ties share the rank of the first user holding that score.
            rank = rows[-1].rank if rows and rows[-1].score == score else position
            rows.append(LeaderboardRow(id=user_id, name=name, score=score, rank=rank))
        return rows
