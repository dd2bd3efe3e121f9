from datetime import datetime, timezone

from scoreboard import db


def utcnow():
    """Naive UTC timestamp; SQLite drops tzinfo on the way back anyway."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(80), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(128), nullable=False)
    score = db.Column(db.Float, nullable=True)  # NULL until the first submission
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    sessions = db.relationship('AuthSession', back_populates='user', lazy='dynamic',
                               cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'score': self.score,
        }

    def __repr__(self):
        return f'<User {self.id} {self.email}>'


class AuthSession(db.Model):
    __tablename__ = 'auth_session'
    id = db.Column(db.Integer, primary_key=True)
    # sha256 hex digest of the cookie token
    token_hash = db.Column(db.String(64), unique=True, nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    persistent = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    expires_at = db.Column(db.DateTime, nullable=False)

    user = db.relationship('User', back_populates='sessions')

    def is_expired(self, now=None):
        return (now or utcnow()) >= self.expires_at
