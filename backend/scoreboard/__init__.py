import os
from datetime import timedelta

import click
from flask import Flask
from flask_bcrypt import Bcrypt
from flask_cors import CORS
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

from scoreboard.config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
migrate = Migrate()

MIGRATIONS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'migrations')


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    migrate.init_app(flask_app, db, directory=MIGRATIONS_DIR)
    CORS(flask_app, supports_credentials=True, origins=flask_app.config['CORS_ORIGINS'])

    from scoreboard.errors import register_error_handlers
    register_error_handlers(flask_app, db)

    # One instance of each service per app, built with explicit collaborators.
    from scoreboard.services import IdentityManager, ScoreLedger
    flask_app.extensions['scoreboard'] = {
        'identity': IdentityManager(
            db.session,
            bcrypt,
            session_lifetime=timedelta(hours=flask_app.config['SESSION_LIFETIME_HOURS']),
            remember_lifetime=timedelta(days=flask_app.config['REMEMBER_ME_DAYS']),
            logger=flask_app.logger,
        ),
        'ledger': ScoreLedger(db.session, logger=flask_app.logger),
    }

    from scoreboard.main import main
    flask_app.register_blueprint(main)

    from scoreboard.api import ALL_BLUEPRINTS
    for blueprint in ALL_BLUEPRINTS:
        flask_app.register_blueprint(blueprint, url_prefix='/api')

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from scoreboard.models import User
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            # Seed users
            for n in (1, 2, 3):
                user = User(
                    name=f'testuser{n}',
                    email=f'testuser{n}@example.com',
                    password_hash=bcrypt.generate_password_hash('password').decode('utf-8'),
                )
                db.session.add(user)

            db.session.commit()
            print('Database has been reset and seeded!')

    @click.command('purge-sessions')
    def purge_sessions_command():
        """Deletes expired login sessions."""
        with flask_app.app_context():
            removed = flask_app.extensions['scoreboard']['identity'].purge_expired()
            print(f'Removed {removed} expired sessions.')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(purge_sessions_command)

    return flask_app
