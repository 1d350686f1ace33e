from flask import Flask, request, jsonify
from flask_migrate import Migrate
from flask_cors import CORS
import click
import os
import logging
from dotenv import load_dotenv
from database.db import db
from utils.encrypt import encryption_manager

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

migrate = Migrate()


def create_app(test_config=None):
    load_dotenv()

    app = Flask(__name__)

    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY')
    app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get('DATABASE_URL')
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['TOKEN_EXPIRES_IN'] = int(os.environ.get('TOKEN_EXPIRES_IN', '3600'))
    app.config['UPLOAD_FOLDER'] = os.environ.get('UPLOAD_FOLDER', os.path.join(BASE_DIR, 'uploads'))
    app.config['ENCRYPTION_KEY'] = os.environ.get('ENCRYPTION_KEY')
    app.config['MAX_CONTENT_LENGTH'] = 16 * 1024 * 1024  # 16MB photo limit

    if test_config:
        app.config.update(test_config)

    if not app.config['SECRET_KEY']:
        raise ValueError("SECRET_KEY environment variable is required")
    if not app.config['SQLALCHEMY_DATABASE_URI']:
        raise ValueError("DATABASE_URL environment variable is required")

    logging.basicConfig(level=os.environ.get('LOG_LEVEL', 'INFO'))

    # Configure CORS with environment-specific origins
    allowed_origins = os.environ.get('ALLOWED_ORIGINS', '*').split(',')
    CORS(app,
         resources={r"/*": {"origins": allowed_origins}},
         allow_headers=["Content-Type", "Authorization"],
         methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )

    db.init_app(app)
    migrate.init_app(app, db)
    encryption_manager.init_app(app)

    import models  # noqa: F401  registers tables with the metadata
    from routes.users import users_bp
    from routes.services import services_bp, uploads_bp
    from routes.bookings import bookings_bp
    from routes.payments import payments_bp
    from routes.reviews import reviews_bp
    from routes.ratings import ratings_bp

    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(services_bp, url_prefix='/api/services')
    app.register_blueprint(bookings_bp, url_prefix='/api/bookings')
    app.register_blueprint(payments_bp, url_prefix='/api/payments')
    app.register_blueprint(reviews_bp, url_prefix='/api/reviews')
    app.register_blueprint(ratings_bp, url_prefix='/api/ratings')
    app.register_blueprint(uploads_bp)

    @app.before_request
    def log_origin():
        origin = request.headers.get('Origin')
        logging.info(f"Request Origin: {origin}")

    @app.route('/api/test')
    def index():
        return jsonify({
            "message": "Utshob API is running.",
            "database": db.engine.url.database
        })

    register_commands(app)
    return app


def register_commands(app):
    @app.cli.command('init-db')
    def init_db():
        """Create all tables."""
        db.create_all()
        click.echo("Database tables created.")

    @app.cli.command('create-admin')
    @click.option('--name', required=True)
    @click.option('--email', required=True)
    @click.option('--number', default='')
    @click.option('--address', default='')
    @click.password_option()
    def create_admin(name, email, number, address, password):
        """Create an admin account (admins cannot sign up over HTTP)."""
        from models.accounts import User
        email = email.strip().lower()
        if User.query.filter_by(email=email).first():
            raise click.ClickException("User already exists")
        admin = User(name=name, email=email, number=number, address=address, role='admin')
        admin.set_password(password)
        db.session.add(admin)
        db.session.commit()
        click.echo(f"Admin {email} created (id={admin.id}).")


if __name__ == '__main__':
    create_app().run(host='0.0.0.0', port=int(os.environ.get('PORT', '5000')), debug=True)
