from flask import Flask
from flask_cors import CORS
from flask_jwt_extended import JWTManager

from config import Config
from errors import register_error_handlers
from log_config import configure_logging
from models import init_storage, close_storage
from auth.middleware import init_auth
from auth.routes import auth_bp
from balances.routes import balances_bp
from categories.routes import categories_bp
from records.routes import income_bp, expenses_bp
from transactions.routes import transactions_bp
from users.routes import users_bp


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    configure_logging(app)

    CORS(app)

    init_storage(app)
    JWTManager(app)
    init_auth(app)

    register_error_handlers(app)

    app.register_blueprint(auth_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(income_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(balances_bp)
    app.register_blueprint(transactions_bp)
    app.register_blueprint(users_bp)

    return app


if __name__ == "__main__":
    app = create_app()
    try:
        app.run(debug=True)
    finally:
        close_storage(app)
