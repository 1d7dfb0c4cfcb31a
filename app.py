import os
from flask import Flask
from config import DevConfig
from api import close_client
from errors import register_error_handlers
from routes_auth import bp as auth_bp
from routes_admin import bp as admin_bp
from routes_upload import bp as upload_bp


def create_app(config=DevConfig):
    app = Flask(__name__, static_folder="static", template_folder="templates")
    app.config.from_object(config)

    # uploaded images are written here and served back from /uploads/
    os.makedirs(app.config["UPLOAD_FOLDER"], exist_ok=True)

    register_error_handlers(app)
    app.teardown_appcontext(close_client)

    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(upload_bp)
    return app


app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=3001, debug=True)
