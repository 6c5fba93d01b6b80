"""Flask application factory for the TextCut HTTP API."""

from flask import Flask, jsonify


def create_app() -> Flask:
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = 64 * 1024 * 1024  # 64 MB of project JSON

    from textcut.web.routes import bp
    app.register_blueprint(bp)

    @app.errorhandler(413)
    def request_entity_too_large(error):
        return jsonify({"error": "Project too large"}), 413

    return app
