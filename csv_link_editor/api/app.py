from __future__ import annotations

import logging
from collections.abc import Callable

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from ..config.loader import default_config
from ..csvio.codec import ParseError
from ..engine.errors import NotFoundError, ValidationError
from ..engine.session import EditorSession
from ..models.config_models import EditorConfig
from ..sync.errors import SyncError
from ..sync.sheets_client import SheetsClient
from .routes import api

"""Flask application factory for the editor REST API.

Each app owns exactly one EditorSession (``app.extensions["csv_link_editor"]``).
Engine and HTTP errors are translated to JSON ``{"error": message}`` responses:
ParseError / ValidationError -> 400, NotFoundError -> 404, SyncError -> 502.
"""

__all__ = [
    "EXTENSION_KEY",
    "create_app",
    "get_session",
]

logger = logging.getLogger(__name__)

EXTENSION_KEY = "csv_link_editor"

SheetsClientFactory = Callable[[str], SheetsClient]


def _default_client_factory(cfg: EditorConfig) -> SheetsClientFactory:
    def factory(access_token: str) -> SheetsClient:
        return SheetsClient(
            access_token,
            base_url=cfg.sheets.api_base_url,
            timeout=cfg.sheets.timeout_seconds,
            value_input_option=cfg.sheets.value_input_option,
        )
    return factory


def create_app(
    config: EditorConfig | None = None,
    session: EditorSession | None = None,
    sheets_client_factory: SheetsClientFactory | None = None,
) -> Flask:
    cfg = config or default_config()
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = cfg.server.max_content_length
    app.config["EDITOR_CONFIG"] = cfg
    app.config["SHEETS_CLIENT_FACTORY"] = sheets_client_factory or _default_client_factory(cfg)
    app.extensions[EXTENSION_KEY] = session or EditorSession(header_rows=cfg.sheets.header_rows)

    CORS(app, origins=list(cfg.server.cors_origins), supports_credentials=True)
    app.register_blueprint(api)

    @app.errorhandler(ParseError)
    def handle_parse_error(e: ParseError):
        logger.warning(f"parse failed: {e}")
        return jsonify({"error": f"Failed to parse CSV: {e}"}), 400

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(NotFoundError)
    def handle_not_found(e: NotFoundError):
        return jsonify({"error": str(e)}), 404

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        # unknown routes, wrong methods and oversized bodies answer in JSON too
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(SyncError)
    def handle_sync_error(e: SyncError):
        logger.error(f"sheet sync failed: {e}")
        return jsonify({"error": str(e)}), 502

    return app


def get_session(app: Flask) -> EditorSession:
    return app.extensions[EXTENSION_KEY]
