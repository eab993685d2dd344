from flask import Flask, send_file, current_app
from .config import config_by_name
from .extensions import (
    BLOCK_REGISTRY_KEY,
    SETTINGS_REGISTRY_KEY,
    db,
    jwt,
    migrate,
)
from .api.v1 import v1_bp
from .middleware.current_user import current_user_middleware
from .errors import register_error_handlers
from .editor.store import Encoding
from .schema.registry import BlockRegistry
from .schema.settings import SettingsRegistry
from .schema.theme_options import default_settings_pages
from flask_swagger_ui import get_swaggerui_blueprint
import os


def create_app(config_name: str = "development") -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])

    # -------------------------------------------------
    # Extensions
    # -------------------------------------------------
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # Models must be imported before create_all / migrations see the metadata
    from .models import asset, audit_log, block_instance, document, option, user  # noqa: F401

    # -------------------------------------------------
    # Registries (built once, looked up through app.extensions)
    # -------------------------------------------------
    registry = BlockRegistry(default_encoding=Encoding(app.config["BLOCK_ENCODING"]))
    for package in app.config["BLOCK_PACKAGES"]:
        registry.discover(package)
    app.extensions[BLOCK_REGISTRY_KEY] = registry

    app.extensions[SETTINGS_REGISTRY_KEY] = SettingsRegistry(
        default_settings_pages(app.config["SETTINGS_INSTANCES"])
    )
    app.logger.info(
        "Registered %d block types and %d settings instances",
        len(registry),
        len(app.config["SETTINGS_INSTANCES"]),
    )

    # -------------------------------------------------
    # Middleware
    # -------------------------------------------------
    current_user_middleware(app)

    # -------------------------------------------------
    # API Blueprints
    # -------------------------------------------------
    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    register_error_handlers(app)

    # -------------------------------------------------
    # Serve OpenAPI YAML (public)
    # -------------------------------------------------
    @app.route("/openapi/blockforge.yaml", methods=["GET"], endpoint="openapi_blockforge")
    def serve_openapi():
        spec_path = os.path.join(
            current_app.root_path,
            "api",
            "v1",
            "blockforge_openapi.yaml",
        )

        if not os.path.exists(spec_path):
            raise FileNotFoundError("blockforge_openapi.yaml not found")

        return send_file(
            spec_path,
            mimetype="application/yaml",
            as_attachment=False,
        )

    # -------------------------------------------------
    # Swagger UI
    # -------------------------------------------------
    SWAGGER_URL = "/swagger"
    API_URL = "/openapi/blockforge.yaml"

    swaggerui_blueprint = get_swaggerui_blueprint(
        SWAGGER_URL,
        API_URL,
        config={
            "app_name": "Blockforge API",
            "deepLinking": True,
            "persistAuthorization": True,
        },
    )

    app.register_blueprint(swaggerui_blueprint, url_prefix=SWAGGER_URL)

    return app
