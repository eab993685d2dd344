from flask import current_app
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()

BLOCK_REGISTRY_KEY = "blockforge.registry"
SETTINGS_REGISTRY_KEY = "blockforge.settings"


def current_registry():
    """Block registry built by create_app for the running application."""
    from blockforge.domain.exceptions import SchemaUnavailable

    registry = current_app.extensions.get(BLOCK_REGISTRY_KEY)
    if registry is None:
        raise SchemaUnavailable(
            "Block registry not initialized",
            reason=SchemaUnavailable.REGISTRY_UNAVAILABLE,
        )
    return registry


def current_settings():
    from blockforge.domain.exceptions import SchemaUnavailable

    settings = current_app.extensions.get(SETTINGS_REGISTRY_KEY)
    if settings is None:
        raise SchemaUnavailable(
            "Settings registry not initialized",
            reason=SchemaUnavailable.REGISTRY_UNAVAILABLE,
        )
    return settings
