from flask import current_app, jsonify

from blockforge.extensions import BLOCK_REGISTRY_KEY, SETTINGS_REGISTRY_KEY
from . import v1_bp


@v1_bp.route('/health', methods=['GET'])
def health_check():
    registry = current_app.extensions.get(BLOCK_REGISTRY_KEY)
    settings = current_app.extensions.get(SETTINGS_REGISTRY_KEY)
    return jsonify({
        "status": "ok",
        "service": "blockforge",
        "block_types": len(registry) if registry is not None else 0,
        "settings_instances": len(settings.instances()) if settings is not None else 0,
    })
