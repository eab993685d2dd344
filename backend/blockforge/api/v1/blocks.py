from flask import current_app, jsonify, request
from flask_jwt_extended import jwt_required

from blockforge.application.blocks.rendering import render_preview
from blockforge.application.blocks.update_block_instance import (
    load_block_instance,
    update_block_instance,
)
from blockforge.domain.exceptions import SchemaUnavailable
from blockforge.extensions import current_registry
from blockforge.normalizers.block_instance import (
    normalize_block_instance,
    normalize_block_type,
)
from blockforge.rendering.hosts import HostContext
from blockforge.rendering.renderer import FieldRenderer
from blockforge.services.asset_registry import asset_view
from blockforge.utils.decorators import roles_required
from . import v1_bp

FORM_CONTEXTS = (HostContext.MODAL.value, HostContext.EDITOR.value)

# ------------------------
# Block types
# ------------------------

@v1_bp.route("/blocks", methods=["GET"])
@jwt_required()
def list_block_types():
    return jsonify([normalize_block_type(block_type) for block_type in current_registry().all()]), 200


@v1_bp.route("/blocks/<path:name>/fields", methods=["GET"])
@jwt_required()
def get_block_fields(name):
    """Schema fetch. Failures keep the same shape so the editor can show them inline."""
    try:
        fields = current_registry().fields_for(name)
    except SchemaUnavailable as exc:
        status = 503 if exc.reason == SchemaUnavailable.REGISTRY_UNAVAILABLE else 404
        current_app.logger.warning("Schema fetch for %s failed: %s", name, exc)
        return jsonify({
            "success": False,
            "fields": [],
            "reason": exc.reason,
            "message": str(exc),
        }), status

    return jsonify({
        "success": True,
        "fields": [schema.to_dict() for schema in fields],
    }), 200


@v1_bp.route("/blocks/<path:name>/render", methods=["POST"])
@jwt_required()
def render_block_preview(name):
    values = request.get_json(silent=True) or {}
    if not isinstance(values, dict):
        return jsonify({"error": "Value map must be a JSON object"}), 400

    return jsonify({"html": render_preview(block_name=name, values=values)}), 200

# ------------------------
# Block instances
# ------------------------

@v1_bp.route("/block-instances/<instance_id>", methods=["GET"])
@jwt_required()
def get_block_instance(instance_id):
    instance, store = load_block_instance(instance_id)
    return jsonify(normalize_block_instance(instance, store)), 200


@v1_bp.route("/block-instances/<instance_id>", methods=["PATCH"])
@jwt_required()
@roles_required("admin", "editor")
def patch_block_instance(instance_id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid request body"}), 400

    instance, store = update_block_instance(instance_id=instance_id, partial=data)
    return jsonify(normalize_block_instance(instance, store)), 200


@v1_bp.route("/block-instances/<instance_id>/form", methods=["GET"])
@jwt_required()
def get_block_instance_form(instance_id):
    context = request.args.get("context", HostContext.MODAL.value)
    if context not in FORM_CONTEXTS:
        return jsonify({"error": f"Invalid context: {context}"}), 400

    instance, store = load_block_instance(instance_id)
    form = FieldRenderer(assets=asset_view).render_form(store, HostContext(context))
    return jsonify({
        "id": instance.id,
        "block_type": instance.block_type,
        "context": context,
        "html": str(form.html),
    }), 200
