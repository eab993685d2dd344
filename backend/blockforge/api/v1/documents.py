from flask import jsonify, request
from flask_jwt_extended import jwt_required

from blockforge.application.blocks.create_block_instance import create_block_instance
from blockforge.application.blocks.rendering import render_document
from blockforge.application.documents.create_document import create_document
from blockforge.models.document import Document
from blockforge.normalizers.block_instance import normalize_block_instance
from blockforge.normalizers.document import normalize_document
from blockforge.utils.decorators import roles_required
from . import v1_bp


@v1_bp.route("/documents", methods=["POST"])
@jwt_required()
@roles_required("admin", "editor")
def create_document_route():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid request body"}), 400

    document = create_document(data=data)
    return jsonify(normalize_document(document)), 201


@v1_bp.route("/documents/<document_id>", methods=["GET"])
@jwt_required()
def get_document(document_id):
    document = Document.query.filter_by(id=document_id).first_or_404()
    return jsonify(normalize_document(document, with_blocks=True)), 200


@v1_bp.route("/documents/<document_id>/blocks", methods=["POST"])
@jwt_required()
@roles_required("admin", "editor")
def add_document_block(document_id):
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid request body"}), 400

    block_name = data.get("block_type")
    if not block_name:
        return jsonify({"error": "block_type is required"}), 400

    position = data.get("position")
    if position is not None and not isinstance(position, int):
        return jsonify({"error": "position must be an integer"}), 400

    values = data.get("values") or {}
    if not isinstance(values, dict):
        return jsonify({"error": "Value map must be a JSON object"}), 400

    instance = create_block_instance(
        document_id=document_id,
        block_name=block_name,
        position=position,
        values=values,
    )
    return jsonify(normalize_block_instance(instance)), 201


@v1_bp.route("/documents/<document_id>/render", methods=["GET"])
@jwt_required()
def render_document_route(document_id):
    return jsonify({"html": render_document(document_id=document_id)}), 200
