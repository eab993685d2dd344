from flask import jsonify, request
from flask_jwt_extended import jwt_required

from blockforge.domain.exceptions import AssetUnresolved
from blockforge.normalizers.assets import normalize_asset, normalize_autocomplete
from blockforge.rendering.assets import AssetKind
from blockforge.services.asset_registry import (
    DEFAULT_POST_TYPES,
    SqlAssetLookup,
    autocomplete_posts,
    post_metadata,
)
from . import v1_bp


def _csv(raw):
    return tuple(item.strip() for item in (raw or "").split(",") if item.strip())


@v1_bp.route("/media/<int:attachment_id>", methods=["GET"])
@jwt_required()
def get_media(attachment_id):
    kind = AssetKind.FILE if request.args.get("kind") == AssetKind.FILE.value else AssetKind.MEDIA
    metadata = SqlAssetLookup().resolve_now(kind, attachment_id, types=_csv(request.args.get("types")))
    if metadata is None:
        raise AssetUnresolved(attachment_id, kind.value)
    return jsonify(normalize_asset(metadata)), 200


@v1_bp.route("/posts/<int:post_id>", methods=["GET"])
@jwt_required()
def get_post(post_id):
    post_types = _csv(request.args.get("post_types")) or DEFAULT_POST_TYPES
    metadata = SqlAssetLookup().resolve_now(AssetKind.POST, post_id, types=post_types)
    if metadata is None:
        raise AssetUnresolved(post_id, AssetKind.POST.value)
    return jsonify(normalize_asset(metadata)), 200


@v1_bp.route("/posts/autocomplete", methods=["GET"])
@jwt_required()
def autocomplete():
    try:
        per_page = int(request.args.get("per_page", 20))
    except ValueError:
        return jsonify({"error": "per_page must be an integer"}), 400

    documents = autocomplete_posts(
        search=request.args.get("search", ""),
        post_types=_csv(request.args.get("post_types")) or DEFAULT_POST_TYPES,
        per_page=per_page,
    )
    return jsonify(normalize_autocomplete([post_metadata(doc) for doc in documents])), 200
