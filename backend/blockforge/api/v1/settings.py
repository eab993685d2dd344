from flask import g, jsonify, request
from flask_jwt_extended import jwt_required

from blockforge.application.settings.delete_version import delete_version
from blockforge.application.settings.prune_versions import prune_versions
from blockforge.application.settings.restore_version import restore_version
from blockforge.application.settings.save_settings import save_settings
from blockforge.extensions import current_settings
from blockforge.normalizers.versioning import normalize_versions
from blockforge.rendering.hosts import SETTINGS_INPUT_NAME
from blockforge.rendering.settings_page import SettingsPageView
from blockforge.services.asset_registry import asset_view
from blockforge.utils.decorators import roles_required
from blockforge.utils.form import parse_nested_form
from blockforge.versioning.options import SqlOptionRepository
from blockforge.versioning.store import VersioningStore
from . import v1_bp

# URL name of the global settings instance, whose id is ""
GLOBAL_INSTANCE = "global"


def _instance_id(instance: str) -> str:
    return "" if instance == GLOBAL_INSTANCE else instance


def _page(instance: str):
    return current_settings().get(_instance_id(instance))


def _store(instance: str) -> VersioningStore:
    return VersioningStore(SqlOptionRepository(), _page(instance).instance)


@v1_bp.route("/settings", methods=["GET"])
@jwt_required()
def list_settings_instances():
    return jsonify([
        {
            "instance": page.instance or GLOBAL_INSTANCE,
            "label": page.label,
            "kind": page.kind,
            "tabs": [{"id": tab.id, "label": tab.label} for tab in page.tabs],
        }
        for page in current_settings().all()
    ]), 200


@v1_bp.route("/settings/<instance>/form", methods=["GET"])
@jwt_required()
@roles_required("admin")
def get_settings_form(instance):
    page = _page(instance)
    store = VersioningStore(SqlOptionRepository(), page.instance)

    values = {**page.defaults(), **store.get_active_value()}
    view = SettingsPageView(
        page,
        values,
        store.versions(),
        current_tab=request.args.get("tab"),
        assets=asset_view,
    )
    return jsonify({
        "instance": page.instance or GLOBAL_INSTANCE,
        "current_tab": view.current_tab,
        "html": str(view.render()),
    }), 200


@v1_bp.route("/settings/<instance>", methods=["POST"])
@jwt_required()
@roles_required("admin")
def save_settings_route(instance):
    page = _page(instance)

    if request.is_json:
        data = request.get_json(silent=True) or {}
        submitted = data.get("options")
        tab = data.get("current_tab")
        if not isinstance(submitted, dict):
            return jsonify({"error": "options must be an object"}), 400
    else:
        submitted = parse_nested_form(request.form.items(multi=True), SETTINGS_INPUT_NAME)
        tab = request.form.get("webtero_current_tab")

    user = getattr(g, "current_user", None)
    result = save_settings(
        page=page,
        submitted=submitted,
        author=user.author_name if user is not None else "",
        tab=tab,
    )
    return jsonify(result), 201


@v1_bp.route("/settings/<instance>/versions", methods=["GET"])
@jwt_required()
@roles_required("admin")
def list_settings_versions(instance):
    page = _page(instance)
    store = VersioningStore(SqlOptionRepository(), page.instance)
    return jsonify(normalize_versions(page.instance or GLOBAL_INSTANCE, store.versions())), 200


@v1_bp.route("/settings/<instance>/versions/<int:timestamp>/restore", methods=["POST"])
@jwt_required()
@roles_required("admin")
def restore_settings_version(instance, timestamp):
    page = _page(instance)
    restore_version(instance=page.instance, timestamp=timestamp)
    return jsonify({"message": "Version restored", "active": timestamp}), 200


@v1_bp.route("/settings/<instance>/versions/<int:timestamp>", methods=["DELETE"])
@jwt_required()
@roles_required("admin")
def delete_settings_version(instance, timestamp):
    page = _page(instance)
    delete_version(instance=page.instance, timestamp=timestamp)
    return jsonify({"message": "Version deleted", "timestamp": timestamp}), 200


@v1_bp.route("/settings/<instance>/versions/prune", methods=["POST"])
@jwt_required()
@roles_required("admin")
def prune_settings_versions(instance):
    page = _page(instance)
    removed = prune_versions(instance=page.instance)
    return jsonify({"message": "Version history cleared", "removed": removed}), 200


@v1_bp.route("/settings/<instance>/options/<key>", methods=["GET"])
@jwt_required()
def get_settings_option(instance, key):
    """Single value for theme code; ``version`` reads a past snapshot."""
    version = request.args.get("version", type=int)
    store = _store(instance)

    value = store.get_option(key, None, version)
    if value is None:
        field = _page(instance).field(key)
        if field is not None and version is None:
            value = field.initial_value()

    return jsonify({"key": key, "value": value, "version": version or store.active_timestamp()}), 200
