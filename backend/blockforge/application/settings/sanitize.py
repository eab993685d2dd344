# blockforge/application/settings/sanitize.py
import logging
from typing import Any, Dict, Mapping, Sequence

from blockforge.domain.exceptions import ValidationFailed
from blockforge.rendering.widgets import UNSUPPORTED, widget_for
from blockforge.schema.field import FieldSchema, find_field
from blockforge.schema.settings import SettingsPage

logger = logging.getLogger(__name__)


def sanitize_values(fields: Sequence[FieldSchema], submitted: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Coerce submitted values to the stored value types.

    Responsibilities:
    - drop keys that no field declares
    - coerce each value with its field's widget
    - collect every rejected value before failing
    """
    clean: Dict[str, Any] = {}
    errors: Dict[str, str] = {}

    for field_id, raw in submitted.items():
        schema = find_field(fields, field_id)
        if schema is None:
            logger.debug("Dropping undeclared value %s", field_id)
            continue

        widget = widget_for(schema)
        if widget is UNSUPPORTED:
            # No widget to coerce with; keep plain text only
            clean[field_id] = "" if raw is None else str(raw)
            continue

        try:
            value = widget.coerce(schema, raw)
        except ValueError as exc:
            errors[field_id] = str(exc)
            continue

        error = widget.validate(schema, value)
        if error:
            errors[field_id] = error
            continue

        clean[field_id] = value

    if errors:
        raise ValidationFailed(errors)

    return clean


def sanitize_options(page: SettingsPage, submitted: Mapping[str, Any]) -> Dict[str, Any]:
    return sanitize_values(tuple(page.fields()), submitted)
