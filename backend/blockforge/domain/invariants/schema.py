from numbers import Number

from blockforge.domain.exceptions import InvariantViolation
from blockforge.schema.field import (
    ALLOWED_WIDTHS,
    BOOLEAN_TYPES,
    NUMERIC_TYPES,
    FieldType,
)


def assert_unique_ids(fields, scope="top-level"):
    seen = set()
    for field in fields:
        if not field.id:
            raise InvariantViolation(f"Field without id in {scope} fields.")
        if field.id in seen:
            raise InvariantViolation(
                f"Duplicate field id '{field.id}' in {scope} fields."
            )
        seen.add(field.id)


def assert_default_shape(field):
    if not field.has_default:
        return

    default = field.default

    if field.type == FieldType.REPEATER.value:
        if not isinstance(default, (list, dict)) or (
            isinstance(default, dict) and default
        ):
            raise InvariantViolation(
                f"Repeater '{field.id}' default must be a list of rows."
            )
        if isinstance(default, list) and not all(isinstance(r, dict) for r in default):
            raise InvariantViolation(
                f"Repeater '{field.id}' default rows must be maps."
            )
    elif field.type == FieldType.GALLERY.value or field.is_multiple:
        if not isinstance(default, list):
            raise InvariantViolation(
                f"Field '{field.id}' default must be a list."
            )
    elif field.type in BOOLEAN_TYPES:
        if not isinstance(default, bool):
            raise InvariantViolation(
                f"Field '{field.id}' default must be a boolean."
            )
    elif field.type in NUMERIC_TYPES:
        if isinstance(default, bool) or not isinstance(default, (Number, str)):
            raise InvariantViolation(
                f"Field '{field.id}' default must be numeric."
            )


def assert_width(field):
    if field.width not in ALLOWED_WIDTHS:
        raise InvariantViolation(
            f"Field '{field.id}' width {field.width} is not one of {ALLOWED_WIDTHS}."
        )


def assert_fields(fields, scope="top-level"):
    assert_unique_ids(fields, scope)

    for field in fields:
        assert_width(field)
        assert_default_shape(field)

        if field.type == FieldType.REPEATER.value:
            assert_fields(field.fields, scope=f"repeater '{field.id}'")
        elif field.fields:
            raise InvariantViolation(
                f"Only repeaters may declare sub-fields ('{field.id}')."
            )
