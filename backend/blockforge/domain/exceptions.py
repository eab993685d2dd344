class BlockforgeError(Exception):
    """Base class for every domain error raised by blockforge."""


class InvariantViolation(BlockforgeError):
    """A field schema or block definition breaks an authoring rule."""


class SchemaUnavailable(BlockforgeError):
    NOT_FOUND = "not_found"
    REGISTRY_UNAVAILABLE = "registry_unavailable"

    def __init__(self, message, reason=NOT_FOUND):
        super().__init__(message)
        self.reason = reason


class UnsupportedFieldType(BlockforgeError):
    def __init__(self, field_type):
        super().__init__(f"Unsupported field type: {field_type}")
        self.field_type = field_type


class AssetUnresolved(BlockforgeError):
    def __init__(self, asset_id, kind="media"):
        super().__init__(f"{kind} {asset_id} could not be resolved")
        self.asset_id = asset_id
        self.kind = kind


class RepeaterBoundsViolation(BlockforgeError):
    """Raised internally when a row operation would leave [min, max]."""


class MalformedPersistedValue(BlockforgeError):
    def __init__(self, raw, message="Stored value map is not valid JSON"):
        super().__init__(message)
        self.raw = raw


class VersionNotFound(BlockforgeError):
    def __init__(self, timestamp):
        super().__init__(f"Version {timestamp} does not exist")
        self.timestamp = timestamp


class VersionInvalidOperation(BlockforgeError):
    ACTIVE = "active_version"
    SOLE = "sole_snapshot"
    DUPLICATE = "duplicate_timestamp"

    def __init__(self, message, reason):
        super().__init__(message)
        self.reason = reason


class ValidationFailed(BlockforgeError):
    """A settings submission contains values its schema rejects."""

    def __init__(self, errors):
        super().__init__("Submitted options failed validation")
        self.errors = errors
