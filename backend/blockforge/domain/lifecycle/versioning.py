from typing import Collection, Optional

from blockforge.domain.exceptions import VersionInvalidOperation, VersionNotFound


def assert_version_exists(*, timestamp: int, timestamps: Collection[int]) -> None:
    if timestamp not in timestamps:
        raise VersionNotFound(timestamp)


def assert_version_deletable(
    *,
    timestamp: int,
    active: Optional[int],
    timestamps: Collection[int],
) -> None:
    """
    Guards snapshot deletion.
    The sole snapshot and the active snapshot are never deletable.
    """
    assert_version_exists(timestamp=timestamp, timestamps=timestamps)

    if len(timestamps) <= 1:
        raise VersionInvalidOperation(
            "Cannot delete the only saved version",
            VersionInvalidOperation.SOLE,
        )

    if timestamp == active:
        raise VersionInvalidOperation(
            "Cannot delete the active version",
            VersionInvalidOperation.ACTIVE,
        )


def assert_version_new(*, timestamp: int, timestamps: Collection[int]) -> None:
    if timestamp in timestamps:
        raise VersionInvalidOperation(
            f"A version with timestamp {timestamp} already exists",
            VersionInvalidOperation.DUPLICATE,
        )
