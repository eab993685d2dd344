# blockforge/normalizers/versioning.py
from typing import Any, Dict, Optional, Sequence

from blockforge.versioning.store import VersionMeta


def normalize_versions(instance: str, versions: Sequence[VersionMeta]) -> Dict[str, Any]:
    active: Optional[int] = next((meta.timestamp for meta in versions if meta.active), None)
    return {
        "instance": instance,
        "active": active,
        "versions": [meta.to_dict() for meta in versions],
    }
