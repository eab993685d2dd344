# blockforge/normalizers/assets.py
from typing import Any, Dict, Sequence

from blockforge.rendering.assets import AssetMetadata


def normalize_asset(metadata: AssetMetadata) -> Dict[str, Any]:
    return metadata.to_dict()


def normalize_autocomplete(results: Sequence[AssetMetadata]) -> Dict[str, Any]:
    """Shape of the post autocomplete response: ``{"results": [{id, text, ...}]}``."""
    return {
        "results": [
            {"id": item.id, "text": item.title, "post_type": item.post_type, "edit_link": item.edit_link}
            for item in results
        ]
    }
