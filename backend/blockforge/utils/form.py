# blockforge/utils/form.py
from __future__ import annotations

import re
from typing import Any, Dict, Iterable, Tuple

KEY_RE = re.compile(r"\[([^\]]*)\]")


def split_key(name: str) -> Tuple[str, list]:
    """
    Split a bracketed form name into its root and path segments.

    ``webtero_options[custom_colors][0][name]`` ->
    ``("webtero_options", ["custom_colors", "0", "name"])``
    """
    head, _, _ = name.partition("[")
    return head, KEY_RE.findall(name[len(head):])


def parse_nested_form(items: Iterable[Tuple[str, Any]], root: str) -> Dict[str, Any]:
    """
    Rebuild the nested value map a classic form posts under ``root``.

    Notes:
    - later values for the same key win (hidden "0" before a checked box)
    - an empty segment (``name[]``) appends to a list
    - numeric segments build dicts keyed by index; callers order them
    """
    data: Dict[str, Any] = {}

    for name, value in items:
        head, path = split_key(name)
        if head != root or not path:
            continue

        node = data
        for position, segment in enumerate(path):
            last = position == len(path) - 1
            if segment == "":
                # name[] only makes sense as the last segment
                if not last:
                    break
                continue

            appending = not last and path[position + 1] == "" and position + 1 == len(path) - 1
            if last:
                node[segment] = value
            elif appending:
                existing = node.get(segment)
                if not isinstance(existing, list):
                    existing = []
                    node[segment] = existing
                existing.append(value)
                break
            else:
                child = node.get(segment)
                if not isinstance(child, dict):
                    child = {}
                    node[segment] = child
                node = child

    return data
