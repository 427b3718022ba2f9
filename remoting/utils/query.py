"""
Expansion of bracketed query-string keys into nested values.

Starlette hands us query strings and urlencoded forms as flat (key, value)
pairs. Clients encode structured arguments with bracketed keys, so this
module rebuilds the nesting before the values reach the converters:

    arg[lat]=2.5&arg[lng]=3    -> {"arg": {"lat": "2.5", "lng": "3"}}
    tags[]=a&tags[]=b          -> {"tags": ["a", "b"]}
    ids=1&ids=2                -> {"ids": ["1", "2"]}
    items[0]=a&items[1]=b      -> {"items": {"0": "a", "1": "b"}}

Values are kept as strings; converting them is the coercion layer's job.
"""

import re
from typing import Any, Dict, Iterable, List, Tuple

_KEY_PATTERN = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])+)$")
_SEGMENT_PATTERN = re.compile(r"\[([^\[\]]*)\]")


def split_key(key: str) -> List[str]:
    """
    Split `a[b][c]` into `["a", "b", "c"]`.

    Keys without brackets (or with malformed brackets) are returned whole.
    An empty segment (`a[]`) means "append to a list".
    """
    match = _KEY_PATTERN.match(key)
    if not match:
        return [key]
    return [match.group(1)] + _SEGMENT_PATTERN.findall(match.group(2))


def _assign(container: Dict[str, Any], path: List[str], value: Any) -> None:
    head = path[0]

    if len(path) == 1:
        if head in container:
            existing = container[head]
            if isinstance(existing, list):
                existing.append(value)
            else:
                container[head] = [existing, value]
        else:
            container[head] = value
        return

    if path[1] == "":
        # a[]=x appends to a list; any deeper segments are ignored
        existing = container.get(head)
        if isinstance(existing, list):
            existing.append(value)
        elif existing is None:
            container[head] = [value]
        else:
            container[head] = [existing, value]
        return

    child = container.get(head)
    if not isinstance(child, dict):
        child = {}
        container[head] = child
    _assign(child, path[1:], value)


def parse_nested_query(items: Iterable[Tuple[str, Any]]) -> Dict[str, Any]:
    """
    Build a nested mapping from flat query-string or form pairs.

    Args:
        items: (key, value) pairs, e.g. `request.query_params.multi_items()`

    Returns:
        Dict of top-level argument names to strings, lists or nested dicts
    """
    result: Dict[str, Any] = {}
    for key, value in items:
        if not key:
            continue
        _assign(result, split_key(key), value)
    return result
