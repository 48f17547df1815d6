import copy
from typing import Any, Dict


def deep_merge(base: Dict[str, Any], changes: Dict[str, Any]) -> Dict[str, Any]:
    """Return `base` with `changes` applied, nested dicts merged key by key.

    Used for notification flags, where an update names only the flags it
    flips. Neither argument is modified. JSON columns are only written back
    when reassigned, so store the result rather than editing in place.
    """
    merged = copy.deepcopy(base)
    for key, value in changes.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged
