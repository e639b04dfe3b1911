"""Utilities."""

from typing import Any

__all__ = ["merge"]


def merge(merged: dict[str, Any], obj2: dict[str, Any], replace: bool = False) -> dict[str, Any]:
    """Merge the content of obj2 into merged.

    Args:
        merged (dict): Dictionary to merge into
        obj2 (dict): Dictionary to merge from
        replace (bool): Replace lists instead of concatenating them

    Returns:
        `merged` dictionary with the merged content

    Eg:
        merge({"a": {"b": 1}}, {"a": {"c": 2}}) == {"a": {"b": 1, "c": 2}}

    """
    for key, value in obj2.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            # If both values are dictionaries, recursively merge them
            merge(merged[key], value, replace)
        elif not replace and key in merged and isinstance(merged[key], list) and isinstance(value, list):
            # If both values are lists, concatenate them
            merged[key] = merged[key] + value
        else:
            # Otherwise, update the value or add the key-value pair
            merged[key] = value
    return merged
