"""
Field-level merge of partial updates into stored documents.

A field takes the new value only if the update sets it to something
non-empty; None, "", [] and {} keep the old value. 0 and False are values.
Groups (nested models) are merged field by field, one level deep.
"""

from typing import Any, TypeVar

from pydantic import BaseModel

M = TypeVar('M', bound=BaseModel)


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    return False


def merge_model(current: M, updates: BaseModel) -> M:
    """Return a copy of current with the set, non-empty fields of updates applied."""
    changes = {}
    for name in updates.model_fields_set:
        value = getattr(updates, name)
        if isinstance(value, BaseModel):
            changes[name] = merge_model(getattr(current, name), value)
        elif not is_empty(value):
            changes[name] = value
    return current.model_copy(update=changes)
