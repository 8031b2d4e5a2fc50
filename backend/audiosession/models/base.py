"""
Base models - camelCase JSON documents with snake_case attributes.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DocumentModel(BaseModel):
    """
    A stored JSON document (or a group inside one).

    Unknown keys are kept so that fields written by other pipelines or by
    the legacy layout survive a merge-and-rewrite.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='allow')

    def to_document(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode='json', by_alias=True)


class UpdateModel(BaseModel):
    """A partial update; only the fields a caller sets take part in a merge."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')
