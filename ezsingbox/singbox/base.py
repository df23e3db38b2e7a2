"""Common base for sing-box schema models"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class SingBoxModel(BaseModel):
    """Immutable schema object that serializes to sing-box JSON naming"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict, unset (None) fields omitted"""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
