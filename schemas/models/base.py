"""
Shared base for the MongoDB document models.

Two id styles are in use: verification tokens and answers let MongoDB mint
an ObjectId, while the security question catalog keys rows by string ids
("1".."5" for the seeded questions). PyObjectId lets pydantic accept either
an ObjectId or its hex string for the former.
"""

from __future__ import annotations

from typing import Any, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, GetCoreSchemaHandler
from pydantic_core import core_schema


class PyObjectId(ObjectId):
    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda value, info: str(value) if info.mode == "json" else value,
                info_arg=True,
            ),
        )

    @classmethod
    def _validate(cls, value: Any) -> ObjectId:
        if isinstance(value, ObjectId):
            return value
        if isinstance(value, str) and ObjectId.is_valid(value):
            return ObjectId(value)
        raise ValueError(f"Invalid ObjectId: {value!r}")


class MongoBaseModel(BaseModel):
    """Document model whose ``id`` maps to the collection's ``_id``."""

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    id: Optional[PyObjectId] = Field(default=None, alias="_id")

    def to_mongo(self) -> dict:
        """Dump for insert/update; an unset id is left for MongoDB to assign."""
        exclude = {"id"} if self.id is None else None
        return self.model_dump(by_alias=True, exclude=exclude)

    @classmethod
    def from_mongo(cls, raw: Optional[dict]):
        """Validate a raw driver document, passing ``None`` (no match) through."""
        return None if raw is None else cls.model_validate(raw)
