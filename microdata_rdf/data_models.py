"""
Data models for the Microdata extractor.

Defines the registry source format and the reader options.
"""

from typing import Any, Dict, List
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import config


class PropertyMetadata(BaseModel):
    """Alias declarations for a single vocabulary property token."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    sub_property_of: List[str] = Field(default_factory=list, alias="subPropertyOf")
    equivalent_property: List[str] = Field(default_factory=list, alias="equivalentProperty")

    @field_validator("sub_property_of", "equivalent_property", mode="before")
    @classmethod
    def _as_list(cls, value: Any) -> Any:
        # The registry format allows a single URI string or a list of them
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value


class RegistrySource(BaseModel):
    """One vocabulary entry of a registry description."""
    model_config = ConfigDict(extra="ignore")

    properties: Dict[str, PropertyMetadata] = Field(default_factory=dict)


class ReaderOptions(BaseModel):
    """Options controlling a single document extraction."""
    base_uri: str = Field(default_factory=lambda: config.BASE_URI)
    strict: bool = Field(default_factory=lambda: config.STRICT)
    canonicalize: bool = Field(default_factory=lambda: config.CANONICALIZE)
    intern: bool = Field(default_factory=lambda: config.INTERN)
    vocab_expansion: bool = Field(default_factory=lambda: config.VOCAB_EXPANSION)
    parser: str = Field(default_factory=lambda: config.PARSER)
