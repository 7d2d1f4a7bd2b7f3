"""Hypermedia identifier data structures produced by the codec."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class EntityType(str, Enum):
    """Addressable entity kinds, keyed by their one-letter scheme tag."""

    ACCOUNT = "a"
    DOCUMENT = "d"
    GROUP = "g"
    COMMENT = "c"

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> Optional["EntityType"]:
        """Return the member for a scheme tag, or None for anything else."""
        for member in cls:
            if member.value == tag:
                return member
        return None


class CollapsedBlockRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["collapsed"] = "collapsed"
    start: int = Field(ge=0)
    end: int = Field(ge=0)


class ExpandedBlockRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["expanded"] = "expanded"
    expanded: Literal[True] = True


BlockRange = Annotated[
    Union[CollapsedBlockRange, ExpandedBlockRange], Field(discriminator="kind")
]


class ParsedFragment(BaseModel):
    model_config = ConfigDict(frozen=True)

    block_id: str
    block_range: Optional[BlockRange] = None


class AuthorVariant(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: Literal["author"] = "author"
    author: str


class GroupVariant(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: Literal["group"] = "group"
    group_id: str  # full hm://g/... id
    path_name: Optional[str] = None


PublicationVariant = Annotated[
    Union[GroupVariant, AuthorVariant], Field(discriminator="key")
]


class UnpackedHypermediaId(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    type: EntityType
    eid: str
    qid: str  # hm://<type>/<eid>, no version, variants or fragment
    group_path_name: Optional[str] = None
    version: Optional[str] = None
    block_ref: Optional[str] = None
    block_range: Optional[BlockRange] = None
    hostname: Optional[str] = None
    scheme: Optional[str] = None
    variants: Optional[list[PublicationVariant]] = None
    latest: Optional[bool] = None


class UnpackedDocId(UnpackedHypermediaId):
    doc_id: str
