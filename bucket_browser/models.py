from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class EntryKind(str, Enum):
    FILE = "file"
    FOLDER = "folder"


class Entry(BaseModel):
    """One listing item. Serialized with `type` for kind and `path` for full_path."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    kind: EntryKind = Field(serialization_alias="type")
    size: Optional[int] = Field(default=None, ge=0)
    last_modified: Optional[datetime] = Field(default=None, serialization_alias="lastModified")
    full_path: str = Field(serialization_alias="path")

    @property
    def is_folder(self) -> bool:
        return self.kind is EntryKind.FOLDER

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class BreadcrumbItem(BaseModel):
    title: str
    path: str


class ObjectInfo(BaseModel):
    key: str
    size: int
    last_modified: Optional[datetime] = None
    content_type: str = "application/octet-stream"


class ListedObject(BaseModel):
    """Raw directory-style listing record: a common prefix or an object."""

    prefix: Optional[str] = None
    key: Optional[str] = None
    size: int = 0
    last_modified: Optional[datetime] = None

    @property
    def is_prefix(self) -> bool:
        return self.prefix is not None


class CreateFolderReq(BaseModel):
    folderName: Optional[str] = None
    prefix: Optional[str] = ""
