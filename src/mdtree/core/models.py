"""Data models: content tree nodes, index envelope, and blog read models"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Serializes snake_case fields as camelCase JSON keys; accepts either on input."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DocMeta(BaseModel):
    """Normalized front matter. Absent values are None, never empty strings."""
    title:       Optional[str] = None
    date:        Optional[str] = None      # ISO-8601
    description: Optional[str] = None
    tags:        Optional[list[str]] = None
    cover:       Optional[str] = None


class DirNode(_CamelModel):
    type: Literal["dir"] = "dir"
    name: str
    path: str
    children: list["ContentTreeNode"] = Field(default_factory=list)


class MarkdownNode(_CamelModel):
    type: Literal["md"] = "md"
    name: str
    path: str
    source_path: str
    output_path: str
    url_path: str
    meta: DocMeta = Field(default_factory=DocMeta)


class FileNode(_CamelModel):
    type: Literal["file"] = "file"
    name: str
    path: str
    source_path: str
    output_path: str
    url_path: str


ContentTreeNode = Annotated[Union[DirNode, MarkdownNode, FileNode], Field(discriminator="type")]
DirNode.model_rebuild()


class IndexEnvelope(_CamelModel):
    """Top-level object persisted as `_{prefix}_tree.json`."""
    prefix:        str
    route_base:    str
    source_dir:    str
    output_dir:    str
    generated_at:  str
    tree_url_path: str
    tree:          DirNode


class DocArtifact(DocMeta):
    """Per-document JSON written next to the mirrored tree: metadata plus body."""
    content: str


class BlogPostSummary(BaseModel):
    slug:        str
    title:       str = ""
    date:        str = ""
    description: str = ""
    tags:        list[str] = Field(default_factory=list)
    cover:       Optional[str] = None
    to:          str


class BlogPost(BaseModel):
    title:       Optional[str] = None
    date:        Optional[str] = None
    description: Optional[str] = None
    tags:        Optional[list[str]] = None
    cover:       Optional[str] = None
    content:     str


class BlogRouteInfo(_CamelModel):
    """Route discovered for static generation."""
    slug:      str
    json_path: str
    url_path:  str
    metadata:  DocMeta


class ValidationResult(BaseModel):
    errors:   list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def dump_json(model: BaseModel) -> str:
    """Pretty JSON with camelCase keys and None fields omitted."""
    return model.model_dump_json(indent=2, by_alias=True, exclude_none=True)
