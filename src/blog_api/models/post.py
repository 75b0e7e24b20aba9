"""
Blog post Pydantic models

Stored documents nest the author as ``{"firstName", "lastName"}``; the HTTP
view flattens it into a single display string.
"""

from typing import Any, Dict, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

# Fields a client may replace after creation
UPDATABLE_FIELDS = ("title", "content", "author")


class AuthorName(BaseModel):
    """Author sub-document; first and last name always travel together"""
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class BlogPostCreate(BaseModel):
    title: str
    content: str
    author: AuthorName


class BlogPostChanges(BaseModel):
    """Partial replacement of a stored post's mutable fields"""
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    content: Optional[str] = None
    author: Optional[AuthorName] = None

    def to_document(self) -> Dict[str, Any]:
        """Only the supplied fields, in stored (camelCase) shape"""
        return self.model_dump(by_alias=True, exclude_none=True)


class BlogPostUpdateRequest(BaseModel):
    """PUT body; ``id`` must echo the path id"""
    id: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None
    author: Optional[AuthorName] = None

    def changes(self) -> BlogPostChanges:
        return BlogPostChanges(title=self.title, content=self.content, author=self.author)


class BlogPostResponse(BaseModel):
    id: str
    title: str
    author: str
    content: str
    created: datetime


class BlogPost(BaseModel):
    """A blog post as held by the store"""
    id: str
    author: AuthorName
    title: str
    content: str
    created: datetime

    @property
    def author_name(self) -> str:
        return self.author.full_name

    def serialize(self) -> BlogPostResponse:
        return BlogPostResponse(
            id=self.id,
            title=self.title,
            author=self.author_name,
            content=self.content,
            created=self.created
        )
