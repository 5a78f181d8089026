"""
Blog post Pydantic models
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


def format_author_name(first_name: Optional[str], last_name: Optional[str]) -> str:
    """Display form of an author: "firstName lastName" with surrounding blanks trimmed"""
    return f"{first_name or ''} {last_name or ''}".strip()


class AuthorName(BaseModel):
    firstName: str = ""
    lastName: str = ""


class PostData(BaseModel):
    """Stored representation of a blog post"""
    id: str
    author: AuthorName
    title: str
    content: str
    created: datetime

    def serialize(self) -> "PostResponse":
        return PostResponse(
            id=self.id,
            author=format_author_name(self.author.firstName, self.author.lastName),
            title=self.title,
            content=self.content,
            created=self.created
        )


class PostCreateRequest(BaseModel):
    author: AuthorName = Field(default_factory=AuthorName)
    title: str = Field(..., min_length=1, description="Post title, required")
    content: str = Field(..., min_length=1, description="Post body, required")
    # ISO 8601 string or Unix epoch (seconds or milliseconds); defaults to now
    created: Optional[datetime] = None


class PostUpdateRequest(BaseModel):
    id: Optional[str] = Field(None, description="Must match the id in the URL when present")
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)

    def updatable_fields(self) -> dict:
        """Fields explicitly set in the request that may be written to the stored post"""
        update_data = {}
        if self.title is not None:
            update_data["title"] = self.title
        if self.content is not None:
            update_data["content"] = self.content
        return update_data


class PostResponse(BaseModel):
    id: str
    author: str
    title: str
    content: str
    created: datetime
