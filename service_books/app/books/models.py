"""
Book data models for the Books Service.
"""

import json
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass
class Book:
    """A catalog entry. ``id`` is assigned by the backing store."""
    title: Optional[str] = None
    author: Optional[str] = None
    publication_year: int = 0
    id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class BookCodec:
    """JSON codec used for per-book cache entries."""

    def identity(self, book: Book) -> Optional[int]:
        return book.id

    def dumps(self, book: Book) -> str:
        return json.dumps(book.to_dict(), sort_keys=True)

    def loads(self, value: str) -> Book:
        """Parse a cache entry; raises ``ValueError`` for anything that is not a book."""
        payload = BookResponse.model_validate_json(value)
        return Book(**payload.model_dump())


class BookCreateRequest(BaseModel):
    """Request model for adding a book."""
    title: Optional[str] = Field(None, description="Book title")
    author: Optional[str] = Field(None, description="Book author")
    publication_year: int = Field(0, description="Year of first publication")

    def to_book(self) -> Book:
        return Book(
            title=self.title,
            author=self.author,
            publication_year=self.publication_year,
        )


class BookUpdateRequest(BookCreateRequest):
    """Request model for replacing a book; the body id must match the path."""
    id: Optional[int] = Field(None, description="Book ID")

    def to_book(self) -> Book:
        book = super().to_book()
        book.id = self.id
        return book


class BookResponse(BaseModel):
    """Response model for a book."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: Optional[str] = None
    author: Optional[str] = None
    publication_year: int
