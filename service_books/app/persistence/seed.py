"""
Sample catalog loaded into an empty store on startup.
"""

from typing import List

from shared.logging import get_logger
from ..books.models import Book

logger = get_logger("books.persistence.seed")


def sample_books() -> List[Book]:
    """The starter catalog, in insertion order."""
    return [
        Book(title="The Great Gatsby", author="F. Scott Fitzgerald", publication_year=1925),
        Book(title="To Kill a Mockingbird", author="Harper Lee", publication_year=1960),
        Book(title="1984", author="George Orwell", publication_year=1949),
        Book(title="Pride and Prejudice", author="Jane Austen", publication_year=1813),
        Book(title="The Catcher in the Rye", author="J.D. Salinger", publication_year=1951),
        Book(title="Lord of the Flies", author="William Golding", publication_year=1954),
        Book(title="The Hobbit", author="J.R.R. Tolkien", publication_year=1937),
        Book(title="Fahrenheit 451", author="Ray Bradbury", publication_year=1953),
        Book(title="Jane Eyre", author="Charlotte Brontë", publication_year=1847),
        Book(title="The Lord of the Rings", author="J.R.R. Tolkien", publication_year=1954),
    ]


async def seed_if_empty(store) -> int:
    """Insert the sample catalog when the store holds no books.

    Returns the number of books inserted. Callers that front the store
    with a cache must invalidate the id list afterwards.
    """
    if await store.count() > 0:
        logger.info("Database already contains book data")
        return 0

    books = sample_books()
    logger.info("Seeding database with sample books", count=len(books))
    await store.add_many(books)
    logger.info("Database seeding completed")
    return len(books)
