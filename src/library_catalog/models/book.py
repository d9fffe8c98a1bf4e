"""
Book model for the Library Catalog.

A book is identified by a surrogate ``id`` and, among active books, by its
natural key (title, author, publisher, edition_year). The linked record is
held only as a loaded-on-demand view: the record owns the link through its
``book_id``, and the book store fills ``record`` in while listing.
"""

from pydantic import BaseModel, ConfigDict, Field

from .record import Record


class Book(BaseModel):
    """Represents a book in the catalog."""

    model_config = ConfigDict(from_attributes=True)

    id: int | None = Field(
        None,
        description="Surrogate identifier assigned by the store on creation",
    )

    title: str = Field(
        ...,
        description="The title of the book",
        examples=["Rayuela", "El nombre de la rosa"],
    )

    author: str = Field(
        ...,
        description="The author of the book",
        examples=["Julio Cortázar", "Umberto Eco"],
    )

    publisher: str | None = Field(
        None,
        description="Publishing house",
        examples=["Sudamericana", "Lumen"],
    )

    edition_year: int | None = Field(
        None,
        description="Year of the edition",
        examples=[1963, 1980],
    )

    deleted: bool = Field(
        default=False,
        description="Soft-delete flag",
    )

    record: Record | None = Field(
        None,
        description="Linked record, loaded by list operations and never cached",
    )

    @property
    def natural_key(self) -> tuple[str, str, str | None, int | None]:
        """The attribute combination used to detect duplicate books."""
        return (self.title, self.author, self.publisher, self.edition_year)

    @property
    def is_active(self) -> bool:
        return not self.deleted
