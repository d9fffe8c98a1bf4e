"""
Record model for the Library Catalog.

A record is the bibliographic card of a book: its ISBN, Dewey class, shelf
location and language. The record carries the authoritative link to its
book through ``book_id``.

Field lengths are not enforced here; ``RecordService`` validates them so the
rule violations surface as catalog ``ValidationError``s with readable
messages.
"""

from pydantic import BaseModel, ConfigDict, Field


class Record(BaseModel):
    """Represents a bibliographic record."""

    model_config = ConfigDict(from_attributes=True)

    id: int | None = Field(
        None,
        description="Surrogate identifier assigned by the store on creation",
    )

    isbn: str = Field(
        ...,
        description="ISBN, unique among active records",
        examples=["978-84-376-0493-0"],
    )

    dewey_class: str | None = Field(
        None,
        description="Dewey Decimal classification",
        examples=["863.64"],
    )

    shelf: str | None = Field(
        None,
        description="Shelf where the book is stored",
        examples=["A3"],
    )

    language: str | None = Field(
        None,
        description="Language of the edition",
        examples=["Spanish"],
    )

    book_id: int | None = Field(
        None,
        description="Identifier of the book this record describes",
    )

    deleted: bool = Field(
        default=False,
        description="Soft-delete flag",
    )

    @property
    def is_active(self) -> bool:
        return not self.deleted
