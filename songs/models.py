"""Models for rows of the song request table."""

from datetime import datetime

from pydantic import BaseModel


class SongRequest(BaseModel):
    """A submitted song request as stored in the hosted table.

    Rows are created by an external submission path; this service only
    reads and deletes them.
    """

    id: int | str
    name: str | None = None
    url: str | None = None
    date: datetime | None = None
