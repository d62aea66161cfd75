"""Tentative (optimistic) state changes with rollback."""

from collections.abc import Callable
from typing import Generic, TypeVar

from board.models import PastSong

T = TypeVar("T")


class TentativeMutation(Generic[T]):
    """A projected state change that can be replayed back to its snapshot.

    The caller publishes ``projected`` before issuing the request that makes
    the change real. If the request fails, ``rollback()`` returns the state as
    it was when the mutation was created.
    """

    def __init__(self, current: T, project: Callable[[T], T]):
        self.snapshot = current
        self.projected = project(current)

    def rollback(self) -> T:
        return self.snapshot

    def resolve(self, succeeded: bool) -> T:
        """Return the state to publish once the request has settled."""
        return self.projected if succeeded else self.snapshot


def remove_song(song_id: int | str) -> Callable[[list[PastSong]], list[PastSong]]:
    """Projection that drops the song with the given id from a list."""

    def project(songs: list[PastSong]) -> list[PastSong]:
        return [song for song in songs if not same_id(song.id, song_id)]

    return project


def same_id(a: int | str | None, b: int | str | None) -> bool:
    """Compare opaque ids that may arrive as int from rows and str from paths."""
    if a is None or b is None:
        return False
    return str(a) == str(b)
