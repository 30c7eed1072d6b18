from __future__ import annotations

from typing import Protocol, Sequence

from .model import Student


class RosterProvider(Protocol):
    def fetch_roster(self, club_id: str) -> Sequence[Student]:
        """Students currently enrolled in the club.

        Raises NotFoundError when the club is unknown.
        """

        raise NotImplementedError
