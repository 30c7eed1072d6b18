from __future__ import annotations

from typing import Sequence

from ..api.client import ApiClient
from .model import Student
from .repository import RosterProvider


class HttpRosterRepository(RosterProvider):
    def __init__(self, client: ApiClient):
        self._client = client

    def fetch_roster(self, club_id: str) -> Sequence[Student]:
        rows = self._client.get(f"/clubs/{club_id}/students") or []
        return [Student.from_payload(r) for r in rows]
