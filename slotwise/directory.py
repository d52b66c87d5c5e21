"""Party directory boundary.

The engine never owns party data; it only asks a directory whether an id
resolves. AppointmentDB satisfies this protocol through its parties
table, and InMemoryPartyDirectory serves embedding and tests.
"""

from typing import Protocol

from slotwise.constants import PartyRole
from slotwise.models import Party


class PartyDirectory(Protocol):
    """Lookup collaborator for requester/provider records."""

    def resolve_party(self, party_id: str) -> Party | None: ...


class InMemoryPartyDirectory:
    """Dict-backed directory."""

    def __init__(self, parties: list[Party] | None = None):
        self._parties: dict[str, Party] = {p.id: p for p in parties or []}

    def add(self, party_id: str, name: str, role: PartyRole | str, email: str | None = None) -> Party:
        party = Party(id=party_id, name=name, role=PartyRole(role), email=email)
        self._parties[party.id] = party
        return party

    def remove(self, party_id: str) -> None:
        self._parties.pop(party_id, None)

    def resolve_party(self, party_id: str) -> Party | None:
        return self._parties.get(party_id)
