"""Endorsement ledger: one endorsement per identity per proposal."""

from __future__ import annotations

from datetime import datetime

from proposal_box.schemas.identity import Identity
from proposal_box.schemas.proposal import Endorsement


def find_endorsement(endorsements: list[Endorsement], identity_id: str) -> int | None:
    """Return the index of ``identity_id``'s endorsement, if any."""

    for index, endorsement in enumerate(endorsements):
        if endorsement.identity_id == identity_id:
            return index
    return None


def has_endorsed(endorsements: list[Endorsement], identity: Identity | None) -> bool:
    """Whether ``identity`` currently endorses the proposal."""

    if identity is None:
        return False
    return find_endorsement(endorsements, identity.id) is not None


def toggle_endorsement(
    endorsements: list[Endorsement],
    identity: Identity,
    *,
    now: datetime,
) -> tuple[list[Endorsement], bool]:
    """Sign or unsign for ``identity``.

    Returns a new endorsement list and whether the identity endorses afterwards.
    The input list is left untouched.
    """

    existing_index = find_endorsement(endorsements, identity.id)
    if existing_index is not None:
        return endorsements[:existing_index] + endorsements[existing_index + 1 :], False
    signed = Endorsement(identity_id=identity.id, display_name=identity.display_name, timestamp=now)
    return [*endorsements, signed], True
