"""Proposal review workflow statuses."""

from __future__ import annotations

from enum import Enum


class ProposalStatus(str, Enum):
    """Review statuses, declared in workflow order."""

    RECEIVED = "RECEIVED"
    UNDER_REVIEW = "UNDER_REVIEW"
    COORDINATING = "COORDINATING"
    RESOLVED = "RESOLVED"


STATUS_STEPS: tuple[ProposalStatus, ...] = tuple(ProposalStatus)

STATUS_LABELS: dict[ProposalStatus, str] = {
    ProposalStatus.RECEIVED: "受付中",
    ProposalStatus.UNDER_REVIEW: "検討中",
    ProposalStatus.COORDINATING: "先生と調整中",
    ProposalStatus.RESOLVED: "対応済",
}


def status_progress(status: ProposalStatus) -> int:
    """Return the zero-based workflow step of ``status``."""

    return STATUS_STEPS.index(ProposalStatus(status))
