from typing import Optional

from fastapi import Query

from taskdesk.core.exceptions import conflict, not_found, service_unavailable
from taskdesk.services.outcome import MutationOutcome


def actor_id_param(
    actor_id: Optional[int] = Query(None, description="ID of the user performing the change")
) -> Optional[int]:
    """Acting user, passed explicitly with each mutating request."""
    return actor_id


def raise_for_outcome(outcome: MutationOutcome, resource: str) -> None:
    """Translate a failed mutation into the matching HTTP error."""
    if outcome is MutationOutcome.SUCCESS:
        return
    if outcome is MutationOutcome.NOT_FOUND:
        raise not_found(f"{resource} not found")
    if outcome is MutationOutcome.CONFLICT:
        raise conflict(f"{resource} could not be changed because of conflicting data")
    raise service_unavailable(f"{resource} could not be changed, try again later")


def get_or_404(obj, resource: str):
    if obj is None:
        raise not_found(f"{resource} not found")
    return obj
