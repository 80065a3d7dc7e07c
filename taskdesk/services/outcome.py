"""Result of a transactional mutation."""

import enum
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError


class MutationOutcome(str, enum.Enum):
    """Tagged result of a cascading mutation.

    Only SUCCESS is truthy, so ``if service.delete_project(pid):`` keeps
    reading as "the row was removed".
    """
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    TRANSIENT_FAILURE = "transient_failure"

    def __bool__(self) -> bool:
        return self is MutationOutcome.SUCCESS


def outcome_for_error(exc: SQLAlchemyError) -> MutationOutcome:
    if isinstance(exc, IntegrityError):
        return MutationOutcome.CONFLICT
    return MutationOutcome.TRANSIENT_FAILURE


def report_failure(logger: logging.Logger, operation: str, exc: SQLAlchemyError) -> MutationOutcome:
    """Log a rolled-back mutation and map the error to an outcome."""
    outcome = outcome_for_error(exc)
    logger.exception("%s rolled back (%s)", operation, outcome.value)
    return outcome
