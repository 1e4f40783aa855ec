"""Keeps an employee's ``ongoing`` flag and ``finish_date`` consistent.

An ongoing employee has no finish date. An employee who is not ongoing has a
finish date on or after their start date. Every create and every partial
update passes through :func:`enforce_employment_status` once, after the
supplied fields have been copied onto the candidate record.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from roster.core.exceptions import ValidationFailedError
from roster.models.employee import EmployeeRecord

logger = logging.getLogger(__name__)

RULE_FINISH_DATE_REQUIRED = "finish_date_required"
RULE_FINISH_BEFORE_START = "finish_date_before_start_date"


def resolve_ongoing(record: EmployeeRecord, changes: Mapping[str, Any]) -> bool:
    if "ongoing" in changes and changes["ongoing"] is not None:
        return bool(changes["ongoing"])
    if "finish_date" in changes:
        # Setting a finish date ends the employment; clearing it reopens it.
        return changes["finish_date"] is None
    return record.ongoing


def enforce_employment_status(
    record: EmployeeRecord,
    changes: Mapping[str, Any],
) -> EmployeeRecord:
    """Return ``record`` corrected so that ongoing and finish date agree.

    ``changes`` holds the fields supplied by this write; on create that is
    every field. Raises :class:`ValidationFailedError` when the write cannot
    be repaired.
    """
    ongoing = resolve_ongoing(record, changes)

    if ongoing:
        if record.finish_date is not None:
            logger.debug("Clearing finish date of ongoing employee %s", record.id)
        return record.model_copy(update={"ongoing": True, "finish_date": None})

    finish_date = record.finish_date
    if finish_date is None:
        raise ValidationFailedError(
            RULE_FINISH_DATE_REQUIRED,
            "A finish date is required when the employee is not ongoing",
        )
    if finish_date < record.start_date:
        raise ValidationFailedError(
            RULE_FINISH_BEFORE_START,
            f"Finish date {finish_date.isoformat()} is before start date {record.start_date.isoformat()}",
        )

    return record.model_copy(update={"ongoing": False})
