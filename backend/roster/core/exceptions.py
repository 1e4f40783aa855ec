"""Error taxonomy shared by the roster services and the HTTP layer."""

from __future__ import annotations


class RosterError(Exception):
    pass


class NotFoundError(RosterError):
    def __init__(self, employee_id: str) -> None:
        super().__init__(f"Employee with id '{employee_id}' not found")
        self.employee_id = employee_id


class ValidationFailedError(RosterError):
    """A write would leave the employment status contradictory."""

    def __init__(self, rule: str, message: str) -> None:
        super().__init__(message)
        self.rule = rule
        self.message = message


class ConflictError(RosterError):
    pass
