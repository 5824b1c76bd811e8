from __future__ import annotations

from typing import Optional, Protocol

from .model import Employee


class EmployeeRepository(Protocol):
    """Read access to employees for the worker.

    Note (DIP): services depend on this interface, never on a concrete database.
    """

    def get_by_code(self, code: str) -> Optional[Employee]:
        """Employee with employments, departments and locations loaded."""

        raise NotImplementedError
