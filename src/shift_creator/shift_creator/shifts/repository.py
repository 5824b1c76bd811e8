from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Shift


class ShiftRepository(Protocol):
    def find_started_on(self, employee_code: str, work_date: date) -> Optional[Shift]:
        """Persisted shift of the employee whose start falls on `work_date`.

        Raises DataIntegrityError when more than one matches.
        """

        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[Shift]:
        raise NotImplementedError
