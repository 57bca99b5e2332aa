"""
Synthetic user generation for the user search demo.

Draws identities from Faker and dates from three fixed windows: account
creation, last activity (strictly later) and birth. Age is derived from the
birth date with calendar-aware full-years arithmetic.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, Dict, List, Optional, Sequence

from faker import Faker

from usersearch.config import Settings
from usersearch.domain.models import DateWindow, UserRecord
from usersearch.utils.logging import get_logger

log = get_logger(__name__)

GENDERS: Sequence[str] = ("male", "female")


def age_on(birth_date: date, today: date) -> int:
    """
    Return the number of full years elapsed between ``birth_date`` and ``today``.

    The current year only counts once the birthday has been reached, so a
    birth date one day after today's month/day yields one year less than a
    birth date one day before it.
    """
    if birth_date > today:
        raise ValueError(f"birth date {birth_date} is after {today}")
    years = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        years -= 1
    return years


class UserFactory:
    """
    Produce a bounded list of synthetic users with sequential identifiers.
    """

    def __init__(
        self,
        created_window: DateWindow,
        last_online_window: DateWindow,
        birth_window: DateWindow,
        id_offset: int = 1000,
        genders: Sequence[str] = GENDERS,
        seed: Optional[int] = None,
    ) -> None:
        if not created_window.ends_before(last_online_window):
            raise ValueError("created window must end before the last-online window starts")
        if not genders:
            raise ValueError("at least one gender is required")
        self.created_window = created_window
        self.last_online_window = last_online_window
        self.birth_window = birth_window
        self.id_offset = id_offset
        self.genders = tuple(genders)
        self._faker = Faker()
        if seed is not None:
            self._faker.seed_instance(seed)

    @classmethod
    def from_settings(cls, settings: Settings, seed: Optional[int] = None) -> "UserFactory":
        return cls(
            created_window=settings.created_window,
            last_online_window=settings.last_online_window,
            birth_window=settings.birth_window,
            id_offset=settings.id_offset,
            seed=seed if seed is not None else settings.seed,
        )

    def _first_name(self, gender: str) -> str:
        by_gender: Dict[str, Callable[[], str]] = {
            "male": self._faker.first_name_male,
            "female": self._faker.first_name_female,
        }
        return by_gender.get(gender, self._faker.first_name)()

    def _draw(self, window: DateWindow) -> date:
        return self._faker.date_between(start_date=window.start, end_date=window.end)

    def _make_user(self, position: int, today: date) -> UserRecord:
        created_at = self._draw(self.created_window)
        last_online_at = self._draw(self.last_online_window)
        birth_date = self._draw(self.birth_window)
        gender = self._faker.random_element(self.genders)

        return UserRecord(
            id=self.id_offset + position,
            first_name=self._first_name(gender),
            last_name=self._faker.last_name(),
            gender=gender,
            birth_date=birth_date,
            age=age_on(birth_date, today),
            created_at=created_at,
            last_online_at=last_online_at,
        )

    def generate(self, count: int, today: Optional[date] = None) -> List[UserRecord]:
        """
        Generate ``count`` users, ages computed relative to ``today``.

        Parameters
        ----------
        count : int
            Number of users to produce (0 yields an empty list).
        today : date | None
            Reference date for age computation. Defaults to the current date.

        Returns
        -------
        List[UserRecord]
            Users with identifiers ``id_offset .. id_offset + count - 1``.
        """
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        reference = today or date.today()
        if self.birth_window.end >= reference:
            raise ValueError(f"birth window must end before {reference}")

        users = [self._make_user(position, reference) for position in range(count)]
        log.debug("Generated users", extra={"count": count, "id_offset": self.id_offset})
        return users


__all__ = ["GENDERS", "UserFactory", "age_on"]
