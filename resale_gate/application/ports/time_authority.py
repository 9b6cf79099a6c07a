"""Time authority port.

Services that compare against "now" (event dates, token expiry, the rate
limit window) take a TimeAuthorityProtocol instead of calling
``datetime.now()`` so tests can freeze and advance time.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class TimeAuthorityProtocol(ABC):
    """Source of the current time.

    Production uses SystemTimeAuthority. Tests use FakeTimeAuthority from
    tests/helpers/fake_time_authority.py.
    """

    @abstractmethod
    def utcnow(self) -> datetime:
        """Return the current time as an aware UTC datetime."""
        ...

    @abstractmethod
    def monotonic(self) -> float:
        """Return a monotonic clock reading in seconds, for durations."""
        ...
