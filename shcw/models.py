from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import List, Optional

from shcw.errors import ConfigError, FormatError


class ShiftState(IntEnum):
    NOT_APPROVED = 10
    APPROVED = 20


@dataclass
class Shift:
    """A shift of a job as seen by the logged-in user

    Holds the job code rather than the job itself, so the roster can be
    rebuilt or mutated without invalidating anything that refers to a shift.
    """

    job_code: str
    unit_code: str
    open_date: Optional[datetime]
    apply_code: str = ''
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    state: ShiftState = ShiftState.NOT_APPROVED
    settled: bool = False

    def needs_clock(self):
        return self.clock_in is None or self.clock_out is None

    def stamp(self, now):
        """Record a clock action locally, clock-in first

        Returns "in", "out" or None when both sides were already set.
        """
        if self.clock_in is None:
            self.clock_in = now
            return 'in'
        if self.clock_out is None:
            self.clock_out = now
            return 'out'
        return None


@dataclass
class Job:
    code: str
    name: str
    shifts: List[Shift] = field(default_factory=list)

    def get_shift(self, open_date):
        """Return the shift opening on ``open_date`` (local midnight), or None"""
        for shift in self.shifts:
            if shift.open_date == open_date:
                return shift
        return None


@dataclass
class ShiftApplication:
    unit_code: str
    user_id: int
    user_name: str
    ticket: str
    ticket_order: str
    code: str = ''


@dataclass(frozen=True)
class GPSCoords:
    lat: float
    lng: float

    @classmethod
    def parse(cls, value):
        """Parse a "lng,lat" string such as 121.4737,31.2304"""
        parts = value.split(',') if value else []
        if len(parts) != 2:
            raise ConfigError("gps: invalid number of coordinates")
        try:
            lng = float(parts[0])
        except ValueError:
            raise ConfigError("gps: invalid longitude")
        try:
            lat = float(parts[1])
        except ValueError:
            raise ConfigError("gps: invalid latitude")
        return cls(lat=lat, lng=lng)

    def __str__(self):
        return f"{self.lng},{self.lat}"


def fixed_list(value):
    """Decode a list field the server sometimes sends as "" when empty"""
    if value is None or value == '':
        return []
    if isinstance(value, list):
        return value
    raise FormatError(f"expected a list, got {type(value).__name__}")
