import os
from dataclasses import dataclass
from typing import Optional

from shcw.client import BASE_URL, DEFAULT_TIMEOUT
from shcw.errors import ConfigError
from shcw.models import GPSCoords

ACTIONS = ('clockin', 'clockout')


@dataclass
class Settings:
    username: str
    gps: GPSCoords
    address: str = ''
    holidays: str = 'holidays.json'
    log: str = 'cw.log'
    timeout: float = DEFAULT_TIMEOUT
    base_url: str = BASE_URL
    action: Optional[str] = None
    reconcile: bool = False

    @classmethod
    def from_env(cls, environ=None):
        """Build settings from SHCW_* environment variables"""
        env = os.environ if environ is None else environ
        username = env.get('SHCW_USERNAME', '')
        if not username:
            raise ConfigError("SHCW_USERNAME is not set")
        try:
            timeout = float(env.get('SHCW_TIMEOUT', DEFAULT_TIMEOUT))
        except ValueError:
            raise ConfigError("SHCW_TIMEOUT must be a number")
        return cls(
            username=username,
            gps=GPSCoords.parse(env.get('SHCW_GPS', '')),
            address=env.get('SHCW_ADDRESS', ''),
            holidays=env.get('SHCW_HOLIDAYS', 'holidays.json'),
            log=env.get('SHCW_LOG', ''),
            timeout=timeout,
            base_url=env.get('SHCW_BASE_URL', BASE_URL),
            reconcile=env.get('SHCW_RECONCILE', '') in ('1', 'true', 'yes')
        )
