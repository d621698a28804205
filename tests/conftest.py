import json
from datetime import datetime

import pytest

from shcw import dates
from shcw.client import ShcwClient
from shcw.models import GPSCoords


class FakeResponse:
    def __init__(self, payload, status_code=200, reason='OK'):
        self.payload = payload
        self.status_code = status_code
        self.reason = reason

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if isinstance(self.payload, str):
            return json.loads(self.payload)
        return self.payload


class FakeHttp:
    """Stands in for requests.Session, answering posts by path"""

    def __init__(self):
        self.headers = {}
        self.routes = {}
        self.calls = []

    def reply(self, path, data=None, code=0, msg='', status_code=200):
        self.routes.setdefault(path, []).append(
            FakeResponse({'code': code, 'msg': msg, 'data': data}, status_code=status_code))

    def raw(self, path, response):
        self.routes.setdefault(path, []).append(response)

    def post(self, url, json=None, headers=None, timeout=None):
        path = url.split('/v1', 1)[1]
        self.calls.append((path, json, dict(self.headers), timeout))
        queue = self.routes.get(path)
        if not queue:
            raise AssertionError(f"unexpected POST {path}")
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        return response

    def paths(self):
        return [c[0] for c in self.calls]


@pytest.fixture
def http():
    return FakeHttp()


@pytest.fixture
def gps():
    return GPSCoords(lat=31.2304, lng=121.4737)


@pytest.fixture
def client(http, gps):
    return ShcwClient('alice', 'secret', gps, 'Office', http=http)


@pytest.fixture
def today():
    # a Wednesday
    return dates.localize(datetime(2024, 3, 13))


def login_reply(http, user_id=42, token='tok-1'):
    http.reply('/user/accountlogin', {'userId': user_id, 'cookieResp': {'token': token}})


def jobs_reply(http, records):
    http.reply('/station/userTicket/queryPersonalPostByUserAndStatus', {'records': records})


def shift_record(day, unit='U1', apply_code='A1', check_in='', check_out='', state=20):
    return {
        'applyCode': apply_code,
        'pk_unit_code': unit,
        'day': day,
        'checkInTime': check_in,
        'checkOutTime': check_out,
        'state': state,
        'isSettle': 0
    }
