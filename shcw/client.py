import logging
import re

import requests

from shcw import dates
from shcw.errors import ApiError, AuthError, FormatError, TransportError
from shcw.models import Job, Shift, ShiftApplication, ShiftState, fixed_list

BASE_URL = "https://sq.shcvs.cn/962200/html5/v1"
DEFAULT_TIMEOUT = 30

# Shifts are only open for at most one month ahead
PAGE_SIZE = 31

_HTML_PARAGRAPH = re.compile(r'<p[^>]*>([^<]+)</p[^>]*>')


def _shift_state(value):
    try:
        return ShiftState(int(value))
    except (TypeError, ValueError):
        # states other than pending/approved are kept as they come
        return value


def plain_message(msg):
    """Strip the <p> wrapping the service puts around error messages"""
    paragraphs = _HTML_PARAGRAPH.findall(msg or '')
    if not paragraphs:
        return msg or ''
    return '\n'.join(paragraphs)


class ShcwClient:
    def __init__(self, username, password, gps, address,
                 base_url=BASE_URL, timeout=DEFAULT_TIMEOUT, http=None):
        self.username = username
        self.password = password
        self.gps = gps
        self.address = address
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.http = http if http is not None else requests.Session()
        self.user_id = None
        self.token = None
        self.jobs = []

    def login(self):
        """Log in and keep the token for the following requests"""
        body = {
            'loginName': self.username,
            'loginPassword': self.password,
            'loginType': '1'
        }
        try:
            data = self._post('/user/accountlogin', body)
        except ApiError as e:
            raise AuthError(str(e), e.code) from e

        data = data or {}
        try:
            self.user_id = int(data['userId'])
            self.token = data['cookieResp']['token']
        except (KeyError, TypeError, ValueError) as e:
            raise FormatError(f"unexpected login response: {data!r}") from e
        self.http.headers['token'] = self.token
        return self.user_id, self.token

    def fetch_jobs(self):
        """Fetch the open jobs of the user, replacing the local roster"""
        self.jobs = []
        body = {
            'user': self.user_id,
            'status': 1,
            'pageNumber': 1,
            'pageSize': PAGE_SIZE
        }
        data = self._post('/station/userTicket/queryPersonalPostByUserAndStatus', body) or {}

        jobs = []
        for record in fixed_list(data.get('records')):
            items = fixed_list(record.get('list'))
            if not items:
                continue
            job = Job(code=record.get('pkFirstCode', ''), name=record.get('name', ''))
            for item in items:
                job.shifts.append(Shift(
                    job_code=job.code,
                    unit_code=item.get('pk_unit_code', ''),
                    apply_code=item.get('applyCode', ''),
                    open_date=dates.decode_date(item.get('day')),
                    clock_in=dates.decode_datetime(item.get('checkInTime')),
                    clock_out=dates.decode_datetime(item.get('checkOutTime')),
                    state=_shift_state(item.get('state')),
                    settled=bool(item.get('isSettle'))
                ))
            jobs.append(job)
        self.jobs = jobs
        return jobs

    def shifts(self):
        return [shift for job in self.jobs for shift in job.shifts]

    def fetch_applications(self, unit_code):
        """Fetch the applications still waiting for approval on a work unit"""
        body = {
            'pkUnitCode': unit_code,
            # "0" matches every applicant
            'user': '0',
            'state': int(ShiftState.NOT_APPROVED),
            'pageNumber': 1,
            'pageSize': PAGE_SIZE,
            'isSettle': 0
        }
        try:
            data = self._post('/station/postApply/auditList', body) or {}
        except ApiError as e:
            raise ApiError(f"fetch {unit_code}: {e}", e.code) from e

        applications = []
        for record in fixed_list(data.get('records')):
            try:
                user_id = int(record.get('user'))
            except (TypeError, ValueError) as e:
                raise FormatError(f"invalid applicant id {record.get('user')!r}") from e
            applications.append(ShiftApplication(
                unit_code=record.get('pkUnitCode', unit_code),
                code=record.get('code', ''),
                user_id=user_id,
                user_name=record.get('nickName', ''),
                ticket=record.get('ticket', ''),
                ticket_order=record.get('ticketOrder', '')
            ))
        return applications

    def approve(self, application):
        """Approve one application

        Approving our own application also marks the matching roster shift
        approved. Nothing acts on the state; it only keeps the roster in step
        with the server until the next fetch.
        """
        body = {
            'pkUnitCode': application.unit_code,
            'code': application.code,
            'user': str(application.user_id),
            'ticket': application.ticket,
            'ticketOrder': application.ticket_order,
            'state': int(ShiftState.APPROVED)
        }
        self._post('/station/postApply/audit', body)

        # keep the roster in step when approving our own application
        if application.user_id == self.user_id and application.code:
            for shift in self.shifts():
                if shift.apply_code == application.code:
                    shift.state = ShiftState.APPROVED

    def clock(self, job_code):
        """Clock in or out; the server decides which from its own state"""
        body = {
            'user': self.user_id,
            'pkPostCode': job_code,
            'locationType': 'GPS',
            'sourceType': 1,
            'optionUser': self.user_id,
            'confirmCheck': 0,
            'signPageCode': 1,
            'lat': self.gps.lat,
            'lng': self.gps.lng,
            'address': self.address
        }
        self._post('/station/newPostSign', body)

    def _post(self, path, body):
        url = f"{self.base_url}{path}"
        headers = {'content-type': 'application/json'}
        try:
            response = self.http.post(url, json=body, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise TransportError(f"POST {path}: {e}") from e

        if not 200 <= response.status_code < 300:
            raise TransportError(f"POST {path}: {response.status_code} {response.reason}")
        try:
            envelope = response.json()
        except ValueError as e:
            raise TransportError(f"POST {path}: invalid response body") from e
        if not isinstance(envelope, dict):
            raise TransportError(f"POST {path}: invalid response body")

        code = envelope.get('code')
        if code != 0:
            logging.debug(f"POST {path} returned code {code}: {envelope.get('msg')}")
            raise ApiError(plain_message(envelope.get('msg', '')), code)
        return envelope.get('data')
