import logging

from shcw import dates
from shcw.client import ShcwClient
from shcw.errors import ShcwError
from shcw.holiday import JsonCalendar

SATURDAY = 5
SUNDAY = 6


def should_skip(day, calendar):
    """Return why ``day`` is not a working day, or None"""
    if calendar is not None and calendar.is_holiday(day):
        return "today is holiday"
    if day.weekday() in (SATURDAY, SUNDAY):
        return "today is weekend"
    return None


def approve_applications(client, today):
    """Approve every pending application on the shifts opening today"""
    approved = 0
    for job in client.jobs:
        shift = job.get_shift(today)
        if shift is None:
            continue
        try:
            applications = client.fetch_applications(shift.unit_code)
        except ShcwError as e:
            logging.error(str(e))
            continue
        if applications:
            logging.info(f"job: {job.name}")

        for application in applications:
            try:
                client.approve(application)
            except ShcwError as e:
                logging.error(f"approve {application.user_name}: {e}")
                continue
            logging.info(f"approved user: {application.user_name}")
            approved += 1
    return approved


def _wants_clock(shift, action):
    if action == 'clockin':
        if shift.clock_in is not None:
            logging.info("already clocked in")
            return False
        return True
    if action == 'clockout':
        if shift.clock_out is not None:
            logging.info("already clocked out")
            return False
        return True
    return shift.needs_clock()


def clock_shifts(client, today, action=None, now=dates.now_local, reconcile=False):
    """Clock every job that has a shift today

    The service answers a clock call with nothing telling whether it
    recorded an in or an out, so the local shift is stamped on the side
    that was unset, clock-in first. This is best effort: a call that
    reached the server but timed out on the way back leaves local state
    behind. ``reconcile`` re-reads the roster afterwards and logs what the
    server holds.
    """
    clocked = 0
    for job in client.jobs:
        shift = job.get_shift(today)
        if shift is None:
            continue
        logging.info(f"job: {job.name}")
        if not _wants_clock(shift, action):
            continue
        try:
            client.clock(shift.job_code)
        except ShcwError as e:
            logging.error(f"clock {job.name}: {e}")
            continue
        side = shift.stamp(now())
        logging.info(f"clocked {side}")
        clocked += 1

    if reconcile and clocked:
        _log_server_state(client, today)
    return clocked


def _log_server_state(client, today):
    try:
        jobs = client.fetch_jobs()
    except ShcwError as e:
        logging.error(f"failed to reconcile roster: {e}")
        return
    for job in jobs:
        shift = job.get_shift(today)
        if shift is None:
            continue
        logging.info(f"job: {job.name}, server clock-in: {dates.encode_datetime(shift.clock_in) or '-'}, "
                     f"clock-out: {dates.encode_datetime(shift.clock_out) or '-'}")


def run(settings, password, calendar=None, client=None, today=None, now=dates.now_local):
    """One full pass: day gate, login, roster, approvals, clocking

    Returns False when the day was skipped. Login and roster failures
    propagate to the caller.
    """
    today = today or dates.today()
    if calendar is None:
        calendar = JsonCalendar(settings.holidays)

    reason = should_skip(today, calendar)
    if reason:
        logging.info(reason)
        return False

    if client is None:
        client = ShcwClient(settings.username, password, settings.gps, settings.address,
                            base_url=settings.base_url, timeout=settings.timeout)
    client.login()
    logging.info(f"user {settings.username} has logged in")

    client.fetch_jobs()
    approved = approve_applications(client, today)
    clocked = clock_shifts(client, today, action=settings.action, now=now,
                           reconcile=settings.reconcile)
    logging.info(f"approved {approved} application(s), clocked {clocked} job(s)")
    return True
