from http.server import BaseHTTPRequestHandler
from urllib.parse import urlparse, parse_qs
import dataclasses
import logging
import os
import sys

# Add parent directory to path so we can import shcw
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from shcw.cli import LOG_FORMAT, add_log_file
from shcw.config import ACTIONS, Settings
from shcw.errors import ShcwError
from shcw.workflow import run

logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
    handlers=[
        logging.StreamHandler()
    ]
)


def handle_action(action, environ=None):
    """Run one pass for ``action``; returns (http status, message)"""
    env = os.environ if environ is None else environ
    if action and action not in ACTIONS:
        return 400, f"Unknown action: {action}"

    try:
        settings = dataclasses.replace(Settings.from_env(env), action=action or None)
        add_log_file(settings.log)
        password = env.get('SHCW_PASSWORD', '')
        worked = run(settings, password)
    except ShcwError as e:
        logging.error(f"Run failed: {e}")
        return 500, f"Failed: {e}"

    if not worked:
        return 200, "Skipped: not a working day"
    return 200, f"Done: {action or 'clock'}"


class handler(BaseHTTPRequestHandler):
    def do_GET(self):
        query = parse_qs(urlparse(self.path).query)
        action = query.get('action', [''])[0]

        status, message = handle_action(action)

        self.send_response(status)
        self.send_header('Content-type', 'text/plain')
        self.end_headers()
        self.wfile.write(message.encode('utf-8'))
        return
