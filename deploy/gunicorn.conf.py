"""
Gunicorn configuration for Streakline.
Every setting can be overridden from the environment for container deployment.
"""

from __future__ import annotations

import logging
import multiprocessing
import os

wsgi_app = os.environ.get("GUNICORN_APP", "streakline.wsgi:app")
bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")

# ===== Workers =====
# Requests are short and I/O bound, so threads per worker pay off.
worker_class = os.environ.get("GUNICORN_WORKER_CLASS", "gthread")
workers = int(os.environ.get("GUNICORN_WORKERS", str(multiprocessing.cpu_count() * 2 + 1)))
threads = int(os.environ.get("GUNICORN_THREADS", "4"))
max_requests = int(os.environ.get("GUNICORN_MAX_REQUESTS", "10000"))
max_requests_jitter = int(os.environ.get("GUNICORN_MAX_REQUESTS_JITTER", "1000"))

# ===== Timeouts =====
# The worker timeout is the only deadline a request gets.
timeout = int(os.environ.get("GUNICORN_TIMEOUT", "30"))
graceful_timeout = int(os.environ.get("GUNICORN_GRACEFUL_TIMEOUT", "30"))
keepalive = int(os.environ.get("GUNICORN_KEEPALIVE", "5"))

# ===== Logging =====
accesslog = os.environ.get("GUNICORN_ACCESSLOG", "-")
errorlog = os.environ.get("GUNICORN_ERRORLOG", "-")
loglevel = os.environ.get("GUNICORN_LOGLEVEL", "info")
capture_output = True
access_log_format = os.environ.get(
    "GUNICORN_ACCESS_LOG_FORMAT",
    '{"timestamp": "%(t)s", "remote": "%(h)s", "request": "%(r)s", '
    '"status": %(s)s, "bytes": %(b)s, "response_time": %(D)s, "pid": %(p)s}',
)

preload_app = os.environ.get("GUNICORN_PRELOAD", "false").lower() in ("1", "true", "yes")
forwarded_allow_ips = os.environ.get("GUNICORN_FORWARDED_ALLOW_IPS", "127.0.0.1")
proc_name = os.environ.get("GUNICORN_PROC_NAME", "streakline")


def when_ready(server):
    logging.getLogger(__name__).info(
        "Streakline ready on %s (workers=%s, threads=%s)", bind, workers, threads
    )


def worker_abort(worker):
    logging.getLogger(__name__).warning(
        "Worker %s timed out after %ss, aborting", worker.pid, timeout
    )
