"""
Gunicorn configuration for the baby log API.

Env vars that override defaults:
  PORT     — TCP port to bind (default: 8787)

The store keeps the snapshot in memory and serializes writers with an
in-process lock, so exactly one worker process may own the data file.
"""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8787')}"

# One process only: a second worker would hold its own, diverging snapshot.
workers = 1

# Uvicorn's ASGI event loop inside Gunicorn's process manager.
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5

# A request never does more than one snapshot write.
timeout = 30

# stdout only; app loggers share the same stream.
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'

graceful_timeout = 30
