"""Gunicorn config for the Event Dashboard API."""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# Uvicorn async workers — each loads its own copy of the three exports
# (small), so extra workers only cost a few MB each. Tune via WEB_CONCURRENCY.
worker_class = "uvicorn.workers.UvicornWorker"
workers = int(os.environ.get("WEB_CONCURRENCY", "2"))

# Excel export on a large roster is the slowest request
timeout = 60

graceful_timeout = 30

# Keep-alive — must exceed the proxy keep-alive (commonly 60s)
keepalive = 65

# Logging
accesslog = "-"
errorlog = "-"
loglevel = "info"
