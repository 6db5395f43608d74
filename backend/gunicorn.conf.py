"""Gunicorn settings for serving ``tokenauth`` behind a reverse proxy."""

import os

wsgi_app = "tokenauth.factory:create_app()"

bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
# Revocation state lives in the database or Redis, so workers can scale out
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
threads = int(os.getenv("GUNICORN_THREADS", "1"))
timeout = 30
graceful_timeout = 30
keepalive = 5

# The app logs JSON to stdout; gunicorn's own logs go to the same streams
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

forwarded_allow_ips = os.getenv("FORWARDED_ALLOW_IPS", "127.0.0.1")
