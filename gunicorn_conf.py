import os

# gunicorn -c gunicorn_conf.py taskmatch.main:app
wsgi_app = "taskmatch.main:app"
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.getenv("WEB_CONCURRENCY", 2))
worker_class = "uvicorn.workers.UvicornWorker"
timeout = int(os.getenv("GUNICORN_TIMEOUT", 30))
graceful_timeout = int(os.getenv("GUNICORN_GRACEFUL_TIMEOUT", 30))
keepalive = int(os.getenv("GUNICORN_KEEPALIVE", 5))

# Per-task locks live in process memory; the row lock taken on every task
# command keeps workers consistent with each other on PostgreSQL.
preload_app = False

accesslog = "-"
errorlog = "-"
