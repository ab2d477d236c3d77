"""
Gunicorn configuration for the Panchroma API.

    gunicorn core.wsgi:application -c deployment/gunicorn/gunicorn_config.py
"""
import multiprocessing
import os

bind = os.getenv('GUNICORN_BIND', 'unix:/run/panchroma-api/gunicorn.sock')
workers = int(os.getenv('GUNICORN_WORKERS', multiprocessing.cpu_count() * 2 + 1))
worker_class = "sync"
worker_tmp_dir = "/dev/shm"
max_requests = 1000
max_requests_jitter = 100
# Geolocation lookups are bounded well below this
timeout = 30
keepalive = 5

# Logging
accesslog = os.getenv('GUNICORN_ACCESS_LOG', '-')
errorlog = os.getenv('GUNICORN_ERROR_LOG', '-')
loglevel = os.getenv('GUNICORN_LOG_LEVEL', 'info')
access_log_format = '%(h)s "%(r)s" %(s)s %(b)s "%(a)s" %(D)s'

proc_name = "panchroma-api"
daemon = False


def when_ready(server):
    server.log.info("Panchroma API ready, spawning workers")


def worker_abort(worker):
    """Called when a worker times out, usually a stuck upstream request."""
    worker.log.warning(f"Worker {worker.pid} aborted")
