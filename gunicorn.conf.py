# gunicorn.conf.py
import os
import logging
import sys
import multiprocessing

# Configure logging to stdout
accesslog = '-'
errorlog = '-'
loglevel = 'info'

# Get PORT from environment or use default
port = os.getenv('PORT', '8080')
bind = f"0.0.0.0:{port}"

# Requests spend nearly all their time waiting on the completion API
cores = multiprocessing.cpu_count()
workers = min(cores * 2 + 1, 4)
threads = 8

# Log configuration on startup
def on_starting(server):
    logger = logging.getLogger('gunicorn.error')
    logger.setLevel(logging.INFO)
    logger.addHandler(logging.StreamHandler(sys.stdout))
    logger.info(f"Starting gunicorn with {workers} workers on port {port}")
    logger.info(f"Worker timeout set to {timeout} seconds")

# Completion calls carry no timeout of their own; the worker timeout bounds them
timeout = 120
keepalive = 5
worker_class = "gthread"

# Process naming
proc_name = "lumi"
default_proc_name = "lumi"

# Graceful server restart
graceful_timeout = 30
