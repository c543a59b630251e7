# gunicorn.conf.py
import os

from bendinledim.config import env_int

wsgi_app = "wsgi:application"
bind = f"0.0.0.0:{os.environ.get('PORT', '8080')}"
workers = env_int("WEB_CONCURRENCY", 2)
# bulk generation waits on the model and on Commons for every draft
timeout = env_int("GUNICORN_TIMEOUT", 180)
loglevel = os.environ.get("GUNICORN_LOGLEVEL", os.environ.get("LOG_LEVEL", "info")).lower()
accesslog = "-"
