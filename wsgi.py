# wsgi.py
# gunicorn -c gunicorn.conf.py wsgi:application
from bendinledim import create_app

application = create_app()
