"""
Production WSGI entry point for Gunicorn.

Usage:
    gunicorn -w 2 -k gthread -b 0.0.0.0:$PORT wsgi:app
"""

from wildscout import create_app

app = create_app()
