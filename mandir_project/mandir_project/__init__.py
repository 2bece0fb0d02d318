# Celery instance is defined in mandir_project/celery.py
# It creates celery_app object and points it to Django settings
from .celery import celery_app

# 'from mandir_project import *', only exports celery_app
__all__ = ("celery_app",)
