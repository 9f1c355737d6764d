"""Development settings for Classwise.

Extends base settings with developer-friendly defaults.
"""
from .base import *  # noqa
import os


DEBUG = True
ALLOWED_HOSTS = ["127.0.0.1", "localhost"]

# Development secret key fallback (safe only for local use)
SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-insecure-key-change-me")

# Browsable API is handy locally; production keeps JSON only
REST_FRAMEWORK["DEFAULT_RENDERER_CLASSES"] = [  # noqa: F405
    "rest_framework.renderers.JSONRenderer",
    "rest_framework.renderers.BrowsableAPIRenderer",
]
