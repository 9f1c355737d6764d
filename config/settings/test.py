"""Test settings for Classwise.

Uses a fast password hasher and a dummy cache so throttling state never
leaks between tests.
"""
from .base import *  # noqa


DEBUG = False
SECRET_KEY = "test-insecure-key"

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

CACHES = {
    "default": {"BACKEND": "django.core.cache.backends.dummy.DummyCache"},
}

MEDIA_ROOT = BASE_DIR / "media-test"  # noqa: F405

LOGGING["loggers"]["django"]["level"] = "WARNING"  # noqa: F405
