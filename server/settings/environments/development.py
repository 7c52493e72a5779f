"""Settings for local development and the test suite."""

from server.settings.components import config

DEBUG = True

SECRET_KEY = config(
    'DJANGO_SECRET_KEY',
    default='django-insecure-development-only',
)

ALLOWED_HOSTS = ['localhost', '127.0.0.1', '[::1]', 'testserver']

EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'
