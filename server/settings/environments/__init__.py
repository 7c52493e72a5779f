"""Environment-specific settings, selected by ``DJANGO_ENV``."""
