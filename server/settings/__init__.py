"""Django settings for the campaign applications server.

Settings are assembled from ``components/`` (shared by every environment)
and one file from ``environments/`` selected by ``DJANGO_ENV``.
"""

from split_settings.tools import include, optional

from server.settings.components import config

_ENV = config('DJANGO_ENV', default='development')

include(
    'components/common.py',
    'components/logging.py',
    'components/storages.py',
    'components/campaign_applications.py',
    f'environments/{_ENV}.py',
    # Developer overrides, never committed
    optional('environments/local.py'),
)
