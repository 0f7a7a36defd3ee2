"""
Development settings for rewards_server project.
"""

from decouple import config
from .base import *

DEBUG = config('DEBUG', default=True, cast=bool)

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.mysql',
        'NAME': config('MYSQL_DATABASE', default='rewards_server_dev'),
        'USER': config('MYSQL_USER', default='root'),
        'PASSWORD': config('MYSQL_PASSWORD', default='dev_password'),
        'HOST': config('MYSQL_HOST', default='localhost'),
        'PORT': config('MYSQL_PORT', default='3306'),
        'OPTIONS': {
            'charset': 'utf8mb4',
            'init_command': "SET sql_mode='STRICT_TRANS_TABLES'",
            'isolation_level': 'read committed',
        },
        'CONN_MAX_AGE': config('DB_CONN_MAX_AGE', default=60, cast=int),
        'CONN_HEALTH_CHECKS': True,
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'rewards_server_dev',
    }
}

# Shorter windows make the leaderboard and sweeper easy to observe locally
REWARDS_LEADERBOARD_CACHE_SECONDS = config('REWARDS_LEADERBOARD_CACHE_SECONDS', default=10, cast=int)
REWARDS_EXPIRATION_SWEEP_INTERVAL_SECONDS = config('REWARDS_EXPIRATION_SWEEP_INTERVAL_SECONDS', default=60, cast=int)

# Logging for development
LOGGING['handlers']['console']['level'] = config('LOG_LEVEL', default='DEBUG')
LOGGING['root']['level'] = config('LOG_LEVEL', default='DEBUG')
LOGGING['loggers']['apps.rewards']['level'] = config('LOG_LEVEL', default='DEBUG')
