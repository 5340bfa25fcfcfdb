# config/settings/development.py

from .base import *

# === DESENVOLVIMENTO ===

DEBUG = True

ALLOWED_HOSTS = ['localhost', '127.0.0.1', '0.0.0.0']

# === APPS ADICIONAIS PARA DEV ===

# django-extensions apenas se instalado (extra "dev")
try:
    import django_extensions  # noqa: F401

    INSTALLED_APPS += ['django_extensions']

    SHELL_PLUS_IMPORTS = [
        'from apps.core.models import *',
        'from apps.board.bus import get_event_bus',
        'from apps.board.channel_names import board_channel, task_channel',
    ]
except ImportError:
    pass

# === BANCO DE DADOS ===

# Usar DATABASE_URL se fornecida, senão usar variáveis individuais
if env('DATABASE_URL', default=None):
    import dj_database_url

    DATABASES['default'] = dj_database_url.parse(env('DATABASE_URL'), conn_max_age=600)
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': env('DB_NAME', default='colab_board'),
            'USER': env('DB_USER', default='colab_user'),
            'PASSWORD': env('DB_PASSWORD', default='colab123'),
            'HOST': env('DB_HOST', default='localhost'),
            'PORT': env('DB_PORT', default='5432'),
            'OPTIONS': {
                'sslmode': 'prefer',
            },
            'CONN_MAX_AGE': 60,
        }
    }

# Fallback para SQLite apenas se explicitamente solicitado
if env('USE_SQLITE', cast=bool, default=False):
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }

# === LOGGING MAIS VERBOSO ===

LOGGING['handlers']['console']['level'] = 'DEBUG'
LOGGING['root']['level'] = 'DEBUG'
LOGGING['loggers']['apps']['level'] = 'DEBUG'

# Permitir CORS/CSRF relaxado para o frontend local
SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False

# Keepalive mais curto ajuda a perceber conexões caídas durante o dev
COLAB_STREAM_KEEPALIVE_SECONDS = env.float('COLAB_STREAM_KEEPALIVE_SECONDS', default=10.0)
