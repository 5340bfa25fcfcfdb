# config/wsgi.py

import os
from django.core.wsgi import get_wsgi_application

# Configurar settings padrão
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.production')

# Aplicação WSGI: atende a API JSON, mas o stream em tempo real
# precisa do servidor ASGI (config.asgi)
application = get_wsgi_application()
