# apps/__init__.py

"""
Colab Board - Aplicações Django

- core: models do board, formulários de payload, admin e seed
- board: API JSON, EventBus e stream em tempo real (SSE)
"""

__version__ = '0.1.0'
