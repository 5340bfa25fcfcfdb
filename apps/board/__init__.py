# apps/board/__init__.py

"""
Board - API e tempo real do Colab Board

Funcionalidades:
- Endpoints JSON de colunas, tarefas, comentários, checklist, labels e membros
- EventBus em memória com canais por board e por tarefa
- Stream SSE para os clientes conectados
- Histórico de atividades e notificações
"""
