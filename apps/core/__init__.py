# apps/core/__init__.py

"""
Core - Models e infraestrutura do Colab Board

Contém:
- Models (Board, Column, Task, Member, Label, Comment, ChecklistItem, atividades)
- Formulários de validação dos payloads JSON
- Admin e comando de seed para desenvolvimento
"""
