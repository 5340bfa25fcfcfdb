# apps/core/management/commands/seed.py

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.core.models import Board, Label, Member, Task, is_completion_title


DEMO_BOARD = 'Sprint 1'

DEMO_MEMBERS = [
    ('Ana Souza', 'Owner', '#6366F1'),
    ('Bruno Lima', 'Editor', '#10B981'),
    ('Carla Dias', 'Viewer', '#F59E0B'),
]

DEMO_LABELS = [
    ('bug', '#EF4444', 'bg-red-100', 'text-red-700'),
    ('feature', '#3B82F6', 'bg-blue-100', 'text-blue-700'),
    ('docs', '#64748B', 'bg-slate-100', 'text-slate-700'),
]

# (coluna, título, prioridade, label)
DEMO_TASKS = [
    (0, 'Configurar CI', 'High', 'feature'),
    (0, 'Revisar textos da landing', 'Low', 'docs'),
    (1, 'Corrigir arrastar entre colunas', 'High', 'bug'),
    (2, 'Criar board inicial', 'Medium', 'feature'),
]


class Command(BaseCommand):
    help = 'Cria um board de demonstração com membros, labels e tarefas'

    def add_arguments(self, parser):
        parser.add_argument(
            '--force',
            action='store_true',
            help='Recria o board de demonstração mesmo se ele já existir'
        )

    def handle(self, *args, **options):
        existente = Board.objects.filter(name=DEMO_BOARD)
        if existente.exists():
            if not options['force']:
                self.stdout.write(
                    self.style.WARNING(
                        f'⚠️  Board "{DEMO_BOARD}" já existe. Use --force para recriar.'
                    )
                )
                return
            existente.delete()
            self.stdout.write(f'🗑️  Board "{DEMO_BOARD}" anterior removido')

        board = self._criar_board()

        self.stdout.write(
            self.style.SUCCESS(
                f'\n✅ Board de demonstração criado (ID: {board.pk})\n'
                f'  • Colunas: {board.columns.count()}\n'
                f'  • Membros: {board.members.count()}\n'
                f'  • Labels: {board.labels.count()}\n'
                f'  • Tarefas: {Task.objects.filter(column__board=board).count()}\n'
                f'\nStream: /api/realtime/stream?channel={board.pk}\n'
            )
        )

    @transaction.atomic
    def _criar_board(self):
        """Board com as colunas padrão e dados de exemplo"""
        self.stdout.write('🌱 Criando board de demonstração...')
        board = Board.objects.create(name=DEMO_BOARD, description='Board de demonstração')
        board.create_default_columns()

        membros = [
            Member.objects.create(board=board, name=nome, role=papel, color=cor)
            for nome, papel, cor in DEMO_MEMBERS
        ]
        labels = {
            nome: Label.objects.create(board=board, name=nome, color=cor, bg_color=bg, text_color=texto)
            for nome, cor, bg, texto in DEMO_LABELS
        }

        colunas = list(board.columns.all())
        for indice, titulo, prioridade, label in DEMO_TASKS:
            coluna = colunas[min(indice, len(colunas) - 1)]
            task = Task(column=coluna, title=titulo, priority=prioridade)
            task.order = coluna.tasks.count()
            if is_completion_title(coluna.title):
                task.completed_at = timezone.now()
            task.save()
            task.labels.add(labels[label])
            task.assignees.add(membros[indice % len(membros)])

        return board
