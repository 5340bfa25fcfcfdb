# apps/core/models.py

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


COMPLETION_KEYWORDS = ('done', 'completed')


def is_completion_title(title):
    """Coluna cujo título contém 'done' ou 'completed' (sem diferenciar caixa)"""
    lowered = (title or '').lower()
    return any(keyword in lowered for keyword in COMPLETION_KEYWORDS)


class Board(models.Model):
    """
    Quadro colaborativo (workspace)

    Dono das colunas, membros, labels, atividades e notificações.
    Apagar o board apaga tudo em cascata.
    """

    VISIBILITY_CHOICES = [
        ('PRIVATE', 'Privado'),
        ('PUBLIC', 'Público'),
    ]

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default='')
    color = models.CharField(max_length=32, default='#3B82F6')
    visibility = models.CharField(max_length=10, choices=VISIBILITY_CHOICES, default='PRIVATE')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'board'
        ordering = ['-created_at']

    def __str__(self):
        return self.name

    def create_default_columns(self):
        """Cria as colunas padrão para um board novo"""
        titles = getattr(settings, 'COLAB_DEFAULT_COLUMNS', ['To Do', 'In Progress', 'Done'])
        return [
            Column.objects.create(board=self, title=title, order=idx)
            for idx, title in enumerate(titles)
        ]


class Column(models.Model):
    """
    Coluna do board

    `order` não tem unique constraint: empates são desfeitos pela data
    de criação (e pelo id) na hora de exibir.
    """

    board = models.ForeignKey(Board, on_delete=models.CASCADE, related_name='columns')
    title = models.CharField(max_length=100)
    color = models.CharField(max_length=32, blank=True, default='')
    order = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'board_column'
        ordering = ['order', 'created_at', 'id']

    def __str__(self):
        return f"{self.title} - {self.board.name}"

    @property
    def is_completion(self):
        return is_completion_title(self.title)


class Member(models.Model):
    """Membro de um board (escopo do board, diferente do usuário global)"""

    ROLE_CHOICES = [
        ('Owner', 'Owner'),
        ('Editor', 'Editor'),
        ('Viewer', 'Viewer'),
    ]

    board = models.ForeignKey(Board, on_delete=models.CASCADE, related_name='members')
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='board_memberships'
    )
    name = models.CharField(max_length=200)
    email = models.EmailField(blank=True, default='')
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='Viewer')
    avatar = models.CharField(max_length=500, blank=True, default='')
    color = models.CharField(max_length=32, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'board_member'
        ordering = ['name', 'id']

    def __str__(self):
        return f"{self.name} ({self.role})"


class Label(models.Model):
    """Etiqueta do board (nome único dentro do board)"""

    board = models.ForeignKey(Board, on_delete=models.CASCADE, related_name='labels')
    name = models.CharField(max_length=100)
    color = models.CharField(max_length=32)
    bg_color = models.CharField(max_length=64, default='bg-slate-100')
    text_color = models.CharField(max_length=64, default='text-slate-700')

    class Meta:
        db_table = 'board_label'
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(fields=['board', 'name'], name='unique_label_name_per_board'),
        ]

    def __str__(self):
        return self.name


class Task(models.Model):
    """
    Tarefa de uma coluna

    `completed_at` é derivado da coluna atual (ver is_completion_title),
    nunca é uma flag manual. Os contadores de comentários e checklist são
    cache, não fonte da verdade.
    """

    PRIORITY_CHOICES = [
        ('Low', 'Low'),
        ('Medium', 'Medium'),
        ('High', 'High'),
    ]

    column = models.ForeignKey(Column, on_delete=models.CASCADE, related_name='tasks')
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default='')
    tag = models.CharField(max_length=50, blank=True, default='')
    tag_color = models.CharField(max_length=32, blank=True, default='')
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='Medium')
    order = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    due_date = models.DateTimeField(null=True, blank=True)
    start_date = models.DateTimeField(null=True, blank=True)
    end_date = models.DateTimeField(null=True, blank=True)
    checklist_count = models.IntegerField(default=0)
    comment_count = models.IntegerField(default=0)
    completed_at = models.DateTimeField(null=True, blank=True)
    is_archived = models.BooleanField(default=False)
    assignees = models.ManyToManyField(Member, blank=True, related_name='assigned_tasks')
    labels = models.ManyToManyField(Label, blank=True, related_name='tasks')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'board_task'
        ordering = ['order', 'created_at', 'id']

    def __str__(self):
        return self.title

    @property
    def board_id(self):
        return self.column.board_id


class ChecklistItem(models.Model):
    """Item de checklist de uma tarefa"""

    task = models.ForeignKey(Task, on_delete=models.CASCADE, related_name='checklist_items')
    text = models.CharField(max_length=500)
    is_checked = models.BooleanField(default=False)
    order = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'checklist_item'
        ordering = ['order', 'created_at', 'id']

    def __str__(self):
        return self.text


class Comment(models.Model):
    """Comentário em uma tarefa"""

    task = models.ForeignKey(Task, on_delete=models.CASCADE, related_name='comments')
    author = models.CharField(max_length=200, default='Anonymous')
    author_member = models.ForeignKey(
        Member,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='comments'
    )
    content = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'task_comment'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Comentário de {self.author} em {self.created_at:%d/%m/%Y}"


class ActivityEntry(models.Model):
    """
    Registro de atividade do board (somente inserção)

    `user` guarda o nome exibido no momento da ação; `actor` é a referência
    estável ao membro, para não depender de casar nomes depois.
    """

    board = models.ForeignKey(Board, on_delete=models.CASCADE, related_name='activities')
    actor = models.ForeignKey(
        Member,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='activities'
    )
    user = models.CharField(max_length=200)
    action = models.CharField(max_length=200)
    target = models.CharField(max_length=300)
    project_id = models.CharField(max_length=64, blank=True, default='')
    task = models.ForeignKey(
        Task,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='activities'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'board_activity'
        ordering = ['-created_at', '-id']
        verbose_name_plural = 'activity entries'

    def __str__(self):
        return f"{self.user} {self.action} {self.target}"


class Notification(models.Model):
    """Notificação derivada de uma atividade; só `is_read` muda depois de criada"""

    TYPE_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
        ('comment', 'Comment'),
    ]

    board = models.ForeignKey(Board, on_delete=models.CASCADE, related_name='notifications')
    actor_name = models.CharField(max_length=200)
    action = models.CharField(max_length=200)
    target = models.CharField(max_length=300)
    type = models.CharField(max_length=10, choices=TYPE_CHOICES, default='update')
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'notification'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"[{self.type}] {self.actor_name} {self.action} {self.target}"
