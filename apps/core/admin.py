# apps/core/admin.py

from django.contrib import admin
from django.utils.html import format_html

from .models import (
    ActivityEntry, Board, ChecklistItem, Column, Comment, Label, Member,
    Notification, Task,
)


def cor_preview(cor):
    """Quadradinho com a cor (hex ou classe)"""
    return format_html(
        '<div style="width: 20px; height: 20px; background-color: {}; '
        'border: 1px solid #ccc; border-radius: 3px;"></div>',
        cor or 'transparent'
    )


class ColumnInline(admin.TabularInline):
    model = Column
    extra = 0
    fields = ['title', 'color', 'order']
    ordering = ['order']


class MemberInline(admin.TabularInline):
    model = Member
    extra = 0
    fields = ['name', 'email', 'role', 'user']
    raw_id_fields = ['user']


@admin.register(Board)
class BoardAdmin(admin.ModelAdmin):
    """Admin para boards"""

    list_display = ['name', 'visibility', 'colunas_count', 'tasks_count', 'membros_count', 'created_at']
    list_filter = ['visibility', 'created_at']
    search_fields = ['name', 'description']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [ColumnInline, MemberInline]

    def colunas_count(self, obj):
        return obj.columns.count()

    colunas_count.short_description = 'Colunas'

    def tasks_count(self, obj):
        return Task.objects.filter(column__board=obj).count()

    tasks_count.short_description = 'Tarefas'

    def membros_count(self, obj):
        return obj.members.count()

    membros_count.short_description = 'Membros'


class TaskInline(admin.TabularInline):
    model = Task
    extra = 0
    fields = ['title', 'priority', 'order', 'completed_at', 'is_archived']
    readonly_fields = ['completed_at']
    ordering = ['order']


@admin.register(Column)
class ColumnAdmin(admin.ModelAdmin):
    """Admin para colunas"""

    list_display = ['title', 'board', 'order', 'tasks_count', 'conclusao', 'cor']
    list_filter = ['board']
    search_fields = ['title', 'board__name']
    ordering = ['board', 'order']
    inlines = [TaskInline]

    def tasks_count(self, obj):
        return obj.tasks.count()

    tasks_count.short_description = 'Tarefas'

    def conclusao(self, obj):
        return obj.is_completion

    conclusao.boolean = True
    conclusao.short_description = 'Conclusão'

    def cor(self, obj):
        return cor_preview(obj.color)

    cor.short_description = 'Cor'


class ChecklistItemInline(admin.TabularInline):
    model = ChecklistItem
    extra = 0
    fields = ['text', 'is_checked', 'order']


class CommentInline(admin.TabularInline):
    model = Comment
    extra = 0
    fields = ['author', 'content', 'created_at']
    readonly_fields = ['created_at']

    def has_add_permission(self, request, obj=None):
        """Apenas leitura no admin"""
        return False


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    """
    Admin para tarefas

    Contadores e completed_at são mantidos pela API, por isso ficam
    somente leitura aqui.
    """

    list_display = ['title', 'column', 'priority_badge', 'order', 'comment_count', 'checklist_count', 'completed_at']
    list_filter = ['priority', 'is_archived', 'column__board']
    search_fields = ['title', 'description', 'tag']
    filter_horizontal = ['assignees', 'labels']
    readonly_fields = ['checklist_count', 'comment_count', 'completed_at', 'created_at', 'updated_at']
    inlines = [ChecklistItemInline, CommentInline]

    def priority_badge(self, obj):
        cores = {
            'High': '#EF4444',
            'Medium': '#F59E0B',
            'Low': '#3B82F6',
        }
        return format_html(
            '<span style="background-color: {}; color: white; '
            'padding: 3px 8px; border-radius: 4px; font-size: 11px;">{}</span>',
            cores.get(obj.priority, '#6B7280'), obj.priority
        )

    priority_badge.short_description = 'Prioridade'


@admin.register(Member)
class MemberAdmin(admin.ModelAdmin):
    list_display = ['name', 'email', 'role', 'board', 'user']
    list_filter = ['role', 'board']
    search_fields = ['name', 'email']
    raw_id_fields = ['user']


@admin.register(Label)
class LabelAdmin(admin.ModelAdmin):
    list_display = ['name', 'board', 'cor']
    list_filter = ['board']
    search_fields = ['name']

    def cor(self, obj):
        return cor_preview(obj.color)

    cor.short_description = 'Cor'


@admin.register(ActivityEntry)
class ActivityEntryAdmin(admin.ModelAdmin):
    """Histórico é somente inserção: nada de edição pelo admin"""

    list_display = ['user', 'action', 'target', 'board', 'created_at']
    list_filter = ['board', 'created_at']
    search_fields = ['user', 'action', 'target']
    readonly_fields = ['board', 'actor', 'user', 'action', 'target', 'project_id', 'task', 'created_at']

    def has_add_permission(self, request):
        return False


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['actor_name', 'action', 'target', 'type', 'is_read', 'board', 'created_at']
    list_filter = ['type', 'is_read', 'board']
    list_editable = ['is_read']
    search_fields = ['actor_name', 'action', 'target']
