# apps/board/urls.py

from django.urls import path
from . import views

app_name = 'board'

urlpatterns = [
    # Boards
    path('boards/', views.boards, name='boards'),
    path('boards/<int:board_id>/', views.board_detail, name='board_detail'),

    # Colunas (?boardId=)
    path('columns/', views.columns, name='columns'),
    path('columns/<int:column_id>/', views.column_detail, name='column_detail'),

    # Tarefas (?columnId= ou ?boardId=)
    path('tasks/', views.tasks, name='tasks'),
    path('tasks/<int:task_id>/', views.task_detail, name='task_detail'),
    path('tasks/<int:task_id>/move/', views.task_move, name='task_move'),

    # Comentários e checklist (?taskId=)
    path('comments/', views.comments, name='comments'),
    path('comments/<int:comment_id>/', views.comment_detail, name='comment_detail'),
    path('checklist/', views.checklist, name='checklist'),
    path('checklist/<int:item_id>/', views.checklist_detail, name='checklist_detail'),

    # Labels e membros (?boardId=)
    path('labels/', views.labels, name='labels'),
    path('labels/<int:label_id>/', views.label_detail, name='label_detail'),
    path('members/', views.members, name='members'),
    path('members/<int:member_id>/', views.member_detail, name='member_detail'),

    # Atividades e notificações (?boardId=)
    path('activity/', views.activity, name='activity'),
    path('activity/<int:activity_id>/', views.activity_detail, name='activity_detail'),
    path('notifications/', views.notifications, name='notifications'),
    path('notifications/<int:notification_id>/', views.notification_detail, name='notification_detail'),
]
