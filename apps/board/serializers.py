# apps/board/serializers.py

"""
Representação JSON das entidades (chaves em camelCase, como o frontend usa)

As respostas da API e os payloads dos eventos usam as mesmas funções,
então um cliente que perdeu um evento pode reconciliar relendo a entidade.
"""


def _iso(value):
    return value.isoformat() if value else None


def serialize_member(member):
    return {
        'id': member.id,
        'boardId': member.board_id,
        'userId': member.user_id,
        'name': member.name,
        'email': member.email,
        'role': member.role,
        'avatar': member.avatar,
        'color': member.color,
        'createdAt': _iso(member.created_at),
    }


def serialize_label(label):
    return {
        'id': label.id,
        'boardId': label.board_id,
        'name': label.name,
        'color': label.color,
        'bgColor': label.bg_color,
        'textColor': label.text_color,
    }


def serialize_checklist_item(item):
    return {
        'id': item.id,
        'taskId': item.task_id,
        'text': item.text,
        'isChecked': item.is_checked,
        'order': item.order,
        'createdAt': _iso(item.created_at),
    }


def serialize_comment(comment):
    member = comment.author_member
    return {
        'id': comment.id,
        'taskId': comment.task_id,
        'author': comment.author,
        'authorMember': serialize_member(member) if member else None,
        'content': comment.content,
        'createdAt': _iso(comment.created_at),
        'updatedAt': _iso(comment.updated_at),
    }


def serialize_task(task):
    return {
        'id': task.id,
        'columnId': task.column_id,
        'title': task.title,
        'description': task.description,
        'tag': task.tag,
        'tagColor': task.tag_color,
        'priority': task.priority,
        'order': task.order,
        'dueDate': _iso(task.due_date),
        'startDate': _iso(task.start_date),
        'endDate': _iso(task.end_date),
        'checklistCount': task.checklist_count,
        'commentCount': task.comment_count,
        'completedAt': _iso(task.completed_at),
        'isArchived': task.is_archived,
        'assigneeIds': [member.id for member in task.assignees.all()],
        'labelIds': [label.id for label in task.labels.all()],
        'createdAt': _iso(task.created_at),
        'updatedAt': _iso(task.updated_at),
    }


def serialize_column(column, tasks=None):
    data = {
        'id': column.id,
        'boardId': column.board_id,
        'title': column.title,
        'color': column.color,
        'order': column.order,
        'createdAt': _iso(column.created_at),
    }
    if tasks is not None:
        data['tasks'] = [serialize_task(task) for task in tasks]
    return data


def serialize_activity(entry):
    return {
        'id': entry.id,
        'boardId': entry.board_id,
        'user': entry.user,
        'actorId': entry.actor_id,
        'action': entry.action,
        'target': entry.target,
        'projectId': entry.project_id or None,
        'taskId': entry.task_id,
        'createdAt': _iso(entry.created_at),
    }


def serialize_notification(notification):
    return {
        'id': notification.id,
        'boardId': notification.board_id,
        'actorName': notification.actor_name,
        'action': notification.action,
        'target': notification.target,
        'type': notification.type,
        'isRead': notification.is_read,
        'createdAt': _iso(notification.created_at),
    }


def serialize_board(board, columns=None, members=None, labels=None, activities=None):
    """Board com as coleções opcionais (usado na leitura detalhada)"""
    data = {
        'id': board.id,
        'name': board.name,
        'description': board.description,
        'color': board.color,
        'visibility': board.visibility,
        'createdAt': _iso(board.created_at),
        'updatedAt': _iso(board.updated_at),
    }
    if columns is not None:
        data['columns'] = columns
    if members is not None:
        data['members'] = [serialize_member(member) for member in members]
    if labels is not None:
        data['labels'] = [serialize_label(label) for label in labels]
    if activities is not None:
        data['activities'] = [serialize_activity(entry) for entry in activities]
    return data


def serialize_siblings(items):
    """Posições resultantes de um reorder: [{id, order}]"""
    return [{'id': item.id, 'order': item.order} for item in items]
