# apps/board/channel_names.py

"""
Convenção de nomes dos canais do EventBus

- canal do board: o id do board como string
- canal da tarefa: "task:" + id da tarefa
"""

TASK_CHANNEL_PREFIX = 'task:'


def board_channel(board_or_id):
    board_id = getattr(board_or_id, 'pk', board_or_id)
    return str(board_id)


def task_channel(task_or_id):
    task_id = getattr(task_or_id, 'pk', task_or_id)
    return f'{TASK_CHANNEL_PREFIX}{task_id}'


def is_task_channel(channel):
    return channel.startswith(TASK_CHANNEL_PREFIX)


def channels_for(entity, board_id, task_id=None):
    """
    Canais em que uma mutação de `entity` precisa publicar

    Colunas, tarefas, labels e membros vão para o canal do board.
    Checklist vai para o board e também para o canal da tarefa.
    Comentários vão só para o canal da tarefa.
    """
    if entity == 'comment':
        return [task_channel(task_id)]
    if entity == 'checklist':
        return [board_channel(board_id), task_channel(task_id)]
    return [board_channel(board_id)]
