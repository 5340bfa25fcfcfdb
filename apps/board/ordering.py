# apps/board/ordering.py

"""
Ordenação de colunas, tarefas e itens de checklist

Os irmãos de um conjunto (colunas de um board, tarefas de uma coluna,
itens de uma tarefa) são exibidos por (order, created_at, id). Todo
reorder renumera o conjunto inteiro de 0 a n-1.
"""

import logging
from datetime import datetime, timezone as dt_timezone

from django.db import transaction
from django.utils import timezone

from apps.core.models import Task, is_completion_title

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=dt_timezone.utc)


def sort_key(item):
    return (item.order, item.created_at or _EPOCH, item.pk or 0)


def display_order(items):
    return sorted(items, key=sort_key)


def next_order(siblings):
    """Posição de um item anexado ao final: quantidade atual de irmãos"""
    return siblings.count()


def renumber(items):
    """
    Atribui 0..n-1 na sequência dada e grava só os itens que mudaram

    Retorna a lista na ordem final.
    """
    changed = []
    for position, item in enumerate(items):
        if item.order != position:
            item.order = position
            changed.append(item)
    if changed:
        type(changed[0]).objects.bulk_update(changed, ['order'])
    return list(items)


def place(siblings, item, index):
    """
    Coloca `item` na posição `index` entre `siblings` e renumera o conjunto

    `siblings` é o queryset do conjunto de destino; o próprio item é
    excluído dele antes de inserir. O índice é limitado a [0, n].
    O item recebe o novo `order` mas quem chama é responsável por salvá-lo
    (normalmente junto com outros campos).
    """
    others = display_order(siblings.exclude(pk=item.pk))
    index = max(0, min(int(index), len(others)))
    others.insert(index, item)

    to_save = []
    for position, sibling in enumerate(others):
        if sibling is item:
            item.order = position
        elif sibling.order != position:
            sibling.order = position
            to_save.append(sibling)
    if to_save:
        type(item).objects.bulk_update(to_save, ['order'])
    return others


def compact(siblings):
    """Renumera um conjunto que perdeu um item (ex.: origem de um move)"""
    return renumber(display_order(siblings))


def completion_for(title, current=None, now=None):
    """
    Valor de completed_at para uma tarefa em uma coluna com este título

    Mantém o timestamp existente se a tarefa já estava concluída.
    """
    if is_completion_title(title):
        return current or now or timezone.now()
    return None


@transaction.atomic
def move_task(task, column, index):
    """
    Move a tarefa para `column` na posição `index`

    Coluna, posição e completed_at mudam juntos numa transação, e os
    dois conjuntos (origem e destino) saem renumerados.
    Retorna (coluna_origem, irmãos_destino, irmãos_origem).
    """
    source = task.column
    task.column = column
    task.completed_at = completion_for(column.title, current=task.completed_at)

    destination = place(Task.objects.filter(column=column), task, index)
    task.save(update_fields=['column', 'order', 'completed_at', 'updated_at'])

    source_siblings = []
    if source.pk != column.pk:
        source_siblings = compact(Task.objects.filter(column=source))

    logger.info(f"↔️ Tarefa {task.pk} movida de {source.pk} para {column.pk} (posição {task.order})")
    return source, destination, source_siblings


def refresh_completion(column):
    """Recalcula completed_at das tarefas depois que a coluna mudou de título"""
    tasks = Task.objects.filter(column=column)
    if is_completion_title(column.title):
        updated = tasks.filter(completed_at__isnull=True).update(completed_at=timezone.now())
    else:
        updated = tasks.filter(completed_at__isnull=False).update(completed_at=None)
    if updated:
        logger.info(f"✅ completed_at recalculado em {updated} tarefa(s) da coluna {column.pk}")
    return updated
