# apps/board/http.py

"""
Utilitários das views JSON: decorador de erros, corpo da requisição e ator
"""

import json
import logging
import re
from functools import wraps

from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.db import DatabaseError
from django.http import Http404, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from apps.core.models import Member

from .activity import Actor
from .services import ConflictError

logger = logging.getLogger(__name__)

_CAMEL_RE = re.compile(r'(?<!^)(?=[A-Z])')


def to_snake(key):
    return _CAMEL_RE.sub('_', key).lower()


def snake_keys(data):
    return {to_snake(key): value for key, value in data.items()}


def _error_payload(exc):
    if hasattr(exc, 'error_dict'):
        return exc.message_dict
    return {'__all__': exc.messages}


def json_endpoint(view_func):
    """
    Decorador das views da API
    Converte exceções em respostas JSON com o status adequado
    """

    @csrf_exempt
    @wraps(view_func)
    def wrapped_view(request, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)
        except ValidationError as exc:
            return JsonResponse(
                {'message': 'Dados inválidos', 'errors': _error_payload(exc)}, status=400
            )
        except (Http404, ObjectDoesNotExist) as exc:
            return JsonResponse({'message': str(exc) or 'Não encontrado'}, status=404)
        except ConflictError as exc:
            return JsonResponse({'message': str(exc)}, status=409)
        except DatabaseError:
            logger.exception(f"❌ Erro de banco em {request.method} {request.path}")
            return JsonResponse({'message': 'Erro interno ao gravar os dados'}, status=500)

    return wrapped_view


def parse_json_body(request):
    """Corpo JSON como dict com chaves em snake_case"""
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (TypeError, ValueError):
        raise ValidationError("Corpo da requisição não é um JSON válido")
    if not isinstance(data, dict):
        raise ValidationError("O corpo da requisição deve ser um objeto JSON")
    return snake_keys(data)


def query_int(request, name, required=True):
    """Parâmetro inteiro da query string (?boardId=1)"""
    raw = request.GET.get(name)
    if raw in (None, ''):
        if required:
            raise ValidationError({name: ['Parâmetro obrigatório.']})
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError({name: ['Informe um número inteiro.']})


def resolve_actor(request, board_id, payload):
    """
    Identifica quem executa a ação

    Prioridade: `memberId` do payload, membro vinculado ao usuário
    autenticado, nome enviado (`actor` ou `author`) e por fim o usuário.
    """
    member = None
    member_id = payload.get('member_id')
    if member_id:
        member = Member.objects.filter(pk=member_id, board_id=board_id).first()

    user = request.user if getattr(request, 'user', None) and request.user.is_authenticated else None
    if member is None and user is not None and board_id:
        member = Member.objects.filter(board_id=board_id, user=user).first()

    if member is not None:
        return Actor(name=member.name, member=member, user=member.user)

    name = payload.get('actor') or payload.get('author')
    if not name and user is not None:
        name = user.get_full_name() or user.get_username()
    return Actor(name=name or Actor().name, user=user)
