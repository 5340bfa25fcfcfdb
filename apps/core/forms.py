# apps/core/forms.py

"""
Formulários de validação dos payloads JSON da API

Os nomes dos campos seguem os models (snake_case); a view converte as
chaves camelCase do corpo antes de validar. Em atualizações só os campos
presentes no payload são aplicados (ver PayloadForm.changes).
"""

from django import forms
from django.core.exceptions import ValidationError

from .models import Board, Member, Task


class IdListField(forms.Field):
    """Lista de ids inteiros vinda do JSON"""

    default_error_messages = {
        'invalid': 'Informe uma lista de ids.',
    }

    def to_python(self, value):
        if value in self.empty_values:
            return []
        if not isinstance(value, (list, tuple)):
            raise ValidationError(self.error_messages['invalid'], code='invalid')
        try:
            return [int(item) for item in value]
        except (TypeError, ValueError):
            raise ValidationError(self.error_messages['invalid'], code='invalid')


class PayloadForm(forms.Form):
    """
    Base dos formulários de payload

    Na criação os campos listados em `required_on_create` são
    obrigatórios; na atualização tudo é opcional.
    """

    required_on_create = ()

    def __init__(self, data, creating=False, **kwargs):
        super().__init__(data, **kwargs)
        self.creating = creating
        for name, field in self.fields.items():
            field.required = creating and name in self.required_on_create

    def changes(self):
        """Valores limpos apenas dos campos que vieram no payload"""
        return {
            name: value
            for name, value in self.cleaned_data.items()
            if name in self.data
        }

    def validated(self):
        """Valida e devolve as mudanças; levanta ValidationError se inválido"""
        if not self.is_valid():
            raise ValidationError(self.errors)
        return self.changes()


class BoardForm(PayloadForm):
    required_on_create = ('name',)

    name = forms.CharField(max_length=200)
    description = forms.CharField()
    color = forms.CharField(max_length=32)
    visibility = forms.ChoiceField(choices=Board.VISIBILITY_CHOICES)
    default_columns = forms.NullBooleanField()

    def clean_name(self):
        name = self.cleaned_data.get('name', '').strip()
        if 'name' in self.data and not name:
            raise ValidationError("O nome do board não pode ficar vazio")
        return name


class ColumnForm(PayloadForm):
    required_on_create = ('board_id', 'title')

    board_id = forms.IntegerField(min_value=1)
    title = forms.CharField(max_length=100)
    color = forms.CharField(max_length=32)
    order = forms.IntegerField(min_value=0)

    def clean_title(self):
        title = self.cleaned_data.get('title', '').strip()
        if 'title' in self.data and not title:
            raise ValidationError("O título da coluna não pode ficar vazio")
        return title


class TaskForm(PayloadForm):
    required_on_create = ('column_id', 'title')

    column_id = forms.IntegerField(min_value=1)
    title = forms.CharField(max_length=200)
    description = forms.CharField()
    tag = forms.CharField(max_length=50)
    tag_color = forms.CharField(max_length=32)
    priority = forms.ChoiceField(choices=Task.PRIORITY_CHOICES)
    order = forms.IntegerField(min_value=0)
    due_date = forms.DateTimeField()
    start_date = forms.DateTimeField()
    end_date = forms.DateTimeField()
    is_archived = forms.BooleanField()
    assignee_ids = IdListField()
    label_ids = IdListField()

    def clean_title(self):
        title = self.cleaned_data.get('title', '').strip()
        if 'title' in self.data and not title:
            raise ValidationError("O título da tarefa não pode ficar vazio")
        return title

    def clean(self):
        cleaned_data = super().clean()
        start = cleaned_data.get('start_date')
        end = cleaned_data.get('end_date')
        if start and end and end < start:
            raise ValidationError({'end_date': "A data final deve ser posterior à inicial"})
        return cleaned_data


class MoveTaskForm(PayloadForm):
    required_on_create = ('column_id',)

    column_id = forms.IntegerField(min_value=1)
    order = forms.IntegerField(min_value=0)


class CommentForm(PayloadForm):
    required_on_create = ('task_id', 'content')

    task_id = forms.IntegerField(min_value=1)
    content = forms.CharField()
    author = forms.CharField(max_length=200)
    member_id = forms.IntegerField(min_value=1)

    def clean_content(self):
        content = self.cleaned_data.get('content', '').strip()
        if 'content' in self.data and not content:
            raise ValidationError("O comentário não pode ficar vazio")
        return content


class ChecklistItemForm(PayloadForm):
    required_on_create = ('task_id', 'text')

    task_id = forms.IntegerField(min_value=1)
    text = forms.CharField(max_length=500)
    is_checked = forms.BooleanField()
    order = forms.IntegerField(min_value=0)


class LabelForm(PayloadForm):
    required_on_create = ('board_id', 'name', 'color')

    board_id = forms.IntegerField(min_value=1)
    name = forms.CharField(max_length=100)
    color = forms.CharField(max_length=32)
    bg_color = forms.CharField(max_length=64)
    text_color = forms.CharField(max_length=64)


class MemberForm(PayloadForm):
    required_on_create = ('board_id',)

    board_id = forms.IntegerField(min_value=1)
    name = forms.CharField(max_length=200)
    email = forms.EmailField()
    role = forms.ChoiceField(choices=Member.ROLE_CHOICES)
    avatar = forms.CharField(max_length=500)
    color = forms.CharField(max_length=32)

    def clean(self):
        cleaned_data = super().clean()
        if self.creating and not (cleaned_data.get('name') or cleaned_data.get('email')):
            raise ValidationError("Informe o nome ou o email do membro")
        return cleaned_data


class ActivityForm(PayloadForm):
    required_on_create = ('board_id', 'user', 'action', 'target')

    board_id = forms.IntegerField(min_value=1)
    user = forms.CharField(max_length=200)
    action = forms.CharField(max_length=200)
    target = forms.CharField(max_length=300)
    project_id = forms.CharField(max_length=64)
    task_id = forms.IntegerField(min_value=1)


class NotificationForm(PayloadForm):
    is_read = forms.BooleanField()
