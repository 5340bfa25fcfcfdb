from apps.board.channel_names import (
    board_channel, channels_for, is_task_channel, task_channel,
)


def test_board_and_task_channel_names():
    assert board_channel(42) == '42'
    assert task_channel(7) == 'task:7'
    assert is_task_channel('task:7')
    assert not is_task_channel('42')


def test_channel_names_accept_model_instances(board):
    assert board_channel(board) == str(board.pk)


def test_channels_for_each_entity():
    assert channels_for('task', 1) == ['1']
    assert channels_for('column', 1) == ['1']
    assert channels_for('comment', 1, 9) == ['task:9']
    assert channels_for('checklist', 1, 9) == ['1', 'task:9']
