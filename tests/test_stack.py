'''
Number stack and undo history tests
'''

from rpnpad.stack import NumberStack, UndoHistory
from rpnpad.util import Underflow

from pytest import raises


def test_push_pop_order():
    s = NumberStack()
    s.push(1)
    s.push(2)
    assert s.size() == 2
    assert s.peek() == 2.0
    assert s.pop() == 2.0
    assert s.pop() == 1.0
    assert s.size() == 0


def test_values_are_floats():
    s = NumberStack([1, 2])
    assert all(isinstance(v, float) for v in s)


def test_pop_empty():
    with raises(Underflow, match='Not enough values on the stack'):
        NumberStack().pop()


def test_peek_empty():
    with raises(Underflow):
        NumberStack().peek()


def test_rotate_top_to_bottom():
    s = NumberStack([1, 2, 3])
    s.rotate_top_to_bottom()
    assert list(s) == [3.0, 1.0, 2.0]


def test_rotate_empty():
    with raises(Underflow):
        NumberStack().rotate_top_to_bottom()


def test_undo_without_history_is_noop():
    s = NumberStack([1, 2, 3])
    s.undo()
    assert list(s) == [1.0, 2.0, 3.0]


def test_undo_restores_snapshots_in_reverse():
    s = NumberStack([1])
    s.store_undo()
    s.push(2)
    s.store_undo()
    s.clear()
    s.undo()
    assert list(s) == [1.0, 2.0]
    s.undo()
    assert list(s) == [1.0]
    s.undo()
    assert list(s) == [1.0]


def test_snapshot_is_a_copy():
    s = NumberStack([1])
    s.store_undo()
    s.values[0] = 5.0
    s.undo()
    assert list(s) == [1.0]


def test_replace_forgets_history():
    s = NumberStack([1])
    s.store_undo()
    s.replace([7, 8])
    s.undo()
    assert list(s) == [7.0, 8.0]


def test_capped_history_drops_oldest():
    history = UndoHistory(maxlen=2)
    s = NumberStack(history=history)
    for value in range(4):
        s.store_undo()
        s.push(value)
    assert len(history) == 2
    s.undo()
    s.undo()
    assert list(s) == [0.0, 1.0]
    s.undo()
    assert list(s) == [0.0, 1.0]


def test_history_restore_last_empty():
    assert UndoHistory().restore_last() is None
    assert UndoHistory().maxlen is None
