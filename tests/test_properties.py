'''
Property tests for the calculator engine.

Random key sequences must keep the stack size laws, undo must revert any
single press, and any reachable state must survive serialization.
'''

from hypothesis import given
from hypothesis import strategies as st

from rpnpad.layout import BUTTONS, DEFAULT_LAYOUT, ButtonType
from rpnpad.machine import CalculatorEngine

from conftest import with_stack


finite = st.floats(min_value=-1e6, max_value=1e6)
stacks = st.lists(finite, max_size=6)
presses = st.lists(st.sampled_from(list(DEFAULT_LAYOUT.buttons())),
                   max_size=30)

STACK_CHANGING = [
    button
    for button in DEFAULT_LAYOUT.buttons()
    if button.type in {ButtonType.BINARY_OPERATOR,
                       ButtonType.UNARY_OPERATOR,
                       ButtonType.STACK_OPERATOR}
    and button.label != 'Undo'
]


def same(left, right):
    '''
    Value-for-value equality, NaN included.
    '''
    return len(left) == len(right) and all(
        a == b or a != a and b != b
        for a, b in zip(left, right))


@given(values=stacks, button=st.sampled_from(STACK_CHANGING))
def test_undo_reverts_any_press(values, button):
    engine = with_stack(*values)
    engine.dispatch(button)
    engine.dispatch(BUTTONS['Undo'])
    assert same(list(engine.stack), values)


@given(values=st.lists(finite, min_size=2, max_size=6),
       label=st.sampled_from(['+', '-', '*', 'y^x']))
def test_binary_shrinks_by_one(values, label):
    engine = with_stack(*values)
    engine.dispatch(BUTTONS[label])
    assert engine.stack.size() == len(values) - 1


@given(values=st.lists(finite, min_size=1, max_size=6),
       label=st.sampled_from(['sin', 'cos^-1', '1/x', 'ln', 'sqrt',
                              'x^2', 'floor', 'e^x']))
def test_unary_keeps_size(values, label):
    engine = with_stack(*values)
    engine.dispatch(BUTTONS[label])
    assert engine.error_message == ''
    assert engine.stack.size() == len(values)


@given(values=st.lists(finite, min_size=1, max_size=6))
def test_dup_grows_by_one(values):
    engine = with_stack(*values)
    engine.dispatch(BUTTONS['Dup'])
    assert engine.stack.size() == len(values) + 1


@given(values=stacks, keys=presses)
def test_failed_press_changes_nothing(values, keys):
    engine = with_stack(*values)
    for button in keys:
        before = list(engine.stack), engine.input
        engine.dispatch(button)
        if engine.error_message:
            after = list(engine.stack), engine.input
            assert same(after[0], before[0])
            assert after[1] == before[1]


@given(values=stacks, keys=presses)
def test_round_trip(values, keys):
    engine = with_stack(*values)
    for button in keys:
        engine.dispatch(button)
    text = engine.to_json()
    restored = CalculatorEngine()
    restored.from_json(text)
    assert restored.to_json() == text
    assert restored.input == engine.input
    assert restored.error_message == engine.error_message
    assert restored.inverse_mode == engine.inverse_mode
    assert restored.angle_unit is engine.angle_unit
    assert same(list(restored.stack), list(engine.stack))
