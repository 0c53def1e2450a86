'''
Calculator keys.

Data only: which keys exist, how they are laid out, which operator each one
stands for. Every label is resolved to its operator once, when the table is
built here, so the machine never compares label strings.
'''

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Optional, Union

from .angle import AngleUnit


class ButtonType(Enum):
    DIGIT = 'Digit'
    DIRECT_NUMBER = 'DirectNumber'
    BACKSPACE = 'Backspace'
    BINARY_OPERATOR = 'BinaryOperator'
    UNARY_OPERATOR = 'UnaryOperator'
    STACK_OPERATOR = 'StackOperator'
    INVERSE = 'Inverse'
    ANGLE_UNIT_SELECT = 'AngleUnitSelect'
    ENTER = 'Enter'


class BinaryOp(Enum):
    ADD = '+'
    SUB = '-'
    MUL = '*'
    DIV = '/'
    POW = 'y^x'


class UnaryOp(Enum):
    SIN = 'sin'
    COS = 'cos'
    TAN = 'tan'
    ASIN = 'sin^-1'
    ACOS = 'cos^-1'
    ATAN = 'tan^-1'
    RECIPROCAL = '1/x'
    LOG = 'log'
    LN = 'ln'
    EXP10 = '10^x'
    EXP = 'e^x'
    SQRT = 'sqrt'
    SQUARE = 'x^2'
    FLOOR = 'floor'


class StackOp(Enum):
    SWAP = 'Swap'
    DUP = 'Dup'
    DROP = 'Drop'
    CLEAR = 'Clear'
    STO = 'Sto'
    RECALL = 'Recall'
    ROLL = 'Roll'
    UNDO = 'Undo'


class Constant(Enum):
    PI = 'Pi'
    E = 'e'


# What typing a constant key appends to the input.
CONSTANTS = {
    Constant.PI: '3.1415926535897932384626433832795',
    Constant.E: '2.7182818284590452353602874713527',
}

DIGITS = frozenset('0123456789.E')
SIGN_TOGGLE = '+/-'

# Inverse-mode angle keys convert instead of select.
_CONVERT_PREFIX = 'To '


Op = Union[str, BinaryOp, UnaryOp, StackOp, Constant, AngleUnit, None]


def _resolve(label, type_):
    if type_ is ButtonType.DIGIT:
        if label != SIGN_TOGGLE and label not in DIGITS:
            raise ValueError('{!r} is not a digit key'.format(label))
        return label
    elif type_ is ButtonType.DIRECT_NUMBER:
        return Constant(label)
    elif type_ is ButtonType.BINARY_OPERATOR:
        return BinaryOp(label)
    elif type_ is ButtonType.UNARY_OPERATOR:
        return UnaryOp(label)
    elif type_ is ButtonType.STACK_OPERATOR:
        return StackOp(label)
    elif type_ is ButtonType.ANGLE_UNIT_SELECT:
        if label.startswith(_CONVERT_PREFIX):
            label = label[len(_CONVERT_PREFIX):]
        return AngleUnit(label)
    return None


@dataclass(frozen=True)
class CalculatorButton:
    '''
    One key: what it shows and what it does.

    ``op`` is resolved from the label when the button is built. It is None
    for keys that need no operator, and for labels that name none.
    '''
    label: str
    type: ButtonType
    is_double_width: bool = False
    op: Op = field(init=False)

    def __post_init__(self):
        try:
            op = _resolve(self.label, self.type)
        except ValueError:
            op = None
        object.__setattr__(self, 'op', op)


def button(label, type_, is_double_width=False):
    '''
    Build a button for the static layout.

    Raises ValueError for a label its type has no operator for.
    '''
    _resolve(label, type_)
    return CalculatorButton(label, type_, is_double_width)


class ButtonWithInverse(NamedTuple):
    button: CalculatorButton
    inverse: Optional[CalculatorButton] = None

    def current(self, inverse_mode):
        '''
        Return the button the key stands for in the given mode.
        '''
        if inverse_mode and self.inverse is not None:
            return self.inverse
        return self.button


def key(label, type_, inverse_label=None, inverse_type=None):
    double = label == 'Enter'
    primary = button(label, type_, double)
    inverse = None
    if inverse_label:
        inverse = button(inverse_label, inverse_type or type_, double)
    return ButtonWithInverse(primary, inverse)


D = ButtonType.DIGIT
N = ButtonType.DIRECT_NUMBER
B = ButtonType.BINARY_OPERATOR
U = ButtonType.UNARY_OPERATOR
S = ButtonType.STACK_OPERATOR
A = ButtonType.ANGLE_UNIT_SELECT

ROWS = (
    (key('Inv', ButtonType.INVERSE),
     key('Deg', A, 'To Deg'),
     key('Rad', A, 'To Rad'),
     key('Grad', A, 'To Grad')),
    (key('Pi', N, 'e'),
     key('sin', U, 'sin^-1'),
     key('cos', U, 'cos^-1'),
     key('tan', U, 'tan^-1')),
    (key('1/x', U),
     key('log', U, '10^x'),
     key('ln', U),
     key('e^x', U)),
    (key('sqrt', U),
     key('x^2', U),
     key('floor', U),
     key('y^x', B)),
    (key('Sto', S),
     key('Recall', S),
     key('Roll', S),
     key('Undo', S)),
    (key('Swap', S),
     key('Dup', S),
     key('Drop', S),
     key('Clear', S)),
    (key('Enter', ButtonType.ENTER, 'Undo', S),
     key('E', D),
     key('<=', ButtonType.BACKSPACE)),
    (key('7', D), key('8', D), key('9', D), key('/', B)),
    (key('4', D), key('5', D), key('6', D), key('*', B)),
    (key('1', D), key('2', D), key('3', D), key('-', B)),
    (key('0', D), key('.', D), key(SIGN_TOGGLE, D), key('+', B)),
)

del D, N, B, U, S, A


class LayoutDefinition:
    '''
    The keypad and how it is displayed. Immutable; owned by whoever renders.
    '''
    DISPLAYED_STACK_SIZE = 4
    BUTTONS_PER_ROW = 4
    DECIMALS = 12

    def __init__(self, rows=ROWS, displayed_stack_size=None,
                 decimals=None):
        self.rows = tuple(tuple(row) for row in rows)
        self.displayed_stack_size = (type(self).DISPLAYED_STACK_SIZE
                                     if displayed_stack_size is None
                                     else displayed_stack_size)
        self.buttons_per_row = type(self).BUTTONS_PER_ROW
        self.decimals = (type(self).DECIMALS
                         if decimals is None
                         else decimals)

    def keys(self):
        for row in self.rows:
            yield from row

    def buttons(self):
        '''
        Yield every distinct button, primary and inverse.
        '''
        seen = set()
        for key_ in self.keys():
            for button_ in key_:
                if button_ is not None and button_ not in seen:
                    seen.add(button_)
                    yield button_

    def by_label(self):
        '''
        Map every label to its button. Primary buttons win over inverses.
        '''
        labels = {}
        for key_ in self.keys():
            labels.setdefault(key_.button.label, key_.button)
        for key_ in self.keys():
            if key_.inverse is not None:
                labels.setdefault(key_.inverse.label, key_.inverse)
        return labels


DEFAULT_LAYOUT = LayoutDefinition()
BUTTONS = DEFAULT_LAYOUT.by_label()

ENTER = BUTTONS['Enter']
BACKSPACE = BUTTONS['<=']

# Physical keyboard characters and what they press.
KEYMAP = {
    **{digit: BUTTONS[digit] for digit in '0123456789.'},
    'E': BUTTONS['E'],
    '+': BUTTONS['+'],
    '-': BUTTONS['-'],
    '*': BUTTONS['*'],
    '/': BUTTONS['/'],
    '^': BUTTONS['y^x'],
    # Like dc's negative sign
    '_': BUTTONS[SIGN_TOGGLE],
    '\r': ENTER,
    '\n': ENTER,
    '\b': BACKSPACE,
    '\x7f': BACKSPACE,
}


def key_to_button(char):
    '''
    Return the button a keyboard character presses, or None.
    '''
    return KEYMAP.get(char)
