from functools import partial, wraps
import json
import logging
import math
import operator

from .angle import AngleUnit, convert, from_radians, to_radians
from .buffer import InputBuffer
from .layout import (ButtonType, BinaryOp, UnaryOp, StackOp, CONSTANTS,
                     SIGN_TOGGLE, LayoutDefinition)
from .stack import NumberStack
from .record import StateRecord
from .util import (RPNError, Underflow, DivisionByZero, MalformedRecord,
                   UnknownKey, wrap_user_errors)


logger = logging.getLogger(__name__)


# The math module raises where C and IEEE 754 return inf or NaN. The
# calculator shows the IEEE result instead.

def _ieee(f, pole=math.nan):
    '''
    Wrap unary math function f to return inf on overflow, NaN on domain
    errors and ``pole`` for a domain error at zero.
    '''
    @wraps(f)
    def wrapper(a):
        try:
            return float(f(a))
        except OverflowError:
            return math.inf
        except ValueError:
            return pole if a == 0 else math.nan
    return wrapper


def _reciprocal(a):
    if a == 0:
        return math.copysign(math.inf, a)
    return 1 / a


def _floor(a):
    if not math.isfinite(a):
        return a
    return float(math.floor(a))


def _pow(a, b):
    try:
        return math.pow(a, b)
    except OverflowError:
        if a < 0 and b.is_integer() and b % 2:
            return -math.inf
        return math.inf
    except ValueError:
        # 0 to a negative power, or a negative base to a fractional one
        if a != 0:
            return math.nan
        if b.is_integer() and b % 2:
            return math.copysign(math.inf, a)
        return math.inf


class CalculatorEngine:
    '''
    RPN calculator state machine.

    Driven one key press at a time through dispatch(). Whoever renders reads
    stack, input, error_message, inverse_mode and angle_unit between presses.
    '''

    BINARY = {
        BinaryOp.ADD: operator.__add__,
        BinaryOp.SUB: operator.__sub__,
        BinaryOp.MUL: operator.__mul__,
        BinaryOp.DIV: operator.__truediv__,
        BinaryOp.POW: _pow,
    }

    # Trigonometric operators are handled apart, they depend on the angle
    # unit.
    UNARY = {
        UnaryOp.RECIPROCAL: _reciprocal,
        UnaryOp.LOG: _ieee(math.log10, pole=-math.inf),
        UnaryOp.LN: _ieee(math.log, pole=-math.inf),
        UnaryOp.EXP10: partial(_pow, 10.0),
        UnaryOp.EXP: _ieee(math.exp),
        UnaryOp.SQRT: _ieee(math.sqrt),
        UnaryOp.SQUARE: lambda a: a * a,
        UnaryOp.FLOOR: _floor,
    }
    TRIG = {
        UnaryOp.SIN: _ieee(math.sin),
        UnaryOp.COS: _ieee(math.cos),
        UnaryOp.TAN: _ieee(math.tan),
    }
    INVERSE_TRIG = {
        UnaryOp.ASIN: _ieee(math.asin),
        UnaryOp.ACOS: _ieee(math.acos),
        UnaryOp.ATAN: _ieee(math.atan),
    }

    # Keys that do nothing without an operator resolved from their label.
    OPERATOR_TYPES = frozenset({
        ButtonType.DIGIT,
        ButtonType.DIRECT_NUMBER,
        ButtonType.BINARY_OPERATOR,
        ButtonType.UNARY_OPERATOR,
        ButtonType.STACK_OPERATOR,
        ButtonType.ANGLE_UNIT_SELECT,
    })

    def __init__(self, layout=None, history=None):
        '''
        Create an empty calculator.

        :param layout: LayoutDefinition, for display settings.
        :param history: UndoHistory to use, unbounded if not given.
        '''
        self.layout = LayoutDefinition() if layout is None else layout
        self.stack = NumberStack(history=history)
        self.buffer = InputBuffer()
        self.inverse_mode = False
        self.angle_unit = AngleUnit.DEGREE
        self.stored_value = 0.0
        self.error_message = ''
        self._handlers = {
            ButtonType.DIGIT: self._on_digit,
            ButtonType.DIRECT_NUMBER: self._on_direct_number,
            ButtonType.BACKSPACE: self._on_backspace,
            ButtonType.ENTER: self._on_enter,
            ButtonType.STACK_OPERATOR: self._on_stack_operator,
            ButtonType.BINARY_OPERATOR: self._on_binary_operator,
            ButtonType.UNARY_OPERATOR: self._on_unary_operator,
            ButtonType.ANGLE_UNIT_SELECT: self._on_angle_unit,
            ButtonType.INVERSE: self._on_inverse,
        }

    @property
    def input(self):
        return self.buffer.text

    def dispatch(self, button):
        '''
        Apply one key press.

        Never raises for user errors: the message lands in error_message and
        the state is left as it was before the press.
        '''
        self.error_message = ''
        logger.debug('dispatch %s %r', button.type.name, button.label)
        try:
            if button.op is None and button.type in self.OPERATOR_TYPES:
                raise UnknownKey('Unknown key {}'.format(button.label))
            self._handlers[button.type](button.op)
        except RPNError as e:
            logger.debug('%r failed: %s', button.label, e.message)
            self.error_message = e.message

    def commit(self):
        '''
        Push the number being typed, if any.

        Public counterpart of Enter, without the inverse mode behaviour.
        Returns False (and sets error_message) if the input is not a number.
        '''
        self.error_message = ''
        try:
            self.buffer.commit(self.stack)
        except RPNError as e:
            self.error_message = e.message
            return False
        return True

    def _operands(self, n):
        '''
        Fold pending input into the stack and pop n operands, bottom first.

        Everything that can fail is checked before the single snapshot, so a
        failed operator leaves no trace and a successful one undoes in one
        step.
        '''
        pending = self.buffer.parse()
        depth = len(self.stack) + (pending is not None)
        if depth < n:
            raise Underflow()
        self.stack.store_undo()
        if pending is not None:
            self.stack.push(pending)
            self.buffer.clear()
        return list(reversed([self.stack.pop() for _ in range(n)]))

    def _peek_operands(self, n):
        '''
        Return the n operands _operands would pop, without touching anything.
        '''
        values = list(self.stack)
        pending = self.buffer.parse()
        if pending is not None:
            values.append(pending)
        if len(values) < n:
            raise Underflow()
        return values[len(values) - n:]

    def _on_digit(self, digit):
        if digit == SIGN_TOGGLE:
            self._on_plus_minus()
        else:
            self.buffer.append(digit)

    def _on_plus_minus(self):
        if self.buffer:
            self.buffer.toggle_sign()
            return
        self.stack.require(1)
        self.stack.store_undo()
        self.stack.push(-self.stack.pop())

    def _on_direct_number(self, constant):
        self.buffer.append_constant(CONSTANTS[constant])

    def _on_backspace(self, _):
        self.buffer.backspace()

    def _on_enter(self, _):
        # Inverse Enter undoes rather than commits.
        if self.inverse_mode:
            self.stack.undo()
        else:
            self.buffer.commit(self.stack)

    def _on_inverse(self, _):
        self.inverse_mode = not self.inverse_mode

    def _on_stack_operator(self, op):
        stack = self.stack
        if op is StackOp.UNDO:
            stack.undo()
        elif op is StackOp.SWAP:
            stack.require(2)
            stack.store_undo()
            b = stack.pop()
            a = stack.pop()
            stack.push(b)
            stack.push(a)
        elif op is StackOp.DUP:
            stack.require(1)
            stack.store_undo()
            stack.push(stack.peek())
        elif op is StackOp.DROP:
            stack.require(1)
            stack.store_undo()
            stack.pop()
        elif op is StackOp.CLEAR:
            stack.store_undo()
            stack.clear()
        elif op is StackOp.STO:
            if self.buffer:
                self.stored_value, = self._operands(1)
            else:
                # Copies only: nothing to undo.
                self.stored_value = stack.peek()
        elif op is StackOp.RECALL:
            stack.store_undo()
            stack.push(self.stored_value)
        elif op is StackOp.ROLL:
            stack.require(1)
            stack.store_undo()
            stack.rotate_top_to_bottom()
        else:
            raise ValueError('Unknown stack operator {!r}'.format(op))

    def _on_binary_operator(self, op):
        if op is BinaryOp.DIV:
            _, b = self._peek_operands(2)
            if b == 0.0:
                raise DivisionByZero()
        a, b = self._operands(2)
        self.stack.push(self.BINARY[op](a, b))

    def _apply_unary(self, op, a):
        if op in self.TRIG:
            return self.TRIG[op](to_radians(a, self.angle_unit))
        elif op in self.INVERSE_TRIG:
            return from_radians(self.INVERSE_TRIG[op](a), self.angle_unit)
        return self.UNARY[op](a)

    def _on_unary_operator(self, op):
        a, = self._operands(1)
        self.stack.push(self._apply_unary(op, a))

    def _on_angle_unit(self, unit):
        if not self.inverse_mode:
            self.angle_unit = unit
            return
        a, = self._operands(1)
        self.stack.push(convert(a, self.angle_unit, unit))

    # Display

    def format_value(self, value, decimals=None):
        '''
        Render a stack value in general/scientific notation.
        '''
        if decimals is None:
            decimals = self.layout.decimals
        return '%.*G' % (decimals, value)

    def display_lines(self, n=None, decimals=None):
        '''
        Return the top n stack rows, deepest first, as (label, text) pairs.

        Short stacks are padded with empty rows at the top, like the LCD.
        '''
        if n is None:
            n = self.layout.displayed_stack_size
        lines = []
        for i in range(n):
            index = len(self.stack) - n + i
            if index < 0:
                lines.append(('', ''))
            else:
                lines.append(('{}:'.format(n - i),
                              self.format_value(self.stack[index], decimals)))
        return lines

    def status(self):
        '''
        Return the mode indicators: angle unit, and Inv if active.
        '''
        indicators = [self.angle_unit.value]
        if self.inverse_mode:
            indicators.append('Inv')
        return ' '.join(indicators)

    # Serialization

    def serialize(self):
        return {
            'Stack': list(self.stack),
            'Input': self.buffer.text,
            'ErrorMessage': self.error_message,
            'InverseMode': self.inverse_mode,
            'AngleUnit': self.angle_unit.value,
        }

    def deserialize(self, record):
        '''
        Overwrite state from a serialized record.

        Validates everything first: a bad record changes nothing. Undo
        history and the stored value are not part of the record; they are
        reset.
        '''
        state = StateRecord.parse(record)
        self.stack.replace(state.stack)
        self.buffer = InputBuffer(state.input)
        self.error_message = state.error_message
        self.inverse_mode = state.inverse_mode
        self.angle_unit = state.angle_unit
        self.stored_value = 0.0

    def to_json(self):
        return json.dumps(self.serialize())

    @wrap_user_errors('Malformed record', MalformedRecord)
    def from_json(self, text):
        self.deserialize(json.loads(text))

    @classmethod
    def from_record(cls, record, **kwargs):
        engine = cls(**kwargs)
        engine.deserialize(record)
        return engine
