'''
RPN keypad calculator.

A pocket RPN calculator as a state machine: it is fed one key press at a
time and keeps a stack of numbers, the number being typed, an angle unit, an
inverse mode and a memory register. Every stack change can be undone, and
the state round-trips through a small JSON record so it can survive
restarts.

Drawing the keys is someone else's job. The layout module says which keys
exist; the command line interface types them from text, for use in a
terminal.
'''

# TODO: Persist the memory register and the undo history. Restoring a
#       session resets both.

from .angle import AngleUnit
from .cli import CLI
from .layout import ButtonType, CalculatorButton, ButtonWithInverse, \
    LayoutDefinition, key_to_button
from .lexer import Lexer
from .machine import CalculatorEngine
from .stack import NumberStack, UndoHistory
from .util import RPNError, Underflow, InvalidNumber, NumberOutOfRange, \
    DivisionByZero, MalformedRecord, UnknownKey


__all__ = ('CalculatorEngine', 'NumberStack', 'UndoHistory', 'AngleUnit',
           'ButtonType', 'CalculatorButton', 'ButtonWithInverse',
           'LayoutDefinition', 'key_to_button', 'Lexer', 'CLI',
           'RPNError', 'Underflow', 'InvalidNumber', 'NumberOutOfRange',
           'DivisionByZero', 'MalformedRecord', 'UnknownKey')
