from functools import reduce
import math
import operator

import regex

from .util import InvalidNumber, NumberOutOfRange


class InputBuffer:
    '''
    Text of the number being typed, one key at a time.
    '''
    DECIMAL_POINT = '.'
    EXPONENT = 'E'
    MINUS = '-'

    # What a committable buffer looks like.
    NUMBER = r'''
              -?
              (?:
                  # 1, 12, 1. (notice trailing dot), 1.3
                  \d+
                  (?:
                      \.
                      \d*
                  )?
              |
                  # .2
                  \.
                  \d+
              )
              (?:
                  # 1E3, 1E-3
                  E
                  [-+]?
                  \d+
              )?
              '''
    FLAGS = reduce(operator.__or__,
                   {regex.VERSION1,
                    regex.VERBOSE},
                   0)

    def __init__(self, text=''):
        self.text = text

    def __str__(self):
        return self.text

    def __repr__(self):
        return '{}({!r})'.format(type(self).__name__, self.text)

    def __bool__(self):
        return bool(self.text)

    def append(self, char):
        '''
        Append a typed character. A second decimal point is ignored.
        '''
        if char == self.DECIMAL_POINT and self.DECIMAL_POINT in self.text:
            return
        self.text += char

    def append_constant(self, digits):
        '''
        Append a constant's digits as typed.

        No decimal point check: a constant typed after digits makes the
        buffer invalid, and the commit says so.
        '''
        self.text += digits

    def toggle_sign(self):
        '''
        Add or remove the leading minus sign of a non-empty buffer.
        '''
        if not self.text:
            return
        if self.text.startswith(self.MINUS):
            self.text = self.text[1:]
        else:
            self.text = self.MINUS + self.text

    def backspace(self):
        self.text = self.text[:-1]

    def clear(self):
        self.text = ''

    def parse(self):
        '''
        Return the buffer's value, or None if the buffer is empty.

        Does not touch the buffer.
        '''
        if not self.text:
            return None
        if regex.fullmatch(type(self).NUMBER, self.text,
                           flags=type(self).FLAGS) is None:
            raise InvalidNumber()
        value = float(self.text)
        if math.isinf(value):
            raise NumberOutOfRange()
        return value

    def commit(self, stack):
        '''
        Push the buffer's value onto stack, snapshotting it first.

        Returns True if a value was pushed. An empty buffer is a successful
        no-op; a bad one raises and stays as it was.
        '''
        value = self.parse()
        if value is None:
            return False
        stack.store_undo()
        stack.push(value)
        self.clear()
        return True
