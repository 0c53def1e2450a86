from collections import deque

from .util import Underflow


class UndoHistory:
    '''
    Snapshots of prior stack contents, most recent last.

    Unbounded by default. With ``maxlen``, the oldest snapshots are dropped.
    '''

    def __init__(self, maxlen=None):
        self._snapshots = deque(maxlen=maxlen)

    def __len__(self):
        return len(self._snapshots)

    def __bool__(self):
        return bool(self._snapshots)

    @property
    def maxlen(self):
        return self._snapshots.maxlen

    def snapshot(self, values):
        self._snapshots.append(list(values))

    def restore_last(self):
        '''
        Pop and return the most recent snapshot, or None if there is none.
        '''
        if not self._snapshots:
            return None
        return self._snapshots.pop()

    def clear(self):
        self._snapshots.clear()


class NumberStack:
    '''
    Stack of floats with undo.

    The top of the stack is the last element. Callers snapshot with
    store_undo() before each logical mutation; undo() reverts one.
    '''

    def __init__(self, values=(), history=None):
        self.values = deque(float(value) for value in values)
        self.history = UndoHistory() if history is None else history

    def __len__(self):
        return len(self.values)

    def __iter__(self):
        return iter(self.values)

    def __getitem__(self, index):
        return self.values[index]

    def __repr__(self):
        return '{}({!r})'.format(type(self).__name__, list(self.values))

    def size(self):
        return len(self.values)

    def require(self, n):
        '''
        Raise Underflow unless at least n elements are on the stack.
        '''
        if len(self.values) < n:
            raise Underflow()

    def push(self, value):
        self.values.append(float(value))

    def pop(self):
        self.require(1)
        return self.values.pop()

    def peek(self):
        self.require(1)
        return self.values[-1]

    def clear(self):
        self.values.clear()

    def rotate_top_to_bottom(self):
        '''
        Move the top element to the bottom of the stack.
        '''
        self.require(1)
        self.values.rotate(1)

    def store_undo(self):
        self.history.snapshot(self.values)

    def undo(self):
        '''
        Restore the last snapshot. No-op without history.
        '''
        previous = self.history.restore_last()
        if previous is not None:
            self.values = deque(previous)

    def replace(self, values):
        '''
        Overwrite contents and forget all history.
        '''
        self.values = deque(float(value) for value in values)
        self.history.clear()
