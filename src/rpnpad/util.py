from functools import wraps
import logging


LOG_FORMAT = '[%(asctime)s] %(name)s %(levelname)s: %(message)s'


class RPNError(Exception):
    '''
    Base of all errors the calculator recovers from.

    args[0] is the message shown to the user.
    '''
    MESSAGE = 'Error'

    def __init__(self, message=None, *args):
        super().__init__(message or type(self).MESSAGE, *args)

    @property
    def message(self):
        return self.args[0]


class Underflow(RPNError):
    MESSAGE = 'Not enough values on the stack'


class InvalidNumber(RPNError):
    MESSAGE = 'Invalid number'


class NumberOutOfRange(RPNError):
    MESSAGE = 'Out of range'


class DivisionByZero(RPNError):
    MESSAGE = 'Division by zero'


class MalformedRecord(RPNError):
    MESSAGE = 'Malformed record'


class UnknownKey(RPNError):
    MESSAGE = 'Unknown key'


def wrap_user_errors(fmt, error=RPNError):
    '''
    Decorator converting stray exceptions into RPNErrors.

    Passes through RPNErrors. Others are re-raised as ``error``, with ``fmt``
    formatted against the wrapped call's arguments as message.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except RPNError:
                raise
            except Exception as e:
                raise error(fmt.format(*args, **kwargs), e) from e
        return wrapper
    return decorator


def configure_logging(verbose=False):
    '''
    Set up root logging for command line use.
    '''
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format=LOG_FORMAT)
