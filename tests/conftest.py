import os

from hypothesis import settings
from pytest import Item, fixture

from rpnpad.layout import BUTTONS
from rpnpad.machine import CalculatorEngine


settings.register_profile('ci', max_examples=200, deadline=None)
settings.register_profile('dev', max_examples=50, deadline=None)
settings.load_profile(os.environ.get('HYPOTHESIS_PROFILE', 'dev'))


def pytest_assertion_pass(item: Item,
                          lineno: int,
                          orig: str,
                          expl: str) -> None:
    '''
    Log every assertion, in case we later need to audit a run.

    Excessive in most cases.

    Use with pytest -rP.
    '''
    print('given', item.name + ':' + str(lineno), str(orig))  # no repr()!)
    print('actual', item.name + ':' + str(lineno),
          '\n'.join(str(expl).splitlines()[:-2]))


def press(engine, *labels):
    '''
    Press keys by label, in order.
    '''
    for label in labels:
        engine.dispatch(BUTTONS[label])


def with_stack(*values):
    '''
    Return an engine whose stack holds values, with no undo history.
    '''
    engine = CalculatorEngine()
    engine.stack.replace(values)
    return engine


@fixture
def engine():
    return CalculatorEngine()
