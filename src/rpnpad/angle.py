'''
Angle units and conversions for the trigonometric operators.
'''

from enum import Enum
import math


class AngleUnit(Enum):
    '''
    Angle unit, valued by its persisted tag.
    '''
    DEGREE = 'Deg'
    RADIAN = 'Rad'
    GRADIAN = 'Grad'


def to_radians(value, unit):
    if unit is AngleUnit.DEGREE:
        return value * math.pi / 180
    elif unit is AngleUnit.GRADIAN:
        return value * math.pi / 200
    return value


def from_radians(value, unit):
    if unit is AngleUnit.DEGREE:
        return value * 180 / math.pi
    elif unit is AngleUnit.GRADIAN:
        return value * 200 / math.pi
    return value


def convert(value, source, target):
    '''
    Convert an angle in ``source`` units to ``target`` units.
    '''
    if source is target:
        return value
    return from_radians(to_radians(value, source), target)
