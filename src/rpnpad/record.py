'''
Schema of the persisted calculator state.
'''

from typing import List, Union

from pydantic import (BaseModel, ConfigDict, Field, StrictBool, StrictFloat,
                      StrictInt, StrictStr, ValidationError)

from .angle import AngleUnit
from .util import MalformedRecord


class StateRecord(BaseModel):
    '''
    What survives a restart: stack, input, error and modes.

    Undo history and the stored value are not part of it.
    '''
    model_config = ConfigDict(populate_by_name=True, extra='ignore',
                              frozen=True)

    # Strict, so true is not a number and 5 is not a string. inf and NaN
    # are allowed.
    stack: List[Union[StrictInt, StrictFloat]] = Field(alias='Stack')
    input: StrictStr = Field(alias='Input')
    error_message: StrictStr = Field(alias='ErrorMessage')
    inverse_mode: StrictBool = Field(alias='InverseMode')
    angle_unit: AngleUnit = Field(alias='AngleUnit')

    @classmethod
    def parse(cls, record):
        '''
        Validate a record, raising MalformedRecord on any problem.
        '''
        try:
            return cls.model_validate(record)
        except ValidationError as e:
            raise MalformedRecord('; '.join(
                '{}: {}'.format('.'.join(map(str, error['loc'])) or 'record',
                                error['msg'])
                for error in e.errors())) from None
