from typing import Callable, Any
from functools import reduce

from .ftypes import Either


def either_pipe(value: Either, *steps: Callable[[Any], Either]) -> Either:
    """Railway pipeline: pipe a value through Either-returning steps.

    The first Left short-circuits the remaining steps.
    """
    return reduce(lambda acc, step: acc.bind(step), steps, value)
