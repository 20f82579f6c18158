"""The ``@generator`` decorator that turns a yielding function into a handle factory."""

import functools
import inspect
from typing import Callable, Optional

from .handles import GeneratorHandle
from .protocols import LoggerProtocol


def generator(
    func: Optional[Callable] = None,
    *,
    propagate_failures: Optional[bool] = None,
    logger: Optional[LoggerProtocol] = None,
):
    """
    Mark a function containing ``yield`` as a managed generator body.

    Calling the decorated function runs none of its body; it returns a
    GeneratorHandle over an unstarted state. Bodies may suspend only at
    ``yield``, so coroutine functions and async generators are rejected here,
    before anything runs.

    Can be used bare (``@generator``) or with options
    (``@generator(propagate_failures=False)``).

    Args:
        func: Generator function to wrap
        propagate_failures: Override of GENERATOR_FAILURE_PROPAGATION for
            this body
        logger: Logger passed to every state this body creates

    Returns:
        Factory returning GeneratorHandle instances
    """
    if func is None:
        return functools.partial(
            generator, propagate_failures=propagate_failures, logger=logger
        )

    name = getattr(func, "__qualname__", repr(func))
    if inspect.iscoroutinefunction(func) or inspect.isasyncgenfunction(func):
        raise TypeError(
            f"{name} is asynchronous; generator bodies may only suspend at yield"
        )
    if not inspect.isgeneratorfunction(func):
        raise TypeError(f"{name} is not a generator function: its body never yields")

    @functools.wraps(func)
    def factory(*args, **kwargs) -> GeneratorHandle:
        return GeneratorHandle.adopt(
            func(*args, **kwargs),
            propagate_failures=propagate_failures,
            logger=logger,
        )

    return factory
