"""Exception types raised by managed generators."""


class GeneratorError(Exception):
    """Base class for errors raised by the generator machinery itself."""


class GeneratorUsageError(GeneratorError, AssertionError):
    """
    A precondition of the generator API was violated.

    These are programming bugs (reading an empty handle, advancing an
    exhausted iterator), so they are assertion failures rather than
    recoverable runtime conditions.
    """


class GeneratorRunningError(GeneratorUsageError):
    """A generator was resumed or destroyed while its body was executing."""


class GeneratorAdoptionError(GeneratorError, ValueError):
    """A native generator could not be adopted because it already started."""
