class SqueezeError(Exception):
    """Base class for every error raised by the codec."""


class PreconditionError(SqueezeError, ValueError):
    """The caller passed input the codec does not accept.

    Raised for values outside ``[0, 2**30)``, gamma-coding zero, arrays that
    are not strictly increasing, or bit counts outside the supported range.
    """


class OutOfDataError(SqueezeError, EOFError):
    """A reader was asked for more bits than its input holds."""


class CorruptStreamError(SqueezeError, ValueError):
    """The input holds bits no encoder could have produced."""
