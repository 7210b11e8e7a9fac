"""Error types raised by lazyuniq sequences and pipelines."""


class LazyUniqError(Exception):
    """Base class for errors raised by lazyuniq itself.

    Exceptions raised by user code (upstream iterables, key functions) are
    never wrapped in this type: they reach the caller of ``next()`` unchanged.
    """


class RewindNotSupportedError(LazyUniqError):
    """Raised when a sequence is asked to rewind but its source cannot restart.

    One-shot iterators (generators, file objects, ``iter(...)`` results) can
    only be traversed once. Rewinding them would silently replay nothing, so
    it is reported instead.
    """

    def __init__(self, sequence_name: str, reason: str):
        """Create a rewind error.

        Args:
            sequence_name: Name of the sequence class that refused to rewind.
            reason: Human-readable description of why the source cannot restart.
        """
        self.sequence_name = sequence_name
        self.reason = reason
        super().__init__(f"{sequence_name} cannot rewind: {reason}")


class NoInputError(LazyUniqError, ValueError):
    """Raised when a pipeline runs without input or receives input twice."""
