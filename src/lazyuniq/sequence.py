import logging
from abc import ABC
from collections.abc import Iterable, Iterator, Sized
from typing import Any, Callable, Generic, List, Optional, TypeVar

from lazyuniq.errors import RewindNotSupportedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Marker for "nothing peeked yet"; None is a valid element.
_NOTHING = object()


class Sequence(ABC, Generic[T]):
    """Pull-based lazy sequence with rewind support.

    A Sequence produces one element per ``next()`` call and computes nothing
    ahead of the consumer. It moves through two states:

    - active: the end has not been reached yet
    - exhausted: the end was signaled; further ``next()`` calls keep raising
      ``StopIteration`` without touching the source again

    ``rewind()`` brings any sequence back to a fresh active state, provided
    its source can restart.

    Sequences whose source yields several positional values per step carry
    ``multi_value=True``: each element is then a fixed-arity tuple.

    Subclasses implement ``_pull`` (produce the next element or raise
    ``StopIteration``) and ``_reset`` (restart the source).

    Example:
        >>> seq = IterableSequence([1, 2, 3])
        >>> seq.next()
        1
        >>> seq.force()
        [1, 2, 3]
    """

    def __init__(self, multi_value: bool = False):
        """Initialize the iteration state.

        Args:
            multi_value: True if each element is a tuple of positional values
        """
        if not isinstance(multi_value, bool):
            raise TypeError(
                f"multi_value must be a bool, got {type(multi_value).__name__}"
            )

        self._multi_value = multi_value
        self._started = False  # True once something was pulled from the source
        self._exhausted = False  # True once the end has been signaled
        self._peeked: Any = _NOTHING

    @property
    def multi_value(self) -> bool:
        """Whether each element is a tuple of positional values."""
        return self._multi_value

    @property
    def started(self) -> bool:
        """Whether anything was pulled since construction or the last rewind."""
        return self._started

    @property
    def exhausted(self) -> bool:
        """Whether the end of the sequence has been reached."""
        return self._exhausted

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        return self.next()

    def next(self) -> T:
        """Pull the next element.

        Returns:
            The next element of the sequence

        Raises:
            StopIteration: If the sequence is exhausted
        """
        if self._peeked is not _NOTHING:
            element, self._peeked = self._peeked, _NOTHING
            return element

        if self._exhausted:
            raise StopIteration

        self._started = True
        try:
            return self._pull()
        except StopIteration:
            self._exhausted = True
            logger.debug("%s exhausted", type(self).__name__)
            self._cleanup()
            raise

    def peek(self) -> T:
        """Return the next element without consuming it.

        Raises:
            StopIteration: If the sequence is exhausted
        """
        if self._peeked is _NOTHING:
            self._peeked = self.next()
        return self._peeked

    def rewind(self) -> "Sequence[T]":
        """Restart the sequence from its beginning.

        Returns:
            This sequence, ready to be traversed again

        Raises:
            RewindNotSupportedError: If the source cannot restart
        """
        self._reset()

        self._started = False
        self._exhausted = False
        self._peeked = _NOTHING
        logger.debug("%s rewound", type(self).__name__)
        return self

    def size(self) -> Optional[int]:
        """Number of elements if known without traversal, None otherwise."""
        return None

    def force(self) -> List[T]:
        """Materialize the whole sequence into a list.

        A sequence that has already been (partly) traversed is rewound first,
        so forcing twice yields the same list.

        Returns:
            All elements, in order
        """
        if self._started:
            self.rewind()
        return list(self)

    def to_list(self) -> List[T]:
        """Alias of ``force``."""
        return self.force()

    def _pull(self) -> T:
        """Produce the next element from the source.

        Raises:
            StopIteration: When the source has no more elements
            NotImplementedError: Must be implemented by subclasses
        """
        raise NotImplementedError

    def _reset(self):
        """Restart the source so the next ``_pull`` starts from the beginning.

        Raises:
            NotImplementedError: Must be implemented by subclasses
        """
        raise NotImplementedError

    def _cleanup(self):
        """Release state that is no longer needed once the end is reached.

        Subclasses can override this to drop buffers or bookkeeping.
        """
        pass


class IterableSequence(Sequence[T]):
    """Sequence backed by an iterable.

    Re-iterable data (lists, tuples, ranges, any object whose ``__iter__``
    returns a fresh iterator) can be rewound any number of times. One-shot
    iterators can be traversed once; rewinding them after they were started
    raises ``RewindNotSupportedError``.

    Attributes:
        data: The wrapped iterable
    """

    def __init__(self, data: Iterable[T], multi_value: bool = False):
        super().__init__(multi_value)
        if not isinstance(data, Iterable):
            raise TypeError(f"data must be iterable, got {type(data).__name__}")

        self.data = data
        self._iterator: Optional[Iterator[T]] = None

    @property
    def one_shot(self) -> bool:
        """True if the wrapped data is an iterator that cannot restart."""
        return isinstance(self.data, Iterator)

    def _pull(self) -> T:
        if self._iterator is None:
            self._iterator = iter(self.data)
        return next(self._iterator)

    def _reset(self):
        if self.one_shot and self._started:
            raise RewindNotSupportedError(
                type(self).__name__,
                f"{type(self.data).__name__} is a one-shot iterator",
            )
        self._iterator = None

    def size(self) -> Optional[int]:
        if isinstance(self.data, Sized):
            return len(self.data)
        return None


class GeneratorSequence(Sequence[T]):
    """Sequence backed by a factory returning a fresh iterator on each call.

    The factory is usually a generator function. It is first called on the
    first pull and again after each rewind, so custom producers can be
    replayed:

        >>> def labels():
        ...     yield 0, "foo"
        ...     yield 1, "FOO"
        >>> seq = GeneratorSequence(labels, multi_value=True)
        >>> seq.force()
        [(0, 'foo'), (1, 'FOO')]

    Attributes:
        factory: Zero-argument callable returning an iterator
    """

    def __init__(
        self,
        factory: Callable[[], Iterable[T]],
        multi_value: bool = False,
        size: Optional[int] = None,
    ):
        super().__init__(multi_value)
        if not callable(factory):
            raise TypeError(f"factory must be callable, got {type(factory).__name__}")
        if size is not None and (not isinstance(size, int) or size < 0):
            raise ValueError(f"size must be a non-negative int or None, got {size!r}")

        self.factory = factory
        self._size = size
        self._iterator: Optional[Iterator[T]] = None

    def _pull(self) -> T:
        if self._iterator is None:
            self._iterator = iter(self.factory())
        return next(self._iterator)

    def _reset(self):
        close = getattr(self._iterator, "close", None)
        if close is not None:
            close()
        self._iterator = None

    def _cleanup(self):
        self._iterator = None

    def size(self) -> Optional[int]:
        return self._size


def from_iterable(data: Iterable[T], multi_value: bool = False) -> IterableSequence[T]:
    """Wrap an iterable into a lazy sequence."""
    return IterableSequence(data, multi_value=multi_value)


def from_generator(
    factory: Callable[[], Iterable[T]],
    multi_value: bool = False,
    size: Optional[int] = None,
) -> GeneratorSequence[T]:
    """Wrap an iterator factory (typically a generator function) into a lazy sequence.

    Args:
        factory: Zero-argument callable returning a fresh iterator
        multi_value: True if the factory yields tuples of positional values
        size: Known number of elements, if any

    Returns:
        A rewindable GeneratorSequence
    """
    return GeneratorSequence(factory, multi_value=multi_value, size=size)


def as_sequence(data: Any, multi_value: bool = False) -> Sequence[Any]:
    """Convert supported input to a Sequence.

    Sequences are returned unchanged, iterables are wrapped in an
    IterableSequence and callables are treated as iterator factories.

    Raises:
        TypeError: If the input is neither iterable nor callable
    """
    if isinstance(data, Sequence):
        return data
    elif isinstance(data, Iterable):
        return IterableSequence(data, multi_value=multi_value)
    elif callable(data):
        return GeneratorSequence(data, multi_value=multi_value)
    else:
        raise TypeError(
            f"Cannot build a sequence from {type(data).__name__}: "
            "expected a Sequence, an iterable or an iterator factory"
        )
