import logging
import warnings
from typing import Any, Callable, List, Optional, Set

from lazyuniq.base import Step, T
from lazyuniq.sequence import Sequence

logger = logging.getLogger(__name__)


class UniqueSequence(Sequence[T]):
    """Lazy stage that yields the first element seen for each distinct key.

    Elements are pulled from the upstream one at a time, only when the
    consumer asks for the next one. Each element's key is computed with the
    optional key function (the element itself otherwise); an element is
    emitted only if its key has not been seen during the current pass.

    When the upstream is multi-value, each element is a tuple of positional
    values: the key function receives them spread as positional arguments,
    and kept elements are emitted as the full original tuple.

    The stage keeps efficient set-based tracking for hashable keys and falls
    back to list-based tracking for unhashable keys (like lists or dicts).

    The output size cannot be known without a full traversal, so ``size()``
    always returns None. ``rewind()`` forgets every seen key and rewinds the
    upstream, so each pass yields the same output.

    Errors raised by the upstream or by the key function propagate unchanged
    and leave no trace in the seen keys.
    """

    seen: Set[Any]
    seen_unhashable: List[Any]

    def __init__(
        self,
        upstream: Sequence[T],
        key: Callable[..., Any] | None = None,
        max_unhashable_items: int = 10000,
    ):
        """Initialize the unique stage.

        Args:
            upstream: Sequence to read elements from
            key: Optional function to extract the comparison key from each element
            max_unhashable_items: Number of unhashable keys tracked before warning
        """
        if not isinstance(upstream, Sequence):
            raise TypeError(
                f"upstream must be a Sequence, got {type(upstream).__name__}"
            )

        super().__init__(multi_value=upstream.multi_value)
        self.upstream = upstream
        self.key = key
        self.max_unhashable_items = max_unhashable_items
        self.seen = set()
        self.seen_unhashable = []

    def _key_for(self, element: T) -> Any:
        if self.key is None:
            return element
        if self.multi_value:
            return self.key(*element)
        return self.key(element)

    def _pull(self) -> T:
        while True:
            element = self.upstream.next()
            try:
                key = self._key_for(element)
            except StopIteration as e:
                # Only the upstream may signal the end of this stage
                raise RuntimeError("key function raised StopIteration") from e
            if self._remember(key):
                return element

    def _remember(self, key: Any) -> bool:
        """Record ``key`` as seen; return False if it was already there."""
        try:
            # Try to use set for hashable keys (faster)
            if key in self.seen:
                return False
            self.seen.add(key)
            return True
        except TypeError:
            return self._remember_unhashable(key)

    def _remember_unhashable(self, key: Any) -> bool:
        if not self.seen_unhashable:
            logger.debug(
                "%s falling back to list lookup for unhashable %s keys",
                type(self).__name__,
                type(key).__name__,
            )

        if len(self.seen_unhashable) == self.max_unhashable_items:
            warnings.warn(
                "Unique stage reached max unhashable items limit. Consider using "
                "a key function returning hashable values to avoid performance degradation."
            )

        if key in self.seen_unhashable:
            return False
        self.seen_unhashable.append(key)
        return True

    def _reset(self):
        self.upstream.rewind()
        self.seen.clear()
        self.seen_unhashable.clear()

    def _cleanup(self):
        """Release memory by clearing tracking structures."""
        self.seen.clear()
        self.seen_unhashable.clear()

    def size(self) -> Optional[int]:
        return None


class Unique(Step[T, T]):
    """Pipeline step that removes duplicate elements from a sequence.

    The Unique step keeps only the first occurrence of each unique element,
    preserving order. Uniqueness is determined by equality of the elements
    themselves, or of the keys returned by an optional key function.

    Example:
        >>> ([0, 1, 0, 1] | Unique()).collect()
        [0, 1]

        >>> # First element of each parity
        >>> ([0, 1, 2, 3] | Unique(key=lambda x: x % 2 == 0)).collect()
        [0, 1]

        >>> # Multi-value elements: the key receives each position
        >>> def labels():
        ...     yield 0, "foo"
        ...     yield 1, "FOO"
        ...     yield 2, "bar"
        >>> seq = from_generator(labels, multi_value=True)
        >>> (seq | Unique(key=lambda _, label: label.lower())).collect()
        [(0, 'foo'), (2, 'bar')]

    Performance:
        - O(1) average case for hashable keys (using set)
        - O(n) worst case for unhashable keys (using list)
        - Memory usage grows with number of unique keys
    """

    def __init__(
        self, key: Callable[..., Any] | None = None, max_unhashable_items: int = 10000
    ):
        """Initialize the Unique step.

        Args:
            key: Optional function to extract the comparison key from each element
            max_unhashable_items: Number of unhashable keys tracked before warning
        """
        if key is not None and not callable(key):
            raise TypeError(f"key must be callable, got {type(key).__name__}")
        if not isinstance(max_unhashable_items, int) or max_unhashable_items < 0:
            raise ValueError(
                f"max_unhashable_items must be a non-negative int, got {max_unhashable_items!r}"
            )

        self.key = key
        self.max_unhashable_items = max_unhashable_items

    def apply(self, upstream: Sequence[T]) -> UniqueSequence[T]:
        """Wrap ``upstream`` into a unique stage."""
        return UniqueSequence(upstream, self.key, self.max_unhashable_items)


def unique(
    key: Callable[..., Any] | None = None, max_unhashable_items: int = 10000
) -> Unique[T]:
    """Create a step that removes duplicate elements from a sequence.

    Args:
        key: Optional function to extract the comparison key from each element.
             If None, elements are compared directly for equality.
        max_unhashable_items: Maximum number of unhashable keys to track
                             before issuing a performance warning.

    Returns:
        A Unique step that can be used in pipelines

    Examples:
        >>> # Case-insensitive string deduplication
        >>> words = ["Hello", "world", "HELLO", "World"]
        >>> (words | unique(key=str.lower)).collect()
        ['Hello', 'world']
    """
    return Unique(key, max_unhashable_items)
