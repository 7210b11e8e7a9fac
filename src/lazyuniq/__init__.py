"""
lazyuniq: lazy, rewindable uniqueness filtering over sequences

Keep the first element seen for each distinct key, in order, pulling from the
source only as far as the consumer asks.

Key Features:
- Lazy: nothing is pulled from the source before it is requested
- Order preserving: output follows the order of first occurrence
- Rewindable: every pass starts from a clean slate and replays identically
- Multi-value elements: tuples keep their shape, the key gets each position

Quick Start:
    import lazyuniq as lu

    # Basic deduplication
    result = ([0, 1, 0, 1] | lu.Unique()).collect()  # [0, 1]

    # Deduplicate by key
    result = ([0, 1, 2, 3] | lu.Unique(key=lambda x: x % 2 == 0)).collect()  # [0, 1]

    # Pull one element at a time
    seq = range(10**9) | lu.Unique(key=lambda x: x % 3)
    seq.next()  # 0, nothing else pulled yet

    # Multi-value elements
    def labels():
        yield 0, "foo"
        yield 1, "FOO"
        yield 2, "bar"

    seq = lu.from_generator(labels, multi_value=True) | lu.Unique(
        key=lambda _, label: label.lower()
    )
    seq.force()  # [(0, "foo"), (2, "bar")]
"""

from .steps import (
    Unique,
    UniqueSequence,
    unique,
)

from .sequence import (
    GeneratorSequence,
    IterableSequence,
    Sequence,
    as_sequence,
    from_generator,
    from_iterable,
)

from .errors import (
    LazyUniqError,
    NoInputError,
    RewindNotSupportedError,
)

from .base import Pipeline, Step

__all__ = [
    "Unique",
    "UniqueSequence",
    "unique",
    "GeneratorSequence",
    "IterableSequence",
    "Sequence",
    "as_sequence",
    "from_generator",
    "from_iterable",
    "LazyUniqError",
    "NoInputError",
    "RewindNotSupportedError",
    "Pipeline",
    "Step",
]
