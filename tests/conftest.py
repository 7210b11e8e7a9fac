import pytest


class CountingIterable:
    """Re-iterable source that records how many elements were pulled from it."""

    def __init__(self, data):
        self.data = list(data)
        self.pulls = 0
        self.iterations = 0

    def __iter__(self):
        self.iterations += 1
        for item in self.data:
            self.pulls += 1
            yield item


@pytest.fixture
def counting():
    """Factory fixture for call-counting upstream sources."""
    return CountingIterable


@pytest.fixture
def labels():
    """Generator function yielding an index and a label per step."""

    def each():
        yield 0, "foo"
        yield 1, "FOO"
        yield 2, "bar"

    return each
