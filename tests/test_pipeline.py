import pytest

import lazyuniq as lu


def test_chained_operations():
    """Test: [1, -1, 1, 2, -2] | lu.Unique() | lu.Unique(key=abs)"""
    pipeline = [1, -1, 1, 2, -2] | lu.Unique() | lu.Unique(key=abs)
    assert pipeline.collect() == [1, 2]


def test_pipeline_as_step():
    """Test using a pipeline as a step in another pipeline"""
    by_abs = lu.Unique() | lu.Unique(key=abs)
    pipeline = [3, -3, 4] | by_abs
    assert isinstance(pipeline, lu.Pipeline)
    assert pipeline.collect() == [3, 4]


def test_steps_are_merged():
    """Test that chaining pipelines concatenates their steps"""
    first = lu.Unique() | lu.Unique(key=abs)
    second = lu.Unique(key=lambda x: x > 0) | lu.Unique()
    merged = first | second
    assert len(merged.steps) == 4
    assert merged.collect([1, -1, 2, -3]) == [1, -3]


def test_collect_with_input_data():
    """Test passing input to collect() on an unbound pipeline"""
    pipeline = lu.Pipeline([lu.Unique()])
    assert pipeline.collect([0, 1, 0, 1]) == [0, 1]
    assert pipeline.collect([2, 2]) == [2]


def test_stream_method():
    """Test that stream yields results lazily"""
    pipeline = range(6) | lu.Unique(key=lambda x: x // 2)
    results = []
    for item in pipeline.stream():
        results.append(item)
    assert results == [0, 2, 4]


def test_stream_with_input_data():
    """Test stream on an unbound pipeline"""
    pipeline = lu.Unique() | lu.Unique()
    assert list(pipeline.stream("abca")) == ["a", "b", "c"]


def test_iteration_protocol():
    """Test that pipelines work with for loops"""
    pipeline = [1, 1, 2] | lu.Unique()
    assert [item for item in pipeline] == [1, 2]


def test_pipeline_without_steps():
    """Test that an empty pipeline passes its input through"""
    pipeline = lu.Pipeline([], input_data=[1, 1, 2])
    assert pipeline.size() == 3
    assert pipeline.collect() == [1, 1, 2]


def test_generator_function_as_input():
    """Test piping a generator function into a step"""

    def numbers():
        yield from [3, 3, 1]

    pipeline = numbers | lu.Unique()
    assert pipeline.force() == [3, 1]
    assert pipeline.force() == [3, 1]


def test_multi_value_input_via_with_input(labels):
    """Test declaring multi-value input when binding data"""
    step = lu.Unique(key=lambda _, label: label.lower())
    pipeline = step.with_input(lu.from_generator(labels), multi_value=True)
    # a Sequence input keeps its own multi_value flag
    assert not pipeline.multi_value

    pipeline = step.with_input(list(labels()), multi_value=True)
    assert pipeline.multi_value
    assert pipeline.collect() == [(0, "foo"), (2, "bar")]


def test_rebinding_bound_pipeline_fails():
    """Test that data | bound pipeline is rejected"""
    bound = [1] | lu.Unique()
    with pytest.raises(lu.NoInputError):
        [2] | bound


def test_chaining_bound_pipeline_fails():
    """Test that a bound pipeline cannot be appended to another one"""
    with pytest.raises(lu.NoInputError):
        ([1] | lu.Unique()) | ([2] | lu.Unique())


def test_step_requires_apply():
    """Test that custom steps must implement apply"""

    class Incomplete(lu.Step):
        pass

    with pytest.raises(NotImplementedError):
        ([1] | Incomplete()).collect()


def test_step_then_bound_pipeline_fails():
    """Test that a step cannot be chained with a pipeline that has input"""
    with pytest.raises(lu.NoInputError, match="Input provided twice"):
        lu.Unique() | ([2] | lu.Unique())


class TestSequenceInput:
    """Pipelines whose input is already a Sequence replay it on each run."""

    def test_stream_after_collect(self, labels):
        seq = lu.from_generator(labels, multi_value=True)
        pipeline = seq | lu.Unique(key=lambda _, label: label.lower())
        assert pipeline.collect() == [(0, "foo"), (2, "bar")]
        assert list(pipeline.stream()) == [(0, "foo"), (2, "bar")]

    def test_stream_twice(self):
        pipeline = lu.from_iterable([0, 1, 0, 1]) | lu.Unique()
        assert list(pipeline.stream()) == [0, 1]
        assert list(pipeline.stream()) == [0, 1]

    def test_collect_after_stream(self):
        pipeline = lu.from_iterable([0, 1, 0, 1]) | lu.Unique()
        assert list(pipeline.stream()) == [0, 1]
        assert pipeline.collect() == [0, 1]

    def test_stream_after_partial_next(self):
        pipeline = lu.from_iterable([3, 3, 4]) | lu.Unique()
        assert pipeline.next() == 3
        assert list(pipeline.stream()) == [3, 4]

    def test_collect_with_sequence_input_twice(self, labels):
        seq = lu.from_generator(labels, multi_value=True)
        pipeline = lu.Pipeline([lu.Unique(key=lambda _, label: label.lower())])
        assert pipeline.collect(seq) == [(0, "foo"), (2, "bar")]
        assert pipeline.collect(seq) == [(0, "foo"), (2, "bar")]

    def test_stream_with_sequence_input_twice(self):
        seq = lu.from_iterable("abca")
        pipeline = lu.Unique() | lu.Unique()
        assert list(pipeline.stream(seq)) == ["a", "b", "c"]
        assert list(pipeline.stream(seq)) == ["a", "b", "c"]

    def test_already_consumed_input_is_rewound(self):
        seq = lu.from_iterable([5, 5, 6])
        assert seq.force() == [5, 5, 6]
        assert seq.exhausted

        pipeline = seq | lu.Unique()
        assert pipeline.collect() == [5, 6]
