from abc import ABC
from typing import Any, Generic, Iterable, Iterator, List, Optional, TypeVar, Union

from lazyuniq.errors import NoInputError
from lazyuniq.sequence import Sequence, as_sequence

# Type variables
T = TypeVar("T")
U = TypeVar("U")
V = TypeVar("V")


class WithPipeline(ABC, Generic[T, U]):
    """Abstract base for objects that can be chained in pipelines.

    WithPipeline defines the interface for objects that support the pipe
    operator (|) for chaining operations together. This includes both
    individual steps and complete pipelines.

    The class supports two chaining patterns:
    1. step | step  -> Pipeline (forward chaining)
    2. data | step  -> Pipeline (data binding)
    """

    def __or__(self, other: "WithPipeline[U, V]") -> "Pipeline[T, V]":
        """Chain this object with another using | operator."""
        return self.then(other)

    def then(self, other: "WithPipeline[U, V]") -> "Pipeline[T, V]":
        """Chain this object with another sequentially.

        Raises:
            NotImplementedError: Must be implemented by subclasses
        """
        raise NotImplementedError

    def __ror__(self, other: Union[Iterable[T], Sequence[T]]) -> "Pipeline[T, U]":
        """Support data | step syntax (reverse pipe operator)."""
        return self.with_input(other)

    def with_input(self, data: Union[Iterable[T], Sequence[T]]) -> "Pipeline[T, U]":
        """Create a pipeline with this object and the given input data.

        Raises:
            NotImplementedError: Must be implemented by subclasses
        """
        raise NotImplementedError


class Step(WithPipeline[T, U]):
    """Base class for individual pipeline steps.

    A Step describes one lazy stage. It holds configuration only; the actual
    stage is a Sequence created by ``apply`` when the pipeline is first pulled.
    Steps can be:
    - Chained together: step1 | step2
    - Applied to data: data | step

    Subclasses must implement ``apply``.
    """

    def apply(self, upstream: Sequence[T]) -> Sequence[U]:
        """Wrap an upstream sequence into this step's stage.

        Implementations must not pull from ``upstream``.

        Args:
            upstream: The sequence feeding this stage

        Returns:
            A lazy sequence producing this step's output

        Raises:
            NotImplementedError: Must be implemented by subclasses
        """
        raise NotImplementedError

    def then(self, other: WithPipeline[U, V]) -> "Pipeline[T, V]":
        """Chain this step with another step or pipeline."""
        if isinstance(other, Pipeline):
            if other.input_data is not None:
                raise NoInputError("Input provided twice")
            return Pipeline([self] + other.steps)
        else:
            return Pipeline([self, other])

    def with_input(
        self, data: Union[Iterable[T], Sequence[T]], multi_value: bool = False
    ) -> "Pipeline[T, U]":
        """Create a pipeline with this step and input data."""
        return Pipeline([self], input_data=data, multi_value=multi_value)


class Pipeline(Step[T, U], Sequence[U]):
    """A chain of lazy stages bound (or not yet bound) to input data.

    A pipeline with input is itself a lazy Sequence: the stage chain is built
    on first use and nothing is pulled from the input until an element is
    requested. Without input it acts as a composite step that can be applied
    to data later or embedded in another pipeline.

    Example:
        >>> pipeline = [0, 1, 0, 1] | Unique()
        >>> pipeline.collect()
        [0, 1]
        >>> pipeline.size() is None
        True

    Attributes:
        steps: List of steps applied in order
        input_data: Optional input data for the pipeline
        input_multi_value: Whether input elements are tuples of positional values
    """

    steps: List[Step[Any, Any]]

    def __init__(
        self,
        steps: List[Step[Any, Any]],
        input_data: Union[Iterable[T], Sequence[T], None] = None,
        multi_value: bool = False,
    ):
        """Initialize a new Pipeline.

        Args:
            steps: List of steps to apply in sequence
            input_data: Optional input data for the pipeline
            multi_value: True if input elements are tuples of positional values
        """
        if not isinstance(steps, list):
            raise TypeError(f"steps must be a list, got {type(steps).__name__}")
        for step in steps:
            if not isinstance(step, Step):
                raise TypeError(f"steps must contain Step objects, got {type(step).__name__}")

        super().__init__(multi_value)
        self.steps = steps
        self.input_data = input_data
        self.input_multi_value = multi_value
        self._output: Optional[Sequence[U]] = None

    def _get_input_sequence(
        self, input_data: Union[Iterable[T], Sequence[T], None]
    ) -> Sequence[T]:
        """Convert input data to a Sequence.

        Raises:
            NoInputError: If no input is provided or input is provided twice
        """
        data_to_process = input_data if input_data is not None else self.input_data

        if data_to_process is None:
            raise NoInputError("No input provided")

        if input_data is not None and self.input_data is not None:
            raise NoInputError("Input provided twice")

        return as_sequence(data_to_process, multi_value=self.input_multi_value)

    def _build(self, input_data: Union[Iterable[T], Sequence[T], None] = None) -> Sequence[U]:
        """Build the stage chain on top of the input sequence.

        An input Sequence that was already traversed is rewound first, so
        every chain starts from the beginning of its input.
        """
        sequence = self._get_input_sequence(input_data)
        if sequence.started:
            sequence.rewind()
        return self.apply(sequence)

    def _output_sequence(self) -> Sequence[U]:
        if self._output is None:
            self._output = self._build()
        return self._output

    def apply(self, upstream: Sequence[T]) -> Sequence[U]:
        """Apply every step of this pipeline on top of ``upstream``."""
        sequence: Sequence[Any] = upstream
        for step in self.steps:
            sequence = step.apply(sequence)
        return sequence

    @property
    def multi_value(self) -> bool:
        if self.input_data is None:
            return self.input_multi_value
        return self._output_sequence().multi_value

    def _pull(self) -> U:
        return self._output_sequence().next()

    def _reset(self):
        if self._output is not None:
            self._output.rewind()

    def size(self) -> Optional[int]:
        """Size reported by the last stage (None when unknown)."""
        return self._output_sequence().size()

    def collect(self, input_data: Union[Iterable[T], Sequence[T], None] = None) -> List[U]:
        """Run the pipeline to completion and return all results.

        Without ``input_data`` this is ``force()`` on the bound input, so
        collecting twice replays from the beginning. With ``input_data`` a
        fresh stage chain is built for that data.

        Raises:
            NoInputError: If no input is provided or input is provided twice
        """
        if input_data is None:
            return self.force()
        return self._build(input_data).force()

    def stream(self, input_data: Union[Iterable[T], Sequence[T], None] = None) -> Iterator[U]:
        """Iterate lazily over a fresh run of the pipeline.

        Without ``input_data`` the bound run is rewound and replayed, so
        streaming after ``collect()`` or streaming twice yields the same
        elements. With ``input_data`` a fresh stage chain is built for that
        data.

        Raises:
            NoInputError: If no input is provided or input is provided twice
        """
        if input_data is None:
            if self.started:
                self.rewind()
            yield from self
        else:
            yield from self._build(input_data)

    def then(self, other: WithPipeline[U, V]) -> "Pipeline[T, V]":
        """Chain this pipeline with another step or pipeline."""
        if isinstance(other, Pipeline):
            if other.input_data is not None:
                raise NoInputError("Input provided twice")
            merged_steps = self.steps + other.steps
        else:
            merged_steps = self.steps + [other]

        return Pipeline(
            merged_steps,
            input_data=self.input_data,
            multi_value=self.input_multi_value,
        )

    def with_input(
        self, data: Union[Iterable[T], Sequence[T]], multi_value: Optional[bool] = None
    ) -> "Pipeline[T, U]":
        """Support data | pipeline syntax."""
        if self.input_data is not None:
            raise NoInputError("Input provided twice")

        if multi_value is None:
            multi_value = self.input_multi_value
        return Pipeline(self.steps, input_data=data, multi_value=multi_value)
