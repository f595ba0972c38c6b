"""
MultiResponse - ordered chains of dependent gateway calls.

Many operations are really two or three processor calls:
- verify  = authorize $1.00 -> void that authorization
- purchase on token gateways = fetch access token -> charge
- capture on some gateways   = look up original -> capture by reference

Each later call needs something the earlier one produced, so the chain stops
the moment a prerequisite fails. A cleanup step (the void in verify) can be
marked ignore_failure: it still runs and is still inspectable, but its failure
does not stop the chain.

Unlike a saga there is no compensation: a failed step simply prevents the
steps after it from starting.

Example:
    run = MultiResponse.new(RunPolicy.USE_FIRST_RESPONSE)
    run.process(lambda: gateway.authorize(100, card))
    run.process(lambda: gateway.void(run.authorization), ignore_failure=True)
    result = run.execute()
    result.success  # outcome of the authorize, even if the void failed
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

import structlog
from pydantic import BaseModel, ConfigDict

from gateway_core.domain.error_codes import StandardErrorCode
from gateway_core.domain.result import Result

logger = structlog.get_logger(__name__)

Operation = Callable[[], Result]


class RunPolicy(Enum):
    """Which executed response speaks for the whole chain."""

    USE_FIRST_RESPONSE = "use_first_response"
    USE_LAST_RESPONSE = "use_last_response"


class EmptyRunError(ValueError):
    """Raised when a run is built or executed without any steps."""


class RunAlreadyExecutedError(RuntimeError):
    """Raised when a run or step is executed a second time."""


class Step:
    """
    One orchestrated unit wrapping a single adapter call.

    The operation is a zero-argument closure. It runs lazily, so it may read
    the running authorization/context of the MultiResponse it belongs to and
    will see the values as of its own execution, not as of construction.
    """

    def __init__(
        self,
        operation: Operation,
        ignore_failure: bool = False,
        name: Optional[str] = None,
    ):
        """
        Initialize step.

        Args:
            operation: Adapter call returning a Result; raises only for
                transport failures
            ignore_failure: Continue the chain even if this step fails
            name: Step name used in logs
        """
        if not callable(operation):
            raise TypeError(f"Step operation must be callable, got {type(operation).__name__}")
        self.operation = operation
        self.ignore_failure = ignore_failure
        self.name = name or getattr(operation, "__name__", "step")
        self.executed: Optional[Result] = None

    @property
    def has_run(self) -> bool:
        return self.executed is not None

    def execute(self) -> Result:
        """
        Run the operation exactly once.

        Returns:
            Result: Outcome of the adapter call

        Raises:
            RunAlreadyExecutedError: If the step already ran
            TypeError: If the operation returned something other than a Result
        """
        if self.executed is not None:
            raise RunAlreadyExecutedError(f"Step {self.name!r} already executed")

        result = self.operation()
        if not isinstance(result, Result):
            raise TypeError(
                f"Step {self.name!r} returned {type(result).__name__}, expected Result"
            )
        self.executed = result
        return result

    def __repr__(self) -> str:
        return f"Step({self.name!r}, ignore_failure={self.ignore_failure})"


class RunResult(BaseModel):
    """
    Outcome of a whole chain.

    primary.success is the overall success; responses holds every executed
    step's Result in order, including ignored failures.
    """

    model_config = ConfigDict(frozen=True)

    primary: Result
    responses: Tuple[Result, ...]
    halted_early: bool = False
    policy: RunPolicy = RunPolicy.USE_LAST_RESPONSE

    @property
    def all(self) -> List[Result]:
        return list(self.responses)

    @property
    def success(self) -> bool:
        return self.primary.success

    @property
    def message(self) -> str:
        return self.primary.message

    @property
    def authorization(self) -> Optional[str]:
        return self.primary.authorization

    @property
    def standard_error_code(self) -> Optional[StandardErrorCode]:
        return self.primary.standard_error_code

    @property
    def test(self) -> bool:
        return self.primary.test

    @property
    def raw(self) -> Mapping[str, Any]:
        return self.primary.raw


class MultiResponse:
    """
    Executes an ordered list of Steps with short-circuit semantics.

    Build with process(), run once with execute(). While the chain runs,
    `authorization` and `last` expose the most recently completed Result and
    `context` is a scratch dict for values such as a session token that an
    early step produces and later steps read.
    """

    def __init__(
        self,
        policy: RunPolicy = RunPolicy.USE_LAST_RESPONSE,
        name: Optional[str] = None,
    ):
        """
        Initialize run.

        Args:
            policy: Which executed response becomes primary
            name: Optional run name for logs
        """
        self.run_id = str(uuid.uuid4())
        self.name = name or "multi_response"
        self.policy = policy
        self.steps: List[Step] = []
        self.responses: List[Result] = []
        self.context: Dict[str, Any] = {}
        self._executed = False

    @classmethod
    def new(cls, policy: RunPolicy = RunPolicy.USE_LAST_RESPONSE, name: Optional[str] = None) -> MultiResponse:
        return cls(policy=policy, name=name)

    def process(
        self,
        operation: Operation,
        ignore_failure: bool = False,
        name: Optional[str] = None,
    ) -> MultiResponse:
        """
        Append a step.

        Args:
            operation: Zero-argument adapter call
            ignore_failure: Keep going if this step fails
            name: Step name for logs (defaults to step_<n>)

        Returns:
            MultiResponse: Self for method chaining
        """
        if self._executed:
            raise RunAlreadyExecutedError("Cannot add steps to a run that already executed")
        step = Step(operation, ignore_failure=ignore_failure, name=name or f"step_{len(self.steps) + 1}")
        self.steps.append(step)
        return self

    def add_step(self, step: Step) -> MultiResponse:
        if self._executed:
            raise RunAlreadyExecutedError("Cannot add steps to a run that already executed")
        self.steps.append(step)
        return self

    @property
    def last(self) -> Optional[Result]:
        """Most recently completed Result, or None before the first step."""
        return self.responses[-1] if self.responses else None

    @property
    def authorization(self) -> Optional[str]:
        """Authorization of the most recently completed step."""
        last = self.last
        return last.authorization if last is not None else None

    def execute(self) -> RunResult:
        """
        Run every step in order until one fails without ignore_failure.

        Returns:
            RunResult: Primary result, all executed results, halt flag

        Raises:
            EmptyRunError: If no steps were added (nothing is executed)
            RunAlreadyExecutedError: If called twice
            Exception: Whatever a step's operation raises (transport
                failures); the chain is aborted immediately
        """
        if not self.steps:
            raise EmptyRunError("A MultiResponse needs at least one step")
        if self._executed:
            raise RunAlreadyExecutedError(f"Run {self.run_id} already executed")
        self._executed = True

        logger.info(
            "multi_response_started",
            run_id=self.run_id,
            name=self.name,
            policy=self.policy.value,
            steps=len(self.steps),
        )

        halted_early = False
        for index, step in enumerate(self.steps):
            try:
                result = step.execute()
            except Exception as e:
                logger.error(
                    "multi_response_step_raised",
                    run_id=self.run_id,
                    step=step.name,
                    error=str(e),
                )
                raise

            self.responses.append(result)

            if result.success:
                logger.info("multi_response_step_succeeded", run_id=self.run_id, step=step.name)
                continue

            if step.ignore_failure:
                logger.info(
                    "multi_response_step_failure_ignored",
                    run_id=self.run_id,
                    step=step.name,
                    message=result.message,
                )
                continue

            remaining = len(self.steps) - index - 1
            halted_early = remaining > 0
            logger.info(
                "multi_response_step_failed",
                run_id=self.run_id,
                step=step.name,
                message=result.message,
                standard_error_code=(
                    result.standard_error_code.value if result.standard_error_code else None
                ),
                skipped_steps=remaining,
            )
            break

        primary = self.responses[0] if self.policy is RunPolicy.USE_FIRST_RESPONSE else self.responses[-1]

        logger.info(
            "multi_response_completed",
            run_id=self.run_id,
            success=primary.success,
            executed=len(self.responses),
            halted_early=halted_early,
        )

        return RunResult(
            primary=primary,
            responses=tuple(self.responses),
            halted_early=halted_early,
            policy=self.policy,
        )


def run(
    policy: RunPolicy,
    steps: Iterable[Step | Operation],
) -> RunResult:
    """
    Execute a prepared list of steps.

    Bare callables are wrapped as non-ignored steps. The list is validated
    before anything executes.

    Raises:
        EmptyRunError: If steps is empty
    """
    prepared = [step if isinstance(step, Step) else Step(step) for step in steps]
    if not prepared:
        raise EmptyRunError("A MultiResponse needs at least one step")

    multi = MultiResponse(policy)
    for step in prepared:
        multi.add_step(step)
    return multi.execute()
