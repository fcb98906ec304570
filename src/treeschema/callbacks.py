"""Callback contract for validators and transformers.

Validators may be plain callables or objects exposing ``validate(value,
context)``; both are adapted to the single-method ``Check`` interface at the
boundary so the engine never branches on their shape. Callbacks are called
with ``(value, context)`` when they require two positional arguments and with
``(value)`` otherwise, so builtins such as ``int`` work as transformers.
"""

import inspect
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

DEFAULT_REJECTION = "value rejected by validator"


@dataclass(frozen=True)
class Failure:
    """Explicit failure result a validator or transformer may return."""
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class Transformed:
    """Successful transformer result."""
    value: Any


TransformResult = Transformed | Failure


@runtime_checkable
class Check(Protocol):
    """Single-method validation capability."""

    def check(self, value: Any, context: Any) -> str | None:
        """Return an error message, or None when the value passes."""
        ...


class InvalidCallbackError(TypeError):
    """Raised when a validator has neither a call nor a validate method."""


class ValidatorPolicy(str, Enum):
    """How a combined validator reports failures."""
    REPORT_ALL = "report_all"
    FIRST_FAILURE = "first_failure"


def accepts_context(func: Callable[..., Any], *, include_optional: bool = False) -> bool:
    """Check whether a callable should be given ``(value, context)``.

    Only required positional parameters count unless ``include_optional``
    is set, so ``def at_least(value, low=0)`` keeps its default. Classes are
    treated as one-argument converters (``int``, ``Path``).
    """
    if isinstance(func, type):
        return False
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return False

    positional = 0
    for parameter in signature.parameters.values():
        if parameter.kind == parameter.VAR_POSITIONAL:
            return True
        if parameter.kind not in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD):
            continue
        if include_optional or parameter.default is parameter.empty:
            positional += 1
    return positional >= 2


def invoke(func: Callable[..., Any], value: Any, context: Any, *, include_optional: bool = False) -> Any:
    if accepts_context(func, include_optional=include_optional):
        return func(value, context)
    return func(value)


def interpret_result(result: Any) -> str | None:
    """Turn a validator return value into an optional error message.

    ``None``, ``""`` and ``True`` pass; ``False`` is a rejection with a default
    message; anything else is rendered as the error message.
    """
    if result is None or result is True:
        return None
    if result is False:
        return DEFAULT_REJECTION
    if isinstance(result, Failure):
        return result.message or DEFAULT_REJECTION
    message = str(result)
    return message or None


def _describe_exception(exc: Exception) -> str:
    detail = str(exc)
    if detail:
        return f"{type(exc).__name__}: {detail}"
    return type(exc).__name__


class CallableCheck:
    """Adapts a plain callable to the Check interface."""

    def __init__(self, func: Callable[..., Any]):
        self.func = func

    def check(self, value: Any, context: Any) -> str | None:
        try:
            return interpret_result(invoke(self.func, value, context))
        except InvalidCallbackError:
            raise
        except Exception as e:
            logger.debug(f"Validator {self.func!r} raised: {e}")
            return f"validator raised {_describe_exception(e)}"


class MethodCheck:
    """Adapts an object exposing ``validate(value, context)``.

    The method follows the protocol signature, so an optional ``context``
    parameter still receives the context.
    """

    def __init__(self, target: Any):
        self.target = target

    def check(self, value: Any, context: Any) -> str | None:
        try:
            return interpret_result(invoke(self.target.validate, value, context, include_optional=True))
        except InvalidCallbackError:
            raise
        except Exception as e:
            logger.debug(f"Validator {self.target!r} raised: {e}")
            return f"validator raised {_describe_exception(e)}"


def as_check(validator: Any) -> Check:
    """Adapt a validator declared in a schema to the Check interface.

    Raises:
        InvalidCallbackError: If the validator cannot be invoked
    """
    if isinstance(validator, (CallableCheck, MethodCheck)):
        return validator
    validate_method = getattr(validator, "validate", None)
    if callable(validate_method):
        return MethodCheck(validator)
    if callable(validator):
        return CallableCheck(validator)
    raise InvalidCallbackError(
        f"validator must be callable or expose validate(value, context), got {type(validator).__name__}"
    )


def apply_transformer(transformer: Callable[..., Any], value: Any, context: Any) -> TransformResult:
    """Run a transformer and wrap the outcome in an explicit result."""
    try:
        result = invoke(transformer, value, context)
    except Exception as e:
        logger.debug(f"Transformer {transformer!r} raised: {e}")
        return Failure(f"transformer raised {_describe_exception(e)}")

    if isinstance(result, (Failure, Transformed)):
        return result
    return Transformed(result)


class CombinedValidator:
    """Logical AND of several validators, produced when schemas are merged."""

    def __init__(
        self,
        validators: Sequence[Any],
        policy: ValidatorPolicy | str = ValidatorPolicy.REPORT_ALL,
    ):
        flattened: list[Any] = []
        for validator in validators:
            if isinstance(validator, CombinedValidator):
                flattened.extend(validator.validators)
            else:
                flattened.append(validator)
        self.validators = tuple(flattened)
        self.policy = ValidatorPolicy(policy)

    def validate(self, value: Any, context: Any = None) -> str | None:
        """Run every validator; raises InvalidCallbackError before any runs."""
        checks = [as_check(validator) for validator in self.validators]
        messages = []
        for check in checks:
            message = check.check(value, context)
            if message is None:
                continue
            if self.policy == ValidatorPolicy.FIRST_FAILURE:
                return message
            messages.append(message)
        return "; ".join(messages) or None

    def __repr__(self) -> str:
        return f"CombinedValidator({len(self.validators)} validators, policy={self.policy.value})"
