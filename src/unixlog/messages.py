"""
Message payloads, message types and message factories.

A facade call carries one payload variant:

- PlainText: a literal string
- FormattedText: a template plus ordered substitution arguments
- Structured: a pre-built Message, or any value logged by its text form
- Deferred: a zero-argument supplier, evaluated only after the enablement check;
  its result is classified together with the call's parameters

The logger's message factory turns the payload into a Message once the call
is known to be enabled. Factories are strategies: they compare equal by type.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple, Union

# =============================================================================
# Payload Variants
# =============================================================================


@dataclass(frozen=True, slots=True)
class PlainText:
    text: str


@dataclass(frozen=True, slots=True)
class FormattedText:
    template: str
    args: Tuple[Any, ...] = ()


@dataclass(frozen=True, slots=True)
class Structured:
    value: Any
    args: Tuple[Any, ...] = ()


@dataclass(frozen=True, slots=True)
class Deferred:
    supplier: Callable[[], Any]
    args: Tuple[Any, ...] = ()


Payload = Union[PlainText, FormattedText, Structured, Deferred]


class Lazy:
    """A substitution argument computed only when the message is rendered."""

    __slots__ = ("_supplier",)

    def __init__(self, supplier: Callable[[], Any]) -> None:
        self._supplier = supplier

    def resolve(self) -> Any:
        return self._supplier()

    def __str__(self) -> str:
        return str(self.resolve())

    def __repr__(self) -> str:
        return f"Lazy({self._supplier!r})"


def lazy(supplier: Callable[[], Any]) -> Lazy:
    return Lazy(supplier)


def _resolve(arg: Any) -> Any:
    return arg.resolve() if isinstance(arg, Lazy) else arg


def _trailing_throwable(params: Sequence[Any]) -> Optional[BaseException]:
    if params and isinstance(params[-1], BaseException):
        return params[-1]
    return None


# =============================================================================
# Messages
# =============================================================================


class Message(ABC):
    """A log message that knows how to render itself."""

    @abstractmethod
    def format(self) -> str:
        """Render the message text."""
        ...

    @property
    def template(self) -> str:
        return self.format()

    @property
    def parameters(self) -> Tuple[Any, ...]:
        return ()

    @property
    def throwable(self) -> Optional[BaseException]:
        return None

    @property
    def fields(self) -> Mapping[str, Any]:
        """Structured key/values bound into the log record."""
        return {}

    def __str__(self) -> str:
        return self.format()


@dataclass(frozen=True)
class SimpleMessage(Message):
    text: str

    def format(self) -> str:
        return self.text


@dataclass(frozen=True)
class ObjectMessage(Message):
    value: Any

    def format(self) -> str:
        return str(self.value)

    @property
    def parameters(self) -> Tuple[Any, ...]:
        return (self.value,)


# Order matters: an escaped backslash wins over an escaped placeholder.
_PLACEHOLDER = re.compile(r"\\\\|\\\{\}|\{\}")


def count_placeholders(template: str) -> int:
    return sum(1 for m in _PLACEHOLDER.finditer(template) if m.group() == "{}")


@dataclass(frozen=True)
class ParameterizedMessage(Message):
    """``{}`` placeholders, substituted left to right.

    ``\\{}`` renders a literal ``{}``; placeholders without an argument stay
    as-is and surplus arguments are ignored. A trailing exception that no
    placeholder consumes becomes the message throwable.
    """

    pattern: str
    args: Tuple[Any, ...] = ()
    _placeholders: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_placeholders", count_placeholders(self.pattern))

    def format(self) -> str:
        remaining = iter(self.args[: self._placeholders])

        def substitute(match: re.Match[str]) -> str:
            token = match.group()
            if token == "\\\\":
                return "\\"
            if token == "\\{}":
                return "{}"
            try:
                return str(_resolve(next(remaining)))
            except StopIteration:
                return token

        return _PLACEHOLDER.sub(substitute, self.pattern)

    @property
    def template(self) -> str:
        return self.pattern

    @property
    def parameters(self) -> Tuple[Any, ...]:
        return self.args

    @property
    def throwable(self) -> Optional[BaseException]:
        if self._placeholders < len(self.args):
            return _trailing_throwable(self.args)
        return None


@dataclass(frozen=True)
class FormattedMessage(Message):
    """``str.format`` templates. A template that fails to format renders verbatim."""

    pattern: str
    args: Tuple[Any, ...] = ()

    def format(self) -> str:
        resolved = [_resolve(a) for a in self.args]
        try:
            return self.pattern.format(*resolved)
        except (IndexError, KeyError, ValueError):
            return self.pattern

    @property
    def template(self) -> str:
        return self.pattern

    @property
    def parameters(self) -> Tuple[Any, ...]:
        return self.args

    @property
    def throwable(self) -> Optional[BaseException]:
        return _trailing_throwable(self.args)


@dataclass(frozen=True)
class PrintfMessage(Message):
    """``%``-style templates. A trailing exception is dropped if the template does not use it."""

    pattern: str
    args: Tuple[Any, ...] = ()

    def format(self) -> str:
        if not self.args:
            return self.pattern
        resolved = tuple(_resolve(a) for a in self.args)
        candidates = [resolved]
        if self.throwable is not None:
            candidates.append(resolved[:-1])
        for args in candidates:
            try:
                return self.pattern % args
            except (TypeError, ValueError, KeyError):
                continue
        return self.pattern

    @property
    def template(self) -> str:
        return self.pattern

    @property
    def parameters(self) -> Tuple[Any, ...]:
        return self.args

    @property
    def throwable(self) -> Optional[BaseException]:
        return _trailing_throwable(self.args)


@dataclass(frozen=True)
class MapMessage(Message):
    """Key/value data rendered as ``key="value"`` pairs and bound as record fields."""

    data: Mapping[str, Any]

    def format(self) -> str:
        return " ".join(f'{k}="{v}"' for k, v in self.data.items())

    @property
    def fields(self) -> Mapping[str, Any]:
        return dict(self.data)


@dataclass(frozen=True)
class ExtraParamsMessage(Message):
    """A message logged together with parameters it has no template for.

    The text is the wrapped message's. A trailing exception becomes the
    throwable; the remaining parameters are bound as the ``params`` field.
    """

    message: Message
    args: Tuple[Any, ...]

    def format(self) -> str:
        return self.message.format()

    @property
    def template(self) -> str:
        return self.message.template

    @property
    def parameters(self) -> Tuple[Any, ...]:
        return self.message.parameters + self.args

    @property
    def throwable(self) -> Optional[BaseException]:
        return self.message.throwable or _trailing_throwable(self.args)

    @property
    def fields(self) -> Mapping[str, Any]:
        args = self.args[:-1] if _trailing_throwable(self.args) is not None else self.args
        data = dict(self.message.fields)
        if args:
            data["params"] = [_resolve(a) for a in args]
        return data


# =============================================================================
# Payload Classification
# =============================================================================


def to_payload(message: Any, params: Sequence[Any] = ()) -> Payload:
    """Classify a facade ``(message, *params)`` pair into a payload variant."""
    if isinstance(message, str):
        if params:
            return FormattedText(message, tuple(params))
        return PlainText(message)
    if callable(message) and not isinstance(message, (type, Message)):
        return Deferred(message, tuple(params))
    return Structured(message, tuple(params))


# =============================================================================
# Message Factories (Strategy Pattern)
# =============================================================================


@dataclass(frozen=True)
class MessageFactory(ABC):
    """Builds Message objects from payloads."""

    @abstractmethod
    def new_template_message(self, template: str, params: Tuple[Any, ...]) -> Message:
        ...

    def new_message(self, template: str, *params: Any) -> Message:
        if not params:
            return SimpleMessage(template)
        return self.new_template_message(template, tuple(params))

    def new_object_message(self, value: Any) -> Message:
        if isinstance(value, Message):
            return value
        if isinstance(value, str):
            return SimpleMessage(value)
        return ObjectMessage(value)

    def build(self, payload: Any) -> Message:
        if isinstance(payload, Message):
            return payload
        if isinstance(payload, PlainText):
            return SimpleMessage(payload.text)
        if isinstance(payload, FormattedText):
            return self.new_message(payload.template, *payload.args)
        if isinstance(payload, Structured):
            message = self.new_object_message(payload.value)
            return ExtraParamsMessage(message, payload.args) if payload.args else message
        if isinstance(payload, Deferred):
            return self.build(to_payload(payload.supplier(), payload.args))
        return self.new_object_message(payload)


@dataclass(frozen=True)
class ParameterizedMessageFactory(MessageFactory):
    def new_template_message(self, template: str, params: Tuple[Any, ...]) -> Message:
        return ParameterizedMessage(template, params)


@dataclass(frozen=True)
class FormattedMessageFactory(MessageFactory):
    def new_template_message(self, template: str, params: Tuple[Any, ...]) -> Message:
        return FormattedMessage(template, params)


@dataclass(frozen=True)
class PrintfMessageFactory(MessageFactory):
    def new_template_message(self, template: str, params: Tuple[Any, ...]) -> Message:
        return PrintfMessage(template, params)


DEFAULT_MESSAGE_FACTORY: MessageFactory = ParameterizedMessageFactory()
