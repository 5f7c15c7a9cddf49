"""Error taxonomy shared by every part of the command engine."""
from __future__ import annotations

from typing import Optional


class CommandKitError(Exception):
    """Base class for all errors raised by command_kit."""


# ---------- command execution ----------
class ExecutionError(CommandKitError):
    """Raised while executing a user command; aborts the whole command."""


class IdNotFound(ExecutionError):
    def __init__(self, id: int) -> None:
        self.id = id
        super().__init__(
            f"model returned id {id}, but no such id exists in the current tree "
            "(likely hallucination)"
        )


class TreeStabilisationTimeout(ExecutionError):
    def __init__(self, timeout_ms: int) -> None:
        self.timeout_ms = timeout_ms
        super().__init__(f"element tree did not stabilise in {timeout_ms}ms")


class NoTreeUpdate(ExecutionError):
    def __init__(self, timeout_ms: int) -> None:
        self.timeout_ms = timeout_ms
        super().__init__(
            f"tree did not update at model-designated waitpoint after {timeout_ms}ms "
            "(either the interface failed or the model misjudged when it would update)"
        )


class ModelError(ExecutionError):
    def __init__(self, source: BaseException) -> None:
        self.source = source
        super().__init__(f"error occurred in model: {source}")


class InterfaceError(ExecutionError):
    def __init__(self, source: BaseException) -> None:
        self.source = source
        super().__init__(f"error occurred in interface: {source}")


class CommandNotFinished(ExecutionError):
    def __init__(self, num_trips: int) -> None:
        self.num_trips = num_trips
        super().__init__(
            f"command not finished after {num_trips} trips "
            "(threshold prevented further requests to model)"
        )


# ---------- action parsing ----------
class ActionParseError(ExecutionError):
    """The model's plan could not be parsed (likely failure to follow the prompt)."""


class MissingId(ActionParseError):
    def __init__(self, ty: str) -> None:
        self.ty = ty
        super().__init__(f"missing id in action of type '{ty}'")


class NonIntegerId(ActionParseError):
    def __init__(self, id: str) -> None:
        self.id = id
        super().__init__(f"found non-integer id '{id}'")


class MissingTextInType(ActionParseError):
    def __init__(self) -> None:
        super().__init__("missing text to type in typing action")


class TextInTypeNotSingleQuoted(ActionParseError):
    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"text in typing action not single-quoted: {text}")


class MissingDescription(ActionParseError):
    def __init__(self) -> None:
        super().__init__("missing description in wait/finish action")


class ActionsAfterFinish(ActionParseError):
    def __init__(self, line: Optional[str] = None) -> None:
        self.line = line
        super().__init__("found actions after finish")


# ---------- tree construction ----------
class TreeReconstitutionTimeout(CommandKitError):
    def __init__(self, iterations: int) -> None:
        self.iterations = iterations
        super().__init__(
            f"failed to reconstitute nested tree structure after {iterations} iterations"
        )
