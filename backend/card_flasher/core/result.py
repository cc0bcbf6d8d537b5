from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from card_flasher.core.errors import CardFlasherError

T = TypeVar("T")
E = TypeVar("E", bound=CardFlasherError)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    @property
    def is_ok(self) -> bool:
        return False


Result = Union[Ok[T], Err[E]]


def unwrap(result: "Result[T, E]") -> T:
    """Return the value of ``Ok`` or raise the error carried by ``Err``.

    Only the API layer calls this; everything below it passes results along.
    """
    if isinstance(result, Err):
        raise result.error
    return result.value
