"""Tagged outcomes returned by services instead of raising."""

from dataclasses import dataclass

from macro_util.domain.nutrition import Ingredient


@dataclass(frozen=True)
class Invalid:
    """Input failed validation."""

    reason: str
    message: str = ""


@dataclass(frozen=True)
class NotFound:
    """No ingredient, recipe or journal exists under the name."""

    name: str


@dataclass(frozen=True)
class AlreadyExists:
    """A record with the same name is already stored."""

    name: str


@dataclass(frozen=True)
class Resolved:
    """An ingredient was resolved from the store or the lookup."""

    ingredient: Ingredient


@dataclass(frozen=True)
class Candidates:
    """Several lookup results need an external choice."""

    query: str
    options: list[Ingredient]


@dataclass(frozen=True)
class RetrySearch:
    """None of the candidates was chosen; resolve again with a new name."""

    query: str
