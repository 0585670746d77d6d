"""HTTP verb canonicalization.

Turns the verbs a function declared into the sorted, duplicate-free set
the builder registers, and records whether any of them can carry a body.
"""

from collections.abc import Sequence
from dataclasses import dataclass

WILDCARD = "all"

# Verbs accepted by the verb decorators and the router
VALID_VERBS = frozenset({"all", "get", "post", "put", "delete", "patch", "options", "head"})

# Verbs whose requests may carry a payload requiring a parser
BODY_VERBS = frozenset({"all", "delete", "patch", "post", "put"})


class InvalidVerb(ValueError):  # noqa: N818
    """A requested verb is not in :data:`VALID_VERBS`."""

    def __init__(self, verb: str) -> None:
        super().__init__(verb)
        self.verb = verb


@dataclass(frozen=True, slots=True)
class VerbSet:
    """Canonical verbs of one route function.

    Attributes:
        verbs: Sorted, duplicate-free verbs. Empty when the function is
            hidden by the default configuration.
        can_handle_body: At least one verb is body-capable.
        is_wildcard: ``all`` was requested; only one route is registered.
    """

    verbs: tuple[str, ...]
    can_handle_body: bool = False
    is_wildcard: bool = False

    @property
    def hidden(self) -> bool:
        return not self.verbs

    @classmethod
    def resolve(
        cls,
        requested: Sequence[str],
        *,
        all_by_default: bool = False,
        hidden_by_default: bool = False,
    ) -> "VerbSet":
        """Canonicalize *requested* verbs.

        The defaults only apply when *requested* is empty: no verbs at all
        when *hidden_by_default*, else ``all`` when *all_by_default*, else
        ``get``.

        Raises:
            InvalidVerb: A verb outside :data:`VALID_VERBS` was requested.
        """
        if not requested:
            if hidden_by_default:
                return cls(verbs=())
            requested = (WILDCARD,) if all_by_default else ("get",)

        verbs: list[str] = []
        for verb in sorted(requested):
            if verbs and verbs[-1] == verb:
                continue
            if verb not in VALID_VERBS:
                raise InvalidVerb(verb)
            verbs.append(verb)

        return cls(
            verbs=tuple(verbs),
            can_handle_body=any(v in BODY_VERBS for v in verbs),
            is_wildcard=WILDCARD in verbs,
        )
