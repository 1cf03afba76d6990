"""Custom exception hierarchy for the match tagger.

Exception tree:
    MatchTaggerError
    +-- NoMatchInitializedError  (operation needs an active match)
    +-- InvalidPayloadError      (import data failed shape/type checks)
    +-- UnknownFormationError    (formation name not in the template table)

Validation problems found by the rule engine are never raised; they are
returned as ``ValidationResult`` data.
"""

from typing import Optional


class MatchTaggerError(Exception):
    """Base exception for all match tagger errors."""


class NoMatchInitializedError(MatchTaggerError):
    """An operation requiring an active match ran before initialize_match()."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"No match initialized (required by {operation})")


class InvalidPayloadError(MatchTaggerError):
    """Import data failed shape/type validation.

    The store state is left exactly as it was before the import attempt.
    """

    def __init__(self, message: str, *, details: Optional[str] = None):
        self.details = details
        super().__init__(message)


class UnknownFormationError(MatchTaggerError, KeyError):
    """Formation name is not one of the known templates."""

    def __init__(self, formation: str, known: list[str]):
        self.formation = formation
        self.known = known
        super().__init__(f"Unknown formation {formation!r}. Known formations: {known}")

    def __str__(self) -> str:
        # KeyError.__str__ would wrap the message in quotes
        return self.args[0]
