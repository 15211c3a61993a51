"""
Error taxonomy for the aura engine.

Registry lookups and application fail fast with these exceptions. Removal
operations never raise for missing ids, and exceptions raised by user supplied
reduce/apply/constructor code are propagated rather than absorbed.
"""


class AuraError(Exception):
    """Base class for every error raised by the aura engine."""


class DuplicateRegistrationError(AuraError):
    """Raised when an effect or aura id is registered twice."""

    def __init__(self, kind: str, name: str) -> None:
        super().__init__(f"{kind} '{name}' is already registered.")
        self.kind = kind
        self.name = name


class NotFoundError(AuraError, LookupError):
    """Raised when an effect or aura id is not registered."""

    kind = "Entry"

    def __init__(self, name: str) -> None:
        super().__init__(f"{self.kind} '{name}' is not registered.")
        self.name = name


class UnknownAuraError(NotFoundError):
    """Raised when applying or looking up an unregistered aura."""

    kind = "Aura"


class UnknownEffectError(NotFoundError):
    """Raised when an aura template or a query names an unregistered effect."""

    kind = "Effect"


class InvalidSettingsError(AuraError, ValueError):
    """
    Raised when an aura constructor fails or builds a malformed template.

    When the constructor itself raised, the original exception is chained as
    ``__cause__``.
    """

    def __init__(self, aura_name: str, reason: str) -> None:
        super().__init__(f"Invalid settings for aura '{aura_name}': {reason}")
        self.aura_name = aura_name
        self.reason = reason
