"""
Domain exceptions.

Web routes translate these into HTTP status codes; core modules raise them
and never build responses themselves.
"""


class NorthstarError(Exception):
    """Base class for Northstar domain errors."""


class OnboardingRequirementError(NorthstarError):
    """Onboarding cannot be marked complete yet (for example, no goals)."""


class WizardWriteError(NorthstarError):
    """Saving wizard progress or onboarding state failed in the database."""
