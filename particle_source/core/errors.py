"""
Exceptions raised while building and sampling particle sources.
"""


class SourceError(Exception):
    """Base class for particle source failures."""


class SourceConfigError(SourceError):
    """The SOURCE configuration cannot be turned into a source.

    Unknown modes, malformed fields and empty emitting surfaces all end up
    here. The message names the offending identifier.
    """


class UnknownParticleError(SourceConfigError):
    """Particle name outside the supported particle types."""

    def __init__(self, name: str):
        super().__init__(f"Could not create particle '{name}'")
        self.name = name


class SamplingExhaustedError(SourceError):
    """A bounded rejection loop ran out of trials."""
