"""Exception hierarchy for the lint engine."""


class CairoLintError(Exception):
    """Base class for every error raised by cairo_lint."""


class MatcherSkipped(CairoLintError):
    """A matcher cannot analyze a node (missing semantic fact, unexpected shape).

    Recovered by the orchestrator: only that matcher on that node is skipped.
    """


class FixSynthesisError(CairoLintError):
    """A produced fix breaks a structural invariant (escapes its node, overlapping edits)."""


class TreeFormatError(CairoLintError):
    """The front end's tree dump cannot be decoded."""


class ConfigurationError(CairoLintError):
    """The configuration file exists but cannot be read."""
