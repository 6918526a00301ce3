"""Errors raised by the collaborators around the analysis engine.

The engine itself never raises for a single file: unrecognized code simply
contributes nothing. These errors belong to the pipeline and the CLI.
"""


class HonoOpenApiError(Exception):
    """Base class for hono-openapi errors."""


class NoFilesMatchedError(HonoOpenApiError):
    """File discovery returned nothing for the given patterns."""

    def __init__(self, patterns: list[str]):
        self.patterns = patterns
        super().__init__(f"No files matched pattern: {', '.join(patterns)}")


class ConventionConflictError(HonoOpenApiError):
    """Both folder conventions were configured for the same run."""

    def __init__(self):
        super().__init__("Use either an autoroutes root or an autorouter root, not both")
