"""Exceptions raised at the uiqa core boundary."""


class InvalidInputError(ValueError):
    """Input rejected before any validator or selector step runs."""


class GenerationTimeoutError(RuntimeError):
    """The generation collaborator did not answer in time; no feedback was recorded."""
