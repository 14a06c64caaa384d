"""Exceptions raised by the notebook data layer."""


class NotebookError(Exception):
    """Base class for all notebook errors."""


class InvalidDatasetError(NotebookError):
    """A document does not have the shape of a notebook dataset."""


class ValidationError(NotebookError):
    """A required field is missing or blank."""


class NotFoundError(NotebookError):
    """A category or item id does not exist in the dataset."""

    def __init__(self, kind: str, identifier: str) -> None:
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind.capitalize()} not found: {identifier}")
