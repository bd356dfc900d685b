"""
Custom Exception Classes for Siteplan

This module defines the exceptions raised by the tree model, the service
layer and the database helpers. The web API maps them to HTTP status codes
and the CLI turns them into error messages.
"""

from typing import Optional


class SitePlanError(Exception):
    """
    Base class for all siteplan errors.

    Attributes:
        message (str): Explanation of the error
    """

    def __init__(self, message: str = "Siteplan operation failed.") -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(SitePlanError):
    """
    Exception raised when a requested entity does not exist.

    Attributes:
        entity (str): Kind of entity that was looked up (e.g. "Project")
        entity_id (str): Identifier that was not found
    """

    def __init__(self, entity: str, entity_id: Optional[object] = None) -> None:
        self.entity = entity
        self.entity_id = entity_id
        if entity_id is None:
            message = f"{entity} not found"
        else:
            message = f"{entity} with id {entity_id} not found"
        super().__init__(message)


class ValidationError(SitePlanError):
    """Exception raised when input data is well-formed but not acceptable."""

    def __init__(self, message: str = "Invalid input.") -> None:
        super().__init__(message)


class InvalidTreeOperationError(ValidationError):
    """
    Exception raised when a tree mutation would break the tree invariants.

    Typical causes are moving a folder into its own subtree, adding a child
    to an item that is not a folder, or reusing an existing item id.
    """

    def __init__(self, message: str = "Invalid tree operation.") -> None:
        super().__init__(message)
