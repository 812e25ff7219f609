"""Shared exceptions for service layer operations."""


class EntryNotFoundError(Exception):
    """
    Raised when an entry does not exist or is not owned by the caller.

    Both causes raise the same error so that ownership cannot be probed.
    """

    def __init__(self) -> None:
        super().__init__("Entry not found")


class CategoryNotFoundError(Exception):
    """Raised when a category is not found."""

    def __init__(self) -> None:
        super().__init__("Category not found")


class SectionNotFoundError(Exception):
    """Raised when a section is not found."""

    def __init__(self) -> None:
        super().__init__("Section not found")


class UserNotFoundError(Exception):
    """Raised when a user is not found."""

    def __init__(self) -> None:
        super().__init__("User not found")


class UserAlreadyExistsError(Exception):
    """Raised when creating a user with an email that is already registered."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"User '{email}' already exists")


class InvalidReferenceError(Exception):
    """
    Raised when a write references a category or section that does not exist.

    Checked before the write so that no partial row is persisted.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)


class CategoryInUseError(Exception):
    """Raised when deleting a category that entries still reference."""

    def __init__(self, entry_count: int) -> None:
        self.entry_count = entry_count
        super().__init__(
            f"Category is referenced by {entry_count} entr{'y' if entry_count == 1 else 'ies'}",
        )
