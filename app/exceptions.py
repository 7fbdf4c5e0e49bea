"""Domain exceptions for the company directory, mapped to HTTP in app.main."""
from dataclasses import dataclass
from typing import List


class CompanyDirectoryError(Exception):
    """Base exception for all company directory errors."""

    pass


@dataclass(frozen=True)
class FieldError:
    """One violated field constraint."""

    field: str
    message: str


class CompanyValidationError(CompanyDirectoryError):
    """Raised when a candidate record violates field constraints. Nothing is persisted."""

    def __init__(self, errors: List[FieldError], message: str = "Validation error"):
        self.errors = list(errors)
        self.message = message
        super().__init__("; ".join(e.message for e in self.errors))

    @property
    def messages(self) -> List[str]:
        return [e.message for e in self.errors]


class CompanyNotFoundError(CompanyDirectoryError):
    """Raised when the company does not exist or has been soft-deleted."""

    pass


class InvalidCompanyIdError(CompanyDirectoryError):
    """Raised when a company id is not a well-formed identifier."""

    pass


class CompanyStoreError(CompanyDirectoryError):
    """Raised when the store fails during an operation; message names the operation."""

    pass
