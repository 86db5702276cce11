"""Custom exception hierarchy for the movie rental API."""


class RentalStoreError(Exception):
    """Base exception for all movie rental errors."""


class ConfigurationError(RentalStoreError):
    """Raised when configuration is invalid or missing."""


class MissingCredential(RentalStoreError):
    """Raised when a protected call carries no credential."""


class InvalidCredential(RentalStoreError):
    """Raised when a credential is malformed, tampered with or expired."""


class InvalidInput(RentalStoreError):
    """Raised when request data is malformed or violates a field rule."""


class EntityNotFoundError(RentalStoreError):
    """Raised when a referenced entity does not exist."""


class RentalNotFound(EntityNotFoundError):
    """Raised when no rental matches a customer/movie pair."""


class InvalidEntityStateError(RentalStoreError):
    """Raised when an entity is in an invalid state for the operation."""


class RentalAlreadyProcessed(InvalidEntityStateError):
    """Raised when returning a rental that is already closed."""


class OutOfStock(InvalidEntityStateError):
    """Raised when issuing a rental for a movie with no copies left."""


class RepositoryUnavailable(RentalStoreError):
    """Raised when the persistence layer fails or times out."""


class RepositoryTimeout(RepositoryUnavailable):
    """Raised when the database lock could not be obtained in time."""
