class InventoryError(Exception):
    """Base class for errors raised by the inventory repositories."""


class NotFoundError(InventoryError):
    pass


class DuplicateError(InventoryError):
    pass


class ValidationError(InventoryError):
    pass


class StorageError(InventoryError):
    """The database rejected a write for a reason other than a conflict."""


class ImageStorageError(Exception):
    pass
