class StorageError(Exception):
    """Raised when the record store cannot complete a read or write."""


class StorageQueryError(StorageError):
    """The due-set query failed; a review pass cannot start."""


class StorageWriteError(StorageError):
    """A single record update failed."""


class NotificationError(Exception):
    """Outbound message delivery failed."""


class OrphanedReference(Exception):
    """A scheduled item points at a learner or learning unit that no longer exists."""

    def __init__(self, item_id: int, missing: str):
        super().__init__(f"scheduled item {item_id} references a missing {missing}")
        self.item_id = item_id
        self.missing = missing
