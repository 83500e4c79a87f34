import pytest
from sqlalchemy.exc import DataError, IntegrityError, OperationalError

from core.exceptions import DuplicateError, InventoryError, StorageError
from db.repository import SqlInventoryRepository


class FailingCommitSession:
    """Session double whose commit raises the given database error."""

    def __init__(self, error):
        self.error = error
        self.rollbacks = 0

    async def commit(self):
        raise self.error

    async def rollback(self):
        self.rollbacks += 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error, expected",
    [
        (IntegrityError("INSERT INTO items", {}, Exception("duplicate key")), DuplicateError),
        (DataError("INSERT INTO items", {}, Exception("invalid byte sequence for encoding UTF8: 0x00")), StorageError),
        (OperationalError("UPDATE locations", {}, Exception("server closed the connection")), StorageError),
    ],
)
async def test_failed_commit_rolls_back(error, expected):
    session = FailingCommitSession(error)
    repo = SqlInventoryRepository(session)

    with pytest.raises(expected) as exc_info:
        await repo._commit()

    assert isinstance(exc_info.value, InventoryError)
    assert session.rollbacks == 1


@pytest.mark.asyncio
async def test_storage_error_message_names_cause():
    session = FailingCommitSession(DataError("INSERT INTO items", {}, Exception("invalid byte sequence")))

    with pytest.raises(StorageError, match="invalid byte sequence"):
        await SqlInventoryRepository(session)._commit()
