"""
FormDrop Backend: Submission Repository Tests
===============================================

What:  save() / find_all() against a real SQLite store, and the mapping of
       driver errors to StorageError with a mocked session.
"""

import uuid

import pytest
from sqlalchemy import Text
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError
from sqlalchemy.schema import CreateTable

from app.exceptions import StorageError
from app.models.submission import Submission
from app.schemas.submission import SubmissionRecord
from app.services.repository import SubmissionRepository


def make_record(name="Ann", images=None):
    return SubmissionRecord(
        name=name,
        age="30",
        message="hi",
        email="a@x.com",
        images=images or ["http://test/uploads/images-1-a.png"],
    )


class TestSave:

    @pytest.mark.asyncio
    async def test_save_assigns_id_and_timestamp(self, db_session):
        repository = SubmissionRepository(db_session)

        stored = await repository.save(make_record())

        assert isinstance(stored.id, uuid.UUID)
        assert stored.created_at is not None
        assert stored.name == "Ann"
        assert stored.images == ["http://test/uploads/images-1-a.png"]

    @pytest.mark.asyncio
    async def test_save_is_committed(self, session_factory):
        async with session_factory() as session:
            await SubmissionRepository(session).save(make_record())
            # Rolling back afterwards must not undo the committed insert
            await session.rollback()

        async with session_factory() as session:
            found = await SubmissionRepository(session).find_all()

        assert [s.name for s in found] == ["Ann"]

    @pytest.mark.asyncio
    async def test_save_failure_raises_storage_error(self, mock_db_session):
        mock_db_session.commit.side_effect = OperationalError(
            "INSERT INTO submissions", {}, Exception("connection refused")
        )

        with pytest.raises(StorageError, match="Failed to save submission"):
            await SubmissionRepository(mock_db_session).save(make_record())

        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unreachable_store_raises_storage_error(self, mock_db_session):
        mock_db_session.commit.side_effect = ConnectionRefusedError("no route")

        with pytest.raises(StorageError):
            await SubmissionRepository(mock_db_session).save(make_record())


class TestSchema:

    @pytest.mark.parametrize("column", ["name", "age", "message", "email"])
    def test_text_fields_have_no_length_cap(self, column):
        column_type = Submission.__table__.c[column].type

        assert isinstance(column_type, Text)
        assert column_type.length is None

    def test_postgres_ddl_has_no_varchar(self):
        ddl = str(CreateTable(Submission.__table__).compile(dialect=postgresql.dialect()))

        assert "VARCHAR" not in ddl

    @pytest.mark.asyncio
    async def test_long_values_round_trip(self, db_session):
        repository = SubmissionRepository(db_session)
        record = SubmissionRecord(
            name="Ann",
            age="a" * 500,
            message="hi",
            email="b" * 1000 + "@x.com",
            images=["http://test/uploads/images-1-a.png"],
        )

        await repository.save(record)
        found = await repository.find_all()

        assert found[0].age == "a" * 500
        assert len(found[0].email) == 1006


class TestFindAll:

    @pytest.mark.asyncio
    async def test_empty_store(self, db_session):
        assert await SubmissionRepository(db_session).find_all() == []

    @pytest.mark.asyncio
    async def test_returns_every_record(self, db_session):
        repository = SubmissionRepository(db_session)
        for name in ("Ann", "Bob", "Cy"):
            await repository.save(make_record(name=name))

        found = await repository.find_all()

        assert len(found) == 3
        assert {s.name for s in found} == {"Ann", "Bob", "Cy"}

    @pytest.mark.asyncio
    async def test_duplicates_are_allowed(self, db_session):
        repository = SubmissionRepository(db_session)
        await repository.save(make_record())
        await repository.save(make_record())

        found = await repository.find_all()

        assert len(found) == 2
        assert found[0].id != found[1].id

    @pytest.mark.asyncio
    async def test_read_failure_raises_storage_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError(
            "SELECT", {}, Exception("connection lost")
        )

        with pytest.raises(StorageError, match="Failed to fetch data"):
            await SubmissionRepository(mock_db_session).find_all()
