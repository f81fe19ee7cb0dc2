import asyncpg
import pytest
from pydantic import ValidationError

from streamshelf.errors import (
    SECTION_ORDER_CONSTRAINT,
    CapacityExceeded,
    CatalogError,
    ConcurrencyConflict,
    NotFound,
    StorageUnavailable,
    ValidationFailed,
    storage_errors,
    translate_storage_error,
)
from streamshelf.models import UpcomingCreate


class TestCatalogError:
    @pytest.mark.parametrize(
        "error_class, status",
        [
            (ValidationFailed, 400),
            (NotFound, 404),
            (CapacityExceeded, 409),
            (ConcurrencyConflict, 409),
            (StorageUnavailable, 503),
        ],
    )
    def test_status_codes(self, error_class, status):
        assert error_class("x").status_code == status

    def test_to_dict(self):
        assert NotFound("Content not found").to_dict() == {"error": "Content not found"}
        assert ValidationFailed("bad", ["d"]).to_dict() == {"error": "bad", "details": ["d"]}

    def test_from_pydantic(self):
        with pytest.raises(ValidationError) as exc_info:
            UpcomingCreate.model_validate({"title": "x"})

        error = ValidationFailed.from_pydantic(exc_info.value, "Invalid upcoming content data")

        assert error.message == "Invalid upcoming content data"
        locs = {tuple(detail["loc"]) for detail in error.details}
        assert ("releaseDate",) in locs or ("release_date",) in locs


class TestTranslateStorageError:
    def test_serialization_failure(self):
        error = translate_storage_error(asyncpg.exceptions.SerializationError("conflict"))

        assert isinstance(error, ConcurrencyConflict)

    def test_section_order_collision(self):
        exc = asyncpg.exceptions.UniqueViolationError("duplicate key")
        exc.constraint_name = SECTION_ORDER_CONSTRAINT

        error = translate_storage_error(exc)

        assert isinstance(error, ConcurrencyConflict)
        assert error.message == "Section order is already taken"

    def test_connection_loss(self):
        error = translate_storage_error(ConnectionRefusedError("refused"))

        assert isinstance(error, StorageUnavailable)

    @pytest.mark.parametrize(
        "error_class",
        [
            asyncpg.exceptions.CheckViolationError,
            asyncpg.exceptions.NotNullViolationError,
            asyncpg.exceptions.ForeignKeyViolationError,
        ],
    )
    def test_integrity_errors_are_bad_input(self, error_class):
        error = translate_storage_error(error_class("violates constraint"))

        assert isinstance(error, ValidationFailed)

    def test_other_postgres_errors_are_outages(self):
        error = translate_storage_error(asyncpg.exceptions.AdminShutdownError("shutdown"))

        assert isinstance(error, StorageUnavailable)

    def test_data_error(self):
        error = translate_storage_error(asyncpg.exceptions.DataError("bad"))

        assert isinstance(error, ValidationFailed)

    def test_unrelated_error(self):
        assert translate_storage_error(KeyError("x")) is None


class TestStorageErrorsContext:
    def test_translates_and_chains(self):
        cause = asyncpg.exceptions.DeadlockDetectedError("deadlock")

        with pytest.raises(ConcurrencyConflict) as exc_info, storage_errors():
            raise cause

        assert exc_info.value.__cause__ is cause

    def test_catalog_errors_pass_through(self):
        original = NotFound("gone")

        with pytest.raises(NotFound) as exc_info, storage_errors():
            raise original

        assert exc_info.value is original

    def test_other_errors_pass_through(self):
        with pytest.raises(KeyError), storage_errors():
            raise KeyError("x")

    def test_all_are_catalog_errors(self):
        assert issubclass(StorageUnavailable, CatalogError)
