# tests/test_reference_service.py
"""Unit tests for the reference list CRUD."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from unittest.mock import MagicMock
from sqlalchemy.exc import IntegrityError
from fleet_manager.models.reference import Driver, Department
from fleet_manager.services import reference_service
from fleet_manager.services.outcomes import Conflict, NotFound, Removed


def db_returning(*results):
    db = MagicMock()
    db.query.return_value.filter.return_value.first.side_effect = list(results)
    return db


class TestCreateEntry:
    def test_creates_driver(self):
        db = db_returning(None)
        driver = reference_service.create_entry(db, Driver, {"name": "Sam", "license_number": "L-1"})
        assert isinstance(driver, Driver)
        assert driver.created_at is not None
        db.add.assert_called_once_with(driver)

    def test_license_number_race_names_the_column(self):
        db = db_returning(None)
        db.commit.side_effect = IntegrityError(
            "INSERT INTO drivers", {}, Exception("UNIQUE constraint failed: drivers.license_number"),
        )
        result = reference_service.create_entry(db, Driver, {"name": "Sam", "license_number": "L-1"})
        assert isinstance(result, Conflict)
        assert result.field == "license_number"
        assert result.message == "Driver with this license number already exists"

    def test_duplicate_name(self):
        db = db_returning(Department(id=1, name="Ops"))
        result = reference_service.create_entry(db, Department, {"name": "Ops"})
        assert isinstance(result, Conflict)
        assert result.field == "name"
        db.add.assert_not_called()

    def test_unique_index_race(self):
        db = db_returning(None)
        db.commit.side_effect = IntegrityError("insert", {}, Exception("dup"))
        result = reference_service.create_entry(db, Department, {"name": "Ops"})
        assert isinstance(result, Conflict)
        db.rollback.assert_called_once()


class TestUpdateAndDelete:
    def test_rename_clash(self):
        db = db_returning(Department(id=1, name="Ops"), Department(id=2, name="Sales"))
        result = reference_service.update_entry(db, Department, 1, {"name": "Sales"})
        assert isinstance(result, Conflict)

    def test_rename(self):
        entry = Department(id=1, name="Ops")
        db = db_returning(entry, None)
        assert reference_service.update_entry(db, Department, 1, {"name": "Operations"}) is entry
        assert entry.name == "Operations"

    def test_delete_missing(self):
        result = reference_service.delete_entry(db_returning(None), Driver, 5)
        assert isinstance(result, NotFound)
        assert result.message == "Driver not found"

    def test_delete(self):
        entry = Driver(id=5, name="Sam")
        db = db_returning(entry)
        assert isinstance(reference_service.delete_entry(db, Driver, 5), Removed)
        db.delete.assert_called_once_with(entry)


class TestListEntries:
    def test_search_filters_by_name(self):
        db = MagicMock()
        reference_service.list_entries(db, Driver, search="sa")
        db.query.return_value.filter.assert_called_once()

    def test_no_search_lists_all(self):
        db = MagicMock()
        reference_service.list_entries(db, Driver)
        db.query.return_value.filter.assert_not_called()
        db.query.return_value.order_by.return_value.all.assert_called_once()
