"""Unit tests for the visitor directory."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import MagicMock
from sqlalchemy.exc import IntegrityError, OperationalError
from vms.exceptions import NotFoundError, StorageError, ValidationError
from vms.models.approval import Approval
from vms.services.visitor_directory import VisitorDirectory, validate_visitor


class TestValidateVisitor:
    def test_front_end_field_names_accepted(self):
        data = validate_visitor({"visitorName": "Alice", "hostName": "Jane Doe",
                                 "idProof": "P-123", "duration": "2 hours", "companyId": "1"})
        assert data.name == "Alice"
        assert data.host_name == "Jane Doe"
        assert data.id_proof == "P-123"
        assert data.expected_duration == "2 hours"

    def test_missing_name_rejected(self):
        with pytest.raises(ValidationError) as exc:
            validate_visitor({"email": "alice@example.com"})
        assert exc.value.errors[0]["field"] == "name"

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            validate_visitor({"name": "   "})

    def test_non_object_rejected(self):
        with pytest.raises(ValidationError):
            validate_visitor(["Alice"])


class TestVisitorDirectory:
    def test_create_and_get(self, directory):
        visitor = directory.create_visitor({"name": "Alice", "email": "alice@example.com"})
        assert visitor.id is not None
        assert visitor.created_at is not None

        fetched = directory.get_visitor(visitor.id)
        assert fetched.name == "Alice"
        assert fetched.email == "alice@example.com"

    def test_same_identity_creates_separate_records(self, directory):
        first = directory.create_visitor({"name": "Alice", "phone": "555-0101"})
        second = directory.create_visitor({"name": "Alice", "phone": "555-0101"})
        assert first.id != second.id

    def test_get_missing_raises_not_found(self, directory):
        with pytest.raises(NotFoundError):
            directory.get_visitor(999)

    def test_id_wider_than_column_is_not_found(self, directory):
        with pytest.raises(NotFoundError):
            directory.get_visitor(99999999999999999999)

    def test_list_in_insertion_order(self, directory):
        for name in ("Carol", "Alice", "Bob"):
            directory.create_visitor({"name": name})
        assert [v.name for v in directory.list_visitors()] == ["Carol", "Alice", "Bob"]

    def test_list_empty(self, directory):
        assert list(directory.list_visitors()) == []

    def test_delete_missing_raises_not_found(self, directory):
        with pytest.raises(NotFoundError):
            directory.delete_visitor(12345)

    def test_delete_cascades_to_approvals(self, db, directory, workflow):
        approval = workflow.pre_register({"name": "Dave"})
        visitor_id = approval.visitor_id
        approval_id = approval.id

        directory.delete_visitor(visitor_id)

        assert db.get(Approval, approval_id) is None
        with pytest.raises(NotFoundError):
            directory.get_visitor(visitor_id)

    def test_delete_leaves_other_visitors_alone(self, directory, workflow):
        keep = workflow.pre_register({"name": "Erin"})
        gone = workflow.pre_register({"name": "Frank"})

        directory.delete_visitor(gone.visitor_id)

        assert workflow.get_approval(keep.id).status == "PENDING"
        assert [v.name for v in directory.list_visitors()] == ["Erin"]


class TestStorageFailures:
    def test_lock_timeout_is_retryable(self):
        db = MagicMock()
        db.commit.side_effect = OperationalError("INSERT", {}, Exception("database is locked"))

        with pytest.raises(StorageError) as exc:
            VisitorDirectory(db).create_visitor({"name": "Alice"})

        assert exc.value.retryable is True
        db.rollback.assert_called()

    def test_integrity_error_not_retryable(self):
        db = MagicMock()
        db.commit.side_effect = IntegrityError("INSERT", {}, Exception("constraint failed"))

        with pytest.raises(StorageError) as exc:
            VisitorDirectory(db).create_visitor({"name": "Alice"})

        assert exc.value.retryable is False

    def test_validation_happens_before_touching_store(self):
        db = MagicMock()
        with pytest.raises(ValidationError):
            VisitorDirectory(db).create_visitor({})
        db.add.assert_not_called()
