"""Tests for transaction logging."""

import json
from pathlib import Path

from site_reorg.organization.transaction import (
    OperationType,
    TransactionLog,
    TransactionOperation,
    TransactionStatus,
)


class TestTransactionOperation:
    """Test transaction operation model."""

    def test_create_operation(self):
        """Test creating a transaction operation."""
        op = TransactionOperation(
            operation_id="op123",
            operation_type=OperationType.MOVE,
            source_path=Path("jc_guide.html"),
            target_path=Path("docs/guide/index.html"),
        )

        assert op.operation_id == "op123"
        assert op.operation_type == OperationType.MOVE
        assert op.status == TransactionStatus.PENDING
        assert op.dry_run is False
        assert op.error_message is None

    def test_describe_move(self):
        """Test a move describes source and target."""
        op = TransactionOperation(
            operation_id="op1",
            operation_type=OperationType.MOVE,
            source_path=Path("css"),
            target_path=Path("docs/css"),
            dry_run=True,
        )

        assert op.describe() == "[DRY RUN] move css → docs/css"

    def test_describe_stub(self):
        """Test a stub describes its target URL."""
        op = TransactionOperation(
            operation_id="op2",
            operation_type=OperationType.STUB,
            target_path=Path("docs/jc_guide.html"),
            detail="/guide/",
        )

        assert op.describe() == "stub docs/jc_guide.html (/guide/)"


class TestTransactionLog:
    """Test transaction log."""

    def test_create_transaction_log(self):
        """Test creating a transaction log."""
        log = TransactionLog(dry_run=False)

        assert log.transaction_id
        assert log.dry_run is False
        assert len(log.operations) == 0
        assert log.completed_at is None

    def test_add_operation_inherits_dry_run(self):
        """Test operations are marked with the log's dry-run flag."""
        log = TransactionLog(dry_run=True)

        op = log.add_operation(OperationType.MKDIR, Path("docs"))

        assert log.operations == [op]
        assert op.dry_run is True
        assert op.operation_id

    def test_update_operation_status(self):
        """Test updating operation status."""
        log = TransactionLog()
        op = log.add_operation(OperationType.STUB, Path("docs/jc_guide.html"))

        log.update_operation_status(
            op.operation_id, TransactionStatus.FAILED, "disk full"
        )

        assert log.operations[0].status == TransactionStatus.FAILED
        assert log.operations[0].error_message == "disk full"
        assert log.has_failures() is True

    def test_get_statistics(self):
        """Test statistics count operations per status."""
        log = TransactionLog()
        done = log.add_operation(OperationType.MOVE, Path("docs/css"), Path("css"))
        log.update_operation_status(done.operation_id, TransactionStatus.COMPLETED)
        skipped = log.add_operation(OperationType.MOVE, Path("docs/JC"), Path("JC"))
        skipped.status = TransactionStatus.SKIPPED
        log.add_operation(OperationType.REWRITE, Path("docs/index.html"))

        stats = log.get_statistics()

        assert stats["total"] == 3
        assert stats["completed"] == 1
        assert stats["skipped"] == 1
        assert stats["pending"] == 1
        assert stats["failed"] == 0

    def test_operations_of(self):
        """Test filtering operations by type."""
        log = TransactionLog()
        log.add_operation(OperationType.MOVE, Path("docs/css"), Path("css"))
        stub = log.add_operation(OperationType.STUB, Path("docs/jc_guide.html"))

        assert log.operations_of(OperationType.STUB) == [stub]

    def test_save_and_load(self, tmp_path):
        """Test saving and loading a transaction log."""
        log = TransactionLog(dry_run=False)
        op = log.add_operation(
            OperationType.MOVE, Path("docs/guide/index.html"), Path("jc_guide.html")
        )
        log.update_operation_status(op.operation_id, TransactionStatus.COMPLETED)

        log_path = tmp_path / "logs" / "reorg.json"
        log.save(log_path)

        data = json.loads(log_path.read_text())
        assert data["transaction_id"] == log.transaction_id
        assert data["operations"][0]["operation_type"] == "move"

        loaded = TransactionLog.load(log_path)
        assert loaded.transaction_id == log.transaction_id
        assert loaded.operations[0].source_path == Path("jc_guide.html")
        assert loaded.operations[0].status == TransactionStatus.COMPLETED
