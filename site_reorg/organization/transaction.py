"""
Transaction logging for reorganization runs.

Records every planned or applied mutation so a run (or a dry-run preview)
can be reported and audited afterwards.
"""

import json
import logging
import uuid
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class TransactionStatus(str, Enum):
    """Status of a transaction operation."""

    PENDING = "pending"
    COMPLETED = "completed"
    SKIPPED = "skipped"
    FAILED = "failed"


class OperationType(str, Enum):
    """Kind of mutation."""

    BACKUP = "backup"
    MKDIR = "mkdir"
    MOVE = "move"
    STUB = "stub"
    REWRITE = "rewrite"


class TransactionOperation(BaseModel):
    """A single mutation in a transaction."""

    operation_id: str = Field(description="Unique operation ID")
    operation_type: OperationType = Field(description="Kind of mutation")
    target_path: Path = Field(description="Path created or modified")
    source_path: Optional[Path] = Field(
        default=None, description="Path moved from, for moves"
    )
    detail: Optional[str] = Field(default=None, description="Free-form detail")
    status: TransactionStatus = Field(
        default=TransactionStatus.PENDING,
        description="Operation status",
    )
    dry_run: bool = Field(default=False, description="Previewed, not applied")
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When operation was logged",
    )
    error_message: Optional[str] = Field(
        default=None, description="Error message if failed"
    )

    model_config = ConfigDict(use_enum_values=True)

    def describe(self) -> str:
        prefix = "[DRY RUN] " if self.dry_run else ""
        if self.source_path is not None:
            text = f"{self.operation_type} {self.source_path} → {self.target_path}"
        else:
            text = f"{self.operation_type} {self.target_path}"
        if self.detail:
            text = f"{text} ({self.detail})"
        return f"{prefix}{text}"


class TransactionLog(BaseModel):
    """Transaction log for a reorganization run."""

    transaction_id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique transaction ID",
    )
    started_at: datetime = Field(
        default_factory=datetime.now,
        description="When transaction started",
    )
    completed_at: Optional[datetime] = Field(
        default=None, description="When transaction completed"
    )
    operations: List[TransactionOperation] = Field(
        default_factory=list, description="List of operations"
    )
    dry_run: bool = Field(default=False, description="Whether this was a dry run")

    def add_operation(
        self,
        operation_type: OperationType,
        target_path: Path,
        source_path: Optional[Path] = None,
        detail: Optional[str] = None,
    ) -> TransactionOperation:
        """
        Add an operation to the transaction log.

        Args:
            operation_type: Kind of mutation
            target_path: Path created or modified
            source_path: Path moved from (moves only)
            detail: Optional human-readable detail

        Returns:
            Created operation
        """
        operation = TransactionOperation(
            operation_id=str(uuid.uuid4()),
            operation_type=operation_type,
            target_path=target_path,
            source_path=source_path,
            detail=detail,
            dry_run=self.dry_run,
        )
        self.operations.append(operation)
        return operation

    def update_operation_status(
        self,
        operation_id: str,
        status: TransactionStatus,
        error_message: Optional[str] = None,
    ) -> None:
        """
        Update the status of an operation.

        Args:
            operation_id: Operation ID to update
            status: New status
            error_message: Optional error message
        """
        for op in self.operations:
            if op.operation_id == operation_id:
                op.status = status
                if error_message:
                    op.error_message = error_message
                return

    def get_statistics(self) -> Dict[str, int]:
        """
        Get transaction statistics.

        Returns:
            Dictionary with operation counts by status
        """
        stats = {"total": len(self.operations)}
        for status in TransactionStatus:
            stats[status.value] = 0

        for op in self.operations:
            stats[TransactionStatus(op.status).value] += 1

        return stats

    def operations_of(self, operation_type: OperationType) -> List[TransactionOperation]:
        return [op for op in self.operations if op.operation_type == operation_type]

    def has_failures(self) -> bool:
        """True if any operation failed."""
        return any(op.status == TransactionStatus.FAILED for op in self.operations)

    def save(self, log_path: Path) -> None:
        """
        Save transaction log to file.

        Args:
            log_path: Path to save log file
        """
        log_path = Path(log_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        with open(log_path, "w", encoding="utf-8") as f:
            json.dump(
                self.model_dump(mode="json"),
                f,
                indent=2,
                default=str,
            )

        logger.info(f"Saved transaction log to {log_path}")

    @classmethod
    def load(cls, log_path: Path) -> "TransactionLog":
        """
        Load transaction log from file.

        Args:
            log_path: Path to log file

        Returns:
            Loaded transaction log
        """
        with open(log_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return cls.model_validate(data)
