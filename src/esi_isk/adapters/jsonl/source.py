"""Read transfer events from a JSON-lines export."""

from __future__ import annotations

from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from esi_isk.domain.ports.sources import TransferBatch

from .schema import ContractRecord, DonationRecord, TransferRecordAdapter

if TYPE_CHECKING:
    from collections.abc import Iterator

log = getLogger(__name__)


class TransferFileError(ValueError):
    """Raised when a transfer export line cannot be parsed."""

    def __init__(self, path: Path, line_number: int, detail: str) -> None:
        super().__init__(f"{path}:{line_number}: {detail}")
        self.path = path
        self.line_number = line_number


class JsonlTransferSource:
    """Transfer source backed by a file with one JSON object per line.

    Each line carries a ``type`` of ``donation`` or ``contract``. Blank lines
    and lines starting with ``#`` are skipped.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def __call__(self) -> TransferBatch:
        batch = TransferBatch()
        for record in self._records():
            match record:
                case DonationRecord():
                    batch.donations.append(record.to_domain())
                case ContractRecord():
                    batch.contracts.append(record.to_domain())
        log.info(
            "Read %d donation(s) and %d contract(s) from %s",
            len(batch.donations),
            len(batch.contracts),
            self.path,
        )
        return batch

    def _records(self) -> Iterator[DonationRecord | ContractRecord]:
        with self.path.open(encoding="utf-8") as handle:
            for line_number, raw_line in enumerate(handle, start=1):
                line = raw_line.strip()
                if not line or line.startswith("#"):
                    continue
                try:
                    yield TransferRecordAdapter.validate_json(line)
                except ValidationError as exc:
                    raise TransferFileError(self.path, line_number, str(exc)) from exc
