"""
Batch loading of users into the search index.

Records are staged in order into a batch; the batch is submitted as soon as it
holds ``batch_size`` documents, and a trailing non-empty batch is submitted
after the input is exhausted. Any submission failure aborts loading.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from usersearch.domain.errors import BatchSubmissionError
from usersearch.domain.models import UserRecord
from usersearch.index.abstract import IndexBatch, SearchIndex
from usersearch.utils.logging import get_logger

log = get_logger(__name__)

# Called after each successful submission with (batch_number, batch_size, is_final_partial)
BatchCallback = Callable[[int, int, bool], None]


@dataclass
class LoadReport:
    """Outcome of a completed load."""

    batch_sizes: List[int] = field(default_factory=list)

    @property
    def batches(self) -> int:
        return len(self.batch_sizes)

    @property
    def documents(self) -> int:
        return sum(self.batch_sizes)


def _submit(
    index: SearchIndex,
    batch: IndexBatch,
    report: LoadReport,
    partial: bool,
    on_batch: Optional[BatchCallback],
) -> None:
    batch_number = report.batches + 1
    try:
        index.submit(batch)
    except BatchSubmissionError as exc:
        exc.batch_number = batch_number
        log.error(
            f"[SEED FAILED] batch {batch_number}",
            extra={"batch": batch_number, "size": len(batch)},
        )
        raise

    report.batch_sizes.append(len(batch))
    log.info(
        f"[SEED BATCH] {batch_number}",
        extra={"batch": batch_number, "size": len(batch), "partial": partial},
    )
    if on_batch is not None:
        on_batch(batch_number, len(batch), partial)


def load(
    index: SearchIndex,
    records: Iterable[UserRecord],
    batch_size: int,
    on_batch: Optional[BatchCallback] = None,
) -> LoadReport:
    """
    Feed ``records`` into ``index`` in batches of at most ``batch_size``.

    Parameters
    ----------
    index : SearchIndex
        Target index; each batch is submitted through ``index.submit``.
    records : iterable[UserRecord]
        Users in generation order.
    batch_size : int
        Maximum number of documents per batch (>= 1).
    on_batch : callable | None
        Progress hook invoked after every successful submission.

    Returns
    -------
    LoadReport
        Sizes of the submitted batches, in submission order.

    Raises
    ------
    BatchSubmissionError
        On the first failed submission; later records are not staged.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")

    report = LoadReport()
    log.info("[SEED START]", extra={"batch_size": batch_size})

    batch = index.new_batch()
    for record in records:
        batch.add(record.id, record.to_document())
        if len(batch) == batch_size:
            _submit(index, batch, report, partial=False, on_batch=on_batch)
            batch = index.new_batch()

    if len(batch) > 0:
        _submit(index, batch, report, partial=True, on_batch=on_batch)

    log.info(
        "[SEED COMPLETE]",
        extra={"batches": report.batches, "documents": report.documents},
    )
    return report


__all__ = ["BatchCallback", "LoadReport", "load"]
