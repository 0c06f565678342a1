"""Concurrent OFX ingest: parser workers fan out, one consumer persists.

Roles
-----
- ``workers`` producer threads take file paths from a hand-off queue, decode
  each file and put its transactions on a bounded transaction queue. An idle
  worker takes the next path, so large files do not hold up small ones.
- One consumer thread classifies every transaction with the :class:`RuleBook`
  and either saves it through the :class:`Persister` or appends it to the
  unknown batch. Being the only consumer keeps the unknown batch in arrival
  order and makes it the only writer to the store during ingest.
- The calling thread feeds paths and then shuts the pipeline down in a fixed
  order: close paths, join producers, close transactions, join consumer.
  A consumer that fails keeps draining the queue until it is closed, so the
  shutdown still completes and its error is raised afterwards.

Transactions of one file stay in file order; order across files is not
preserved.
"""

from __future__ import annotations

import queue
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from os import PathLike
from typing import TypeAlias

from .classifier import RuleBook
from .logging_setup import get_logger
from .models import Transaction
from .ofx_reader import read_ofx_transactions
from .persistence import Persister

logger = get_logger("gastos.pipeline")

TRANSACTION_QUEUE_SIZE = 1000

PathLikeStr: TypeAlias = str | PathLike[str]
Parser: TypeAlias = Callable[[PathLikeStr], Sequence[Transaction]]


class _Closed:
    __slots__ = ()

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return "<closed>"


# Close marker: one per producer on the path queue, one on the transaction queue.
_CLOSED = _Closed()


@dataclass(slots=True)
class IngestResult:
    """Outcome of one ingest pass.

    ``received`` counts every transaction the consumer took off the queue;
    it equals ``saved + failed + len(unknowns)``.
    """

    files: int = 0
    received: int = 0
    saved: int = 0
    failed: int = 0
    unknowns: list[Transaction] = field(default_factory=list)


def ingest(
    paths: Sequence[PathLikeStr],
    rulebook: RuleBook,
    persister: Persister,
    *,
    workers: int,
    parse: Parser = read_ofx_transactions,
    echo: Callable[[str], None] = print,
    queue_size: int = TRANSACTION_QUEUE_SIZE,
) -> IngestResult:
    """Parse ``paths`` concurrently and persist every classifiable transaction.

    Returns once every producer and the consumer have exited. Unclassified
    transactions are returned in :attr:`IngestResult.unknowns`, in the order
    the consumer received them.
    """

    if not isinstance(workers, int) or workers < 1:
        raise ValueError("workers must be a positive integer")

    # maxsize=1 approximates a hand-off: put() blocks until a worker is free.
    path_q: queue.Queue[PathLikeStr | _Closed] = queue.Queue(maxsize=1)
    tx_q: queue.Queue[Transaction | _Closed] = queue.Queue(maxsize=max(queue_size, workers))
    result = IngestResult(files=len(paths))

    def _produce() -> None:
        while True:
            path = path_q.get()
            if isinstance(path, _Closed):
                return
            try:
                transactions = parse(path)
            except Exception:  # noqa: BLE001 - one bad file must not stop a worker
                logger.exception("worker failed on %s", path)
                continue
            for tx in transactions:
                tx_q.put(tx)
            echo(f"parsed: {path}")

    def _consume() -> None:
        try:
            while True:
                tx = tx_q.get()
                if isinstance(tx, _Closed):
                    return
                result.received += 1
                category = rulebook.classify(tx.description)
                if category is None:
                    result.unknowns.append(tx)
                elif persister.save(tx, category):
                    result.saved += 1
                else:
                    result.failed += 1
        except Exception:
            # Keep draining so producers blocked on a full queue can finish.
            while not isinstance(tx_q.get(), _Closed):
                pass
            raise

    with ThreadPoolExecutor(max_workers=workers + 1, thread_name_prefix="gastos-ingest") as pool:
        consumer = pool.submit(_consume)
        producers = [pool.submit(_produce) for _ in range(workers)]

        for path in paths:
            path_q.put(path)
        for _ in producers:
            path_q.put(_CLOSED)

        wait(producers)
        tx_q.put(_CLOSED)
        consumer.result()

    # Surface unexpected producer errors only after the consumer has drained.
    for fut in producers:
        fut.result()

    logger.info(
        "ingest done: %d file(s), %d transaction(s), %d saved, %d unknown, %d failed",
        result.files,
        result.received,
        result.saved,
        len(result.unknowns),
        result.failed,
    )
    return result


__all__ = ["IngestResult", "TRANSACTION_QUEUE_SIZE", "ingest"]
