import threading

import pytest

from library_api.errors import Conflict, OutOfStock
from library_api.repositories.lending_repo import LendingRepo
from library_api.services.book_service import BookService
from library_api.services.lending_service import LendingService
from library_api.utils.locks import book_locks


def _run_together(app, calls):
    """Start every call at the same moment; collect "ok" or the exception class per call."""
    barrier = threading.Barrier(len(calls))
    results = [None] * len(calls)

    def worker(i, fn):
        with app.app_context():
            barrier.wait()
            try:
                fn()
                results[i] = "ok"
            except Conflict as e:
                results[i] = type(e)

    threads = [threading.Thread(target=worker, args=(i, fn)) for i, fn in enumerate(calls)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)
    return results


def _race(app, book_id, borrowers):
    calls = [lambda name=name: LendingService.lend(book_id, name) for name in borrowers]
    return sorted("lent" if r == "ok" else "out_of_stock"
                  for r in _run_together(app, calls) if r in ("ok", OutOfStock))


def _new_book(app, quantity, isbn=None):
    with app.app_context():
        return BookService.create_book({
            "title": "Last Copy", "author": "Someone",
            "isbn": isbn or f"RACE-{quantity}", "quantity": quantity,
        }).id


def _stock(app, book_id):
    with app.app_context():
        book = BookService.get_book(book_id)
        return book.quantity, LendingRepo.count_active(book_id), book.available_copies


def test_last_copy_has_exactly_one_winner(app):
    book_id = _new_book(app, 1)
    assert _race(app, book_id, ["alice", "bob"]) == ["lent", "out_of_stock"]
    assert _stock(app, book_id) == (1, 1, 0)


@pytest.mark.parametrize("quantity,callers", [(2, 5), (3, 8)])
def test_never_oversold(app, quantity, callers):
    book_id = _new_book(app, quantity)
    results = _race(app, book_id, [f"user{i}" for i in range(callers)])
    assert results.count("lent") == quantity
    assert results.count("out_of_stock") == callers - quantity
    assert _stock(app, book_id) == (quantity, quantity, 0)


@pytest.mark.parametrize("attempt", range(5))
def test_quantity_decrease_and_lend_serialize(app, attempt):
    book_id = _new_book(app, 1, isbn=f"SHRINK-{attempt}")
    results = _run_together(app, [
        lambda: BookService.update_book(book_id, {"quantity": 0}),
        lambda: LendingService.lend(book_id, "alice"),
    ])

    # one side wins; the loser sees the winner's committed state
    assert results in (["ok", OutOfStock], [Conflict, "ok"])
    quantity, active, available = _stock(app, book_id)
    assert quantity >= active
    assert available >= 0
    assert (quantity, active) == ((0, 0) if results[0] == "ok" else (1, 1))


def test_book_lock_survives_delete(app):
    book_id = _new_book(app, 1)
    with book_locks.hold(book_id):
        pass
    lock = book_locks._lock_for(book_id)

    with app.app_context():
        BookService.delete_book(book_id)

    assert book_locks._lock_for(book_id) is lock
