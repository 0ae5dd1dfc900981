from datetime import datetime

from library_api.extensions import db
from library_api.models.lending_record import LendingRecord


def _get(client, headers, report, **params):
    resp = client.get(f"/api/analytics/{report}", query_string=params, headers=headers)
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()


def _add_history(app, book_id, borrower, borrowed, returned=None):
    with app.app_context():
        db.session.add(LendingRecord(
            book_id=book_id, borrower=borrower, borrow_date=borrowed, return_date=returned
        ))
        db.session.commit()


def test_empty_reports(client, admin_headers, alice_headers):
    for headers in (admin_headers, alice_headers):
        assert _get(client, headers, "most-borrowed") == []
        assert _get(client, headers, "monthly-trends") == []
    assert _get(client, alice_headers, "category-distribution") == []


def test_most_borrowed_order(client, admin_headers, make_book, lend):
    a = make_book(title="A", quantity=5)
    b = make_book(title="B", quantity=5)
    lend(b["id"])
    lend(a["id"])
    lend(a["id"], borrower="bob")

    report = _get(client, admin_headers, "most-borrowed")
    assert [r["book_id"] for r in report] == [a["id"], b["id"]]
    assert [r["borrows"] for r in report] == [2, 1]
    assert report[0]["book_title"] == "A"


def test_most_borrowed_ties_and_limit(client, admin_headers, make_book, lend):
    books = [make_book(quantity=2) for _ in range(4)]
    for book in reversed(books):
        lend(book["id"])

    report = _get(client, admin_headers, "most-borrowed")
    assert [r["book_id"] for r in report] == [b["id"] for b in books]

    report = _get(client, admin_headers, "most-borrowed", limit=2)
    assert [r["book_id"] for r in report] == [books[0]["id"], books[1]["id"]]

    resp = client.get("/api/analytics/most-borrowed", query_string={"limit": 0}, headers=admin_headers)
    assert resp.status_code == 400


def test_history_counts_returned_loans(client, admin_headers, make_book, lend):
    book = make_book(quantity=1)
    record = lend(book["id"]).get_json()
    client.post(f"/api/lending/return/{record['id']}", headers=admin_headers)
    lend(book["id"], borrower="bob")

    assert _get(client, admin_headers, "most-borrowed")[0]["borrows"] == 2


def test_monthly_trend(app, client, admin_headers, make_book):
    book = make_book(quantity=10)
    _add_history(app, book["id"], "alice", datetime(2024, 3, 5), datetime(2024, 3, 9))
    _add_history(app, book["id"], "bob", datetime(2024, 1, 20), datetime(2024, 2, 1))
    _add_history(app, book["id"], "alice", datetime(2024, 1, 2))
    _add_history(app, book["id"], "bob", datetime(2023, 12, 31, 23, 59))

    assert _get(client, admin_headers, "monthly-trends") == [
        {"month": "2023-12", "count": 1},
        {"month": "2024-01", "count": 2},
        {"month": "2024-03", "count": 1},
    ]


def test_category_distribution_counts_books(client, admin_headers, make_book, lend):
    make_book(category="Sci-Fi")
    make_book(category="Classic")
    make_book(category="Classic")
    make_book(category="")
    uncategorized = make_book(category=None)
    lend(uncategorized["id"])

    assert _get(client, admin_headers, "category-distribution") == [
        {"category": "Classic", "count": 2},
        {"category": "Sci-Fi", "count": 1},
        {"category": "Uncategorized", "count": 2},
    ]


def test_non_admin_reports_are_scoped(app, client, admin_headers, alice_headers, make_book, lend):
    dune = make_book(title="Dune", category="Sci-Fi", quantity=5)
    emma = make_book(title="Emma", category="Classic", quantity=5)
    make_book(title="Unread", category="Poetry", quantity=5)
    lend(dune["id"], borrower="alice")
    lend(dune["id"], borrower="alice")
    lend(emma["id"], borrower="bob")
    lend(emma["id"], borrower="bob")
    lend(emma["id"], borrower="bob")

    mine = _get(client, alice_headers, "most-borrowed")
    assert mine == [{"book_id": dune["id"], "book_title": "Dune", "borrows": 2}]

    # query params cannot widen a non-admin's view
    assert _get(client, alice_headers, "most-borrowed", username="bob", role="admin") == mine

    month = datetime.utcnow().strftime("%Y-%m")
    assert _get(client, alice_headers, "monthly-trends") == [{"month": month, "count": 2}]
    assert _get(client, alice_headers, "category-distribution") == [{"category": "Sci-Fi", "count": 1}]

    # admin sees everything, or one user's slice on request
    assert [r["borrows"] for r in _get(client, admin_headers, "most-borrowed")] == [3, 2]
    assert _get(client, admin_headers, "monthly-trends") == [{"month": month, "count": 5}]
    assert len(_get(client, admin_headers, "category-distribution")) == 3
    bob_view = _get(client, admin_headers, "most-borrowed", username="bob", role="user")
    assert bob_view == [{"book_id": emma["id"], "book_title": "Emma", "borrows": 3}]


def test_deleting_returned_record_changes_history(client, admin_headers, make_book, lend):
    book = make_book(quantity=1)
    record = lend(book["id"]).get_json()
    client.post(f"/api/lending/return/{record['id']}", headers=admin_headers)
    assert _get(client, admin_headers, "most-borrowed")[0]["borrows"] == 1

    client.delete(f"/api/lending/{record['id']}", headers=admin_headers)
    assert _get(client, admin_headers, "most-borrowed") == []
