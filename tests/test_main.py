from decimal import Decimal


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"

def create_user(client, email="test@example.com"):
    r = client.post("/users/", json={"name": "Test User", "email": email})
    assert r.status_code == 200
    return r.json()["id"]

def create_book(client, isbn="12345"):
    r = client.post("/books/", json={"title": "Test Book", "author": "Author", "isbn": isbn})
    assert r.status_code == 200
    assert r.json()["available"] is True
    return r.json()["id"]

def test_create_user_and_book_and_borrow_return(client):
    user_id = create_user(client)
    book_id = create_book(client)

    # Borrow book on day 0
    r = client.post(f"/loans/borrow?user_id={user_id}&book_id={book_id}&today=2024-01-01")
    assert r.status_code == 200
    loan = r.json()
    assert loan["active"] is True
    assert loan["due_date"] == "2024-01-15"
    assert client.get(f"/books/{book_id}").json()["available"] is False

    # Return on day 20, six days late
    r = client.post(f"/loans/return/{loan['id']}?today=2024-01-21")
    assert r.status_code == 200
    assert r.json()["active"] is False
    assert r.json()["returned_on"] == "2024-01-21"
    assert Decimal(r.json()["fine"]) == Decimal("3.00")
    assert client.get(f"/books/{book_id}").json()["available"] is True
    assert Decimal(client.get(f"/users/{user_id}").json()["fines"]) == Decimal("3.00")

    # Settle the balance
    r = client.post(f"/users/{user_id}/payments", json={"amount": "3.01"})
    assert r.status_code == 400
    r = client.post(f"/users/{user_id}/payments", json={"amount": "3.00"})
    assert r.status_code == 200
    assert Decimal(r.json()["fines"]) == Decimal("0")

def test_borrow_unavailable_book(client):
    book_id = create_book(client)
    first = create_user(client, "one@example.com")
    second = create_user(client, "two@example.com")
    assert client.post(f"/loans/borrow?user_id={first}&book_id={book_id}").status_code == 200
    r = client.post(f"/loans/borrow?user_id={second}&book_id={book_id}")
    assert r.status_code == 400
    assert r.json()["detail"] == "Book is not available"
    assert len(client.get("/loans/").json()) == 1

def test_double_return(client):
    user_id = create_user(client)
    book_id = create_book(client)
    loan_id = client.post(f"/loans/borrow?user_id={user_id}&book_id={book_id}").json()["id"]
    assert client.post(f"/loans/return/{loan_id}").status_code == 200
    r = client.post(f"/loans/return/{loan_id}")
    assert r.status_code == 400
    assert r.json()["detail"] == "Loan already closed"
    assert client.get(f"/books/{book_id}").json()["available"] is True

def test_unknown_ids_are_404(client):
    assert client.get("/books/99").status_code == 404
    assert client.get("/users/99").status_code == 404
    assert client.get("/loans/99").status_code == 404
    assert client.post("/loans/return/99").status_code == 404
    assert client.post("/loans/borrow?user_id=1&book_id=1").status_code == 404

def test_duplicate_email_and_isbn(client):
    create_user(client)
    create_book(client)
    assert client.post("/users/", json={"name": "Again", "email": "test@example.com"}).status_code == 400
    assert client.post("/books/", json={"title": "Again", "isbn": "12345"}).status_code == 400

def test_fine_quote_and_notify(client):
    user_id = create_user(client)
    book_id = create_book(client)
    loan_id = client.post(f"/loans/borrow?user_id={user_id}&book_id={book_id}&today=2024-01-01").json()["id"]
    r = client.get(f"/loans/{loan_id}/fine?today=2024-01-15")
    assert r.json()["overdue"] is False
    assert Decimal(r.json()["amount"]) == 0
    r = client.get(f"/loans/{loan_id}/fine?today=2024-01-18")
    assert r.json()["overdue"] is True
    assert Decimal(r.json()["amount"]) == Decimal("1.50")
    assert client.post(f"/loans/{loan_id}/notify").json() == {"ok": True}

def test_list_filters_and_metrics(client):
    user_id = create_user(client)
    book_id = create_book(client)
    create_book(client, isbn="67890")
    client.post(f"/loans/borrow?user_id={user_id}&book_id={book_id}&today=2000-01-01")
    assert [b["id"] for b in client.get("/books/?available=false").json()] == [book_id]
    assert len(client.get("/loans/?active=true").json()) == 1
    assert client.get("/loans/?active=false").json() == []
    m = client.get("/metrics").json()
    assert m["total_books"] == 2
    assert m["total_users"] == 1
    assert m["active_loans"] == 1
    assert m["overdue_loans"] == 1
    assert m["top_borrowed"] == [{"title": "Test Book", "count": 1}]

def test_blank_names_rejected(client):
    assert client.post("/users/", json={"name": "   ", "email": "blank@example.com"}).status_code == 422
    assert client.post("/books/", json={"title": "   "}).status_code == 422

def test_notify_only_logs(client):
    from lending_library.api import routes
    user_id = create_user(client)
    book_id = create_book(client)
    loan_id = client.post(f"/loans/borrow?user_id={user_id}&book_id={book_id}").json()["id"]
    for _ in range(3):
        assert client.post(f"/loans/{loan_id}/notify").status_code == 200
    assert not hasattr(routes.notifier, "sent")
