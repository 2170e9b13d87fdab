from __future__ import annotations

import time
from collections.abc import Generator
from datetime import datetime, timedelta, timezone

import httpx
import pytest
from fastapi.testclient import TestClient

import app.web.main as web_main
from app.web.client import BooksApiClient, get_books_api_client
from app.web.main import _parse_published_date, app as web_app
from tests.utils import PUBLISHED, book_payload, make_book


@pytest.fixture()
def api_client(client: TestClient) -> BooksApiClient:
    return BooksApiClient(client, "http://testserver/books")


@pytest.fixture()
def web_client(api_client: BooksApiClient) -> Generator[TestClient, None, None]:
    web_app.dependency_overrides[get_books_api_client] = lambda: api_client
    with TestClient(web_app) as test_client:
        yield test_client
    web_app.dependency_overrides.clear()


@pytest.fixture()
def server_west_of_utc(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    monkeypatch.setenv("TZ", "EST+05")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


def _form(**overrides) -> dict:
    form = {
        "Title": "Dune",
        "Author": "Frank Herbert",
        "PublishedDate": "1965-08-01T00:00",
        "Genre": "Science Fiction",
    }
    form.update(overrides)
    return form


# BooksApiClient


def test_api_client_create_and_get(api_client: BooksApiClient):
    outcome = api_client.create_book(make_book(title="Dune"))

    assert outcome.ok
    assert outcome.book is not None
    fetched = api_client.get_book(outcome.book.id)
    assert fetched == outcome.book


def test_api_client_returns_violations_on_bad_request(api_client: BooksApiClient):
    outcome = api_client.create_book(make_book(title=" "))

    assert not outcome.ok
    assert outcome.errors == ["Title can't be empty or whitespace"]


def test_api_client_get_missing_book_is_none(api_client: BooksApiClient):
    assert api_client.get_book(12) is None


def test_api_client_update_and_delete_missing_book(api_client: BooksApiClient):
    assert not api_client.update_book(3, make_book()).ok
    assert not api_client.delete_book(3).ok


def test_api_client_lists_range(api_client: BooksApiClient):
    for title in ("A", "B", "C"):
        api_client.create_book(make_book(title=title))

    assert [book.title for book in api_client.list_books()] == ["A", "B", "C"]
    assert [book.title for book in api_client.list_books_in_range(2, 3)] == ["B", "C"]


def test_api_client_raises_on_unexpected_status(api_client: BooksApiClient):
    with pytest.raises(httpx.HTTPStatusError):
        api_client.list_books_in_range(3, 2)


# web pages


def test_index_lists_books(web_client: TestClient, client: TestClient):
    client.post("/books", json=book_payload(Title="The Hobbit"))

    response = web_client.get("/books")

    assert response.status_code == 200
    assert "The Hobbit" in response.text


def test_index_with_empty_catalog(web_client: TestClient):
    response = web_client.get("/books")

    assert response.status_code == 200
    assert "No books in the catalog." in response.text


def test_root_redirects_to_index(web_client: TestClient):
    response = web_client.get("/", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"].endswith("/books")


def test_create_form_renders(web_client: TestClient):
    response = web_client.get("/books/create")

    assert response.status_code == 200
    assert 'name="Title"' in response.text


def test_create_posts_to_api_and_redirects(web_client: TestClient, client: TestClient):
    response = web_client.post("/books/create", data=_form(), follow_redirects=False)

    assert response.status_code == 303
    books = client.get("/books").json()
    assert [book["Title"] for book in books] == ["Dune"]
    stored = datetime.fromisoformat(books[0]["PublishedDate"].replace("Z", "+00:00"))
    assert stored == datetime(1965, 8, 1).astimezone()


def test_create_with_future_date_rerenders_form(web_client: TestClient, client: TestClient):
    future = (datetime.now() + timedelta(days=2)).strftime("%Y-%m-%dT%H:%M")

    response = web_client.post("/books/create", data=_form(PublishedDate=future))

    assert response.status_code == 200
    assert "Unable to create book." in response.text
    assert "Published date must be less than the current date and time." in response.text
    assert client.get("/books").json() == []


def test_create_with_unparseable_date_does_not_call_api(web_client: TestClient, client: TestClient):
    response = web_client.post("/books/create", data=_form(PublishedDate="yesterday"))

    assert response.status_code == 200
    assert "Published date is not a valid date." in response.text
    assert client.get("/books").json() == []


def test_edit_form_is_prefilled(web_client: TestClient, client: TestClient):
    book_id = client.post("/books", json=book_payload(Title="Emma")).json()["Id"]

    response = web_client.get(f"/books/{book_id}/edit")

    assert response.status_code == 200
    assert 'value="Emma"' in response.text
    assert f'value="{PUBLISHED.astimezone():%Y-%m-%dT%H:%M}"' in response.text


def test_edit_form_for_missing_book_is_not_found(web_client: TestClient):
    assert web_client.get("/books/9/edit").status_code == 404


def test_edit_updates_book(web_client: TestClient, client: TestClient):
    book_id = client.post("/books", json=book_payload(Title="Emma")).json()["Id"]

    response = web_client.post(
        f"/books/{book_id}/edit",
        data=_form(Id=str(book_id), Title="Persuasion"),
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert client.get(f"/books/{book_id}").json()["Title"] == "Persuasion"


def test_edit_with_mismatched_id_is_bad_request(web_client: TestClient, client: TestClient):
    book_id = client.post("/books", json=book_payload()).json()["Id"]

    response = web_client.post(f"/books/{book_id}/edit", data=_form(Id=str(book_id + 1)))

    assert response.status_code == 400


def test_edit_with_invalid_fields_rerenders_form(web_client: TestClient, client: TestClient):
    book_id = client.post("/books", json=book_payload(Title="Emma")).json()["Id"]

    response = web_client.post(f"/books/{book_id}/edit", data=_form(Id=str(book_id), Genre=" "))

    assert response.status_code == 200
    assert "Unable to update book." in response.text
    assert client.get(f"/books/{book_id}").json()["Title"] == "Emma"


def test_delete_confirmation_and_delete(web_client: TestClient, client: TestClient):
    book_id = client.post("/books", json=book_payload(Title="Ulysses")).json()["Id"]

    confirm = web_client.get(f"/books/{book_id}/delete")
    assert confirm.status_code == 200
    assert "Ulysses" in confirm.text

    response = web_client.post(f"/books/{book_id}/delete", follow_redirects=False)

    assert response.status_code == 303
    assert client.get(f"/books/{book_id}").status_code == 404


def test_delete_missing_book_shows_error(web_client: TestClient):
    response = web_client.post("/books/4/delete")

    assert response.status_code == 200
    assert "Unable to delete book." in response.text


def test_form_dates_are_read_in_server_local_time(server_west_of_utc):
    parsed = _parse_published_date("2020-01-01T10:00")

    assert parsed == datetime(2020, 1, 1, 15, 0, tzinfo=timezone.utc)


def test_form_date_with_offset_is_kept():
    parsed = _parse_published_date("2020-01-01T10:00+02:00")

    assert parsed == datetime(2020, 1, 1, 8, 0, tzinfo=timezone.utc)


def test_create_rejects_local_time_hours_ahead_west_of_utc(
    server_west_of_utc, web_client: TestClient, client: TestClient
):
    # two hours ahead locally is still three hours behind UTC wall clock
    soon = (datetime.now() + timedelta(hours=2)).strftime("%Y-%m-%dT%H:%M")

    response = web_client.post("/books/create", data=_form(PublishedDate=soon))

    assert response.status_code == 200
    assert "Published date must be less than the current date and time." in response.text
    assert client.get("/books").json() == []


def test_logging_is_configured_on_startup_not_import(monkeypatch: pytest.MonkeyPatch):
    levels: list[str] = []
    monkeypatch.setattr(web_main, "configure_logging", levels.append)

    assert levels == []
    with TestClient(web_app):
        assert levels == [web_main.get_settings().log_level]
