"""Tests for the genre, customer, movie and rental endpoints."""

import pytest

from movie_rental_api.app.core.config import settings
from movie_rental_api.app.core.db import new_object_id
from movie_rental_api.app.repositories import MovieRepository, RentalRepository


def auth(token):
    return {"x-auth-token": token}


class TestGenres:
    def test_list_genres_sorted_by_name(self, client, token):
        client.post("/api/genres", json={"name": "Thriller"}, headers=auth(token))
        client.post("/api/genres", json={"name": "Comedy"}, headers=auth(token))

        res = client.get("/api/genres")

        assert res.status_code == 200
        assert [g["name"] for g in res.json()] == ["Comedy", "Thriller"]

    def test_name_too_short_is_400(self, client, token):
        res = client.post("/api/genres", json={"name": "abc"}, headers=auth(token))
        assert res.status_code == 400

    def test_get_unknown_genre_is_404(self, client):
        assert client.get(f"/api/genres/{new_object_id()}").status_code == 404

    def test_get_malformed_id_is_404(self, client):
        assert client.get("/api/genres/1").status_code == 404

    def test_update_genre(self, client, token, genre):
        res = client.put(f"/api/genres/{genre['id']}", json={"name": "Sci-Fi Classics"}, headers=auth(token))
        assert res.status_code == 200
        assert res.json() == {"id": genre["id"], "name": "Sci-Fi Classics"}

    def test_admin_can_delete_genre(self, client, admin_token, genre):
        res = client.delete(f"/api/genres/{genre['id']}", headers=auth(admin_token))
        assert res.status_code == 200
        assert client.get(f"/api/genres/{genre['id']}").status_code == 404


class TestCustomers:
    def test_create_and_get_customer(self, client, token):
        res = client.post(
            "/api/customers",
            json={"name": "John Smith", "isGold": True, "phone": "555-0199"},
            headers=auth(token),
        )
        assert res.status_code == 200
        created = res.json()
        assert created["isGold"] is True

        fetched = client.get(f"/api/customers/{created['id']}").json()
        assert fetched == created

    def test_create_customer_requires_token(self, client):
        res = client.post("/api/customers", json={"name": "John Smith", "phone": "555-0199"})
        assert res.status_code == 401

    def test_delete_customer_requires_admin(self, client, token, admin_token, customer):
        assert client.delete(f"/api/customers/{customer['id']}", headers=auth(token)).status_code == 403
        assert client.delete(f"/api/customers/{customer['id']}", headers=auth(admin_token)).status_code == 200

    def test_update_unknown_customer_is_404(self, client, token):
        res = client.put(
            f"/api/customers/{new_object_id()}",
            json={"name": "John Smith", "phone": "555-0199"},
            headers=auth(token),
        )
        assert res.status_code == 404


class TestMovies:
    def test_create_movie_snapshots_genre(self, client, token, genre):
        res = client.post(
            "/api/movies",
            json={"title": "Alien Nation", "genreId": genre["id"], "numberInStock": 3, "dailyRentalRate": 1.5},
            headers=auth(token),
        )
        assert res.status_code == 200
        assert res.json()["genre"] == {"id": genre["id"], "name": genre["name"]}

    def test_create_movie_with_unknown_genre_is_400(self, client, token):
        res = client.post(
            "/api/movies",
            json={"title": "Alien Nation", "genreId": new_object_id(), "numberInStock": 3, "dailyRentalRate": 1},
            headers=auth(token),
        )
        assert res.status_code == 400

    def test_stock_above_cap_is_400(self, client, token, genre, monkeypatch):
        monkeypatch.setattr(settings, "max_number_in_stock", 10)
        res = client.post(
            "/api/movies",
            json={"title": "Alien Nation", "genreId": genre["id"], "numberInStock": 11, "dailyRentalRate": 1},
            headers=auth(token),
        )
        assert res.status_code == 400

    def test_delete_movie_requires_admin(self, client, token, admin_token, movie):
        assert client.delete(f"/api/movies/{movie['id']}", headers=auth(token)).status_code == 403
        assert client.delete(f"/api/movies/{movie['id']}", headers=auth(admin_token)).status_code == 200


class TestRentals:
    def test_issue_rental_takes_copy_out_of_stock(self, client, token, customer, movie):
        res = client.post(
            "/api/rentals",
            json={"customerId": customer["id"], "movieId": movie["id"]},
            headers=auth(token),
        )

        assert res.status_code == 200
        body = res.json()
        assert body["customer"]["name"] == customer["name"]
        assert body["movie"]["dailyRentalRate"] == movie["daily_rental_rate"]
        assert body["dateReturned"] is None
        assert body["rentalFee"] is None
        assert MovieRepository().find_by_id(movie["id"])["number_in_stock"] == 6

    @pytest.mark.parametrize("missing", ["customer", "movie"])
    def test_issue_rental_with_unknown_entity_is_400(self, client, token, customer, movie, missing):
        body = {"customerId": customer["id"], "movieId": movie["id"]}
        body[f"{missing}Id"] = new_object_id()

        res = client.post("/api/rentals", json=body, headers=auth(token))

        assert res.status_code == 400
        assert res.json()["detail"] == f"Invalid {missing}."

    def test_issue_rental_out_of_stock_is_400(self, client, token, customer, movie):
        MovieRepository().update_by_id(movie["id"], {"number_in_stock": 0})

        res = client.post(
            "/api/rentals",
            json={"customerId": customer["id"], "movieId": movie["id"]},
            headers=auth(token),
        )

        assert res.status_code == 400
        assert res.json()["detail"] == "Movie not in stock."
        assert RentalRepository().list_all() == []

    def test_rental_keeps_customer_snapshot(self, client, token, customer, movie):
        rental = client.post(
            "/api/rentals",
            json={"customerId": customer["id"], "movieId": movie["id"]},
            headers=auth(token),
        ).json()
        client.put(
            f"/api/customers/{customer['id']}",
            json={"name": "Renamed Customer", "phone": "555-0000"},
            headers=auth(token),
        )

        stored = client.get(f"/api/rentals/{rental['id']}").json()

        assert stored["customer"]["name"] == customer["name"]

    def test_list_rentals_most_recent_first(self, client, make_rental, issued_at):
        older = make_rental(date_out=issued_at)
        newer = make_rental()

        ids = [r["id"] for r in client.get("/api/rentals").json()]

        assert ids == [newer.id, older.id]
