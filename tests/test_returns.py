"""Tests for the rental return workflow and ``POST /api/returns``."""

import asyncio
from datetime import timedelta

import pytest

from movie_rental_api.app.api.v1.endpoints.returns import get_return_workflow
from movie_rental_api.app.core.db import new_object_id, parse_timestamp, utcnow
from movie_rental_api.app.core.exceptions import (
    InvalidInput,
    RentalAlreadyProcessed,
    RentalNotFound,
    RepositoryTimeout,
    RepositoryUnavailable,
)
from movie_rental_api.app.main import app
from movie_rental_api.app.repositories import InventoryRepository, MovieRepository, RentalRepository
from movie_rental_api.app.services.return_service import RentalReturnWorkflow


def post_return(client, token, **body):
    headers = {"x-auth-token": token} if token else {}
    return client.post("/api/returns", json=body, headers=headers, follow_redirects=False)


class StaleRentalRepository(RentalRepository):
    """Serves the first lookup result forever, like a request that read before another wrote."""

    def __init__(self):
        self._cached = {}

    def find_by_pair(self, customer_id, movie_id):
        key = (customer_id, movie_id)
        if key not in self._cached:
            self._cached[key] = super().find_by_pair(customer_id, movie_id)
        return self._cached[key]


class FlakyInventory(InventoryRepository):
    def __init__(self, failures, error=RepositoryTimeout):
        self.failures = failures
        self.error = error
        self.calls = 0

    def increment_stock(self, movie_id):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error("increment stock timed out")
        return super().increment_stock(movie_id)


class TestReturnEndpoint:
    def test_should_return_401_if_client_is_not_logged_in(self, client):
        res = post_return(client, None, customerId=new_object_id(), movieId=new_object_id())
        assert res.status_code == 401

    def test_should_return_400_if_token_is_invalid(self, client):
        res = post_return(client, "1", customerId=new_object_id(), movieId=new_object_id())
        assert res.status_code == 400

    def test_should_return_400_if_no_customer_id_provided(self, client, token):
        res = post_return(client, token, movieId=new_object_id())
        assert res.status_code == 400
        assert "customerId" in res.json()["detail"]

    def test_should_return_400_if_no_movie_id_provided(self, client, token):
        res = post_return(client, token, customerId=new_object_id())
        assert res.status_code == 400
        assert "movieId" in res.json()["detail"]

    def test_should_return_400_if_id_is_malformed(self, client, token):
        res = post_return(client, token, customerId="1234", movieId=new_object_id())
        assert res.status_code == 400

    def test_should_return_404_if_no_rental_found(self, client, token):
        res = post_return(client, token, customerId=new_object_id(), movieId=new_object_id())
        assert res.status_code == 404

    def test_should_return_409_if_return_already_processed(self, client, token, make_rental):
        rental = make_rental(date_returned=utcnow(), rental_fee=1)

        res = post_return(client, token, customerId=rental.customer.id, movieId=rental.movie.id)

        assert res.status_code == 409

    def test_should_return_200_if_request_is_valid(self, client, token, customer, movie, make_rental):
        make_rental(customer_id=customer["id"], movie_id=movie["id"])

        res = post_return(client, token, customerId=customer["id"], movieId=movie["id"])

        assert res.status_code == 200
        assert "x-inventory-status" not in res.headers

    def test_should_report_a_deleted_movie_separately(self, client, token, customer, movie, make_rental):
        make_rental(customer_id=customer["id"], movie_id=movie["id"])
        MovieRepository().delete_by_id(movie["id"])

        res = post_return(client, token, customerId=customer["id"], movieId=movie["id"])

        assert res.status_code == 200
        assert res.headers["x-inventory-status"] == "movie-missing"
        assert res.json()["rentalFee"] is not None

    def test_should_set_the_return_date(self, client, token, make_rental):
        rental = make_rental()

        res = post_return(client, token, customerId=rental.customer.id, movieId=rental.movie.id)

        diff = utcnow() - parse_timestamp(res.json()["dateReturned"])
        assert diff < timedelta(seconds=10)

    def test_should_set_the_rental_fee(self, client, token, make_rental, issued_at):
        rental = make_rental(date_out=issued_at)

        app.dependency_overrides[get_return_workflow] = lambda: RentalReturnWorkflow(
            clock=lambda: issued_at + timedelta(days=6)
        )

        res = post_return(client, token, customerId=rental.customer.id, movieId=rental.movie.id)

        assert res.json()["rentalFee"] == 12

    def test_should_increase_the_movie_stock(self, client, token, customer, movie, make_rental):
        make_rental(customer_id=customer["id"], movie_id=movie["id"])

        post_return(client, token, customerId=customer["id"], movieId=movie["id"])

        movie_in_db = client.get(f"/api/movies/{movie['id']}").json()
        assert movie_in_db["numberInStock"] == movie["number_in_stock"] + 1

    def test_should_return_exactly_the_rental_fields(self, client, token, make_rental):
        rental = make_rental()

        res = post_return(client, token, customerId=rental.customer.id, movieId=rental.movie.id)

        body = res.json()
        assert set(body) == {"customer", "movie", "dateOut", "dateReturned", "rentalFee"}
        assert body["customer"]["id"] == rental.customer.id
        assert body["movie"]["id"] == rental.movie.id

    def test_second_return_conflicts_and_restocks_once(self, client, token, customer, movie, make_rental):
        make_rental(customer_id=customer["id"], movie_id=movie["id"])

        first = post_return(client, token, customerId=customer["id"], movieId=movie["id"])
        second = post_return(client, token, customerId=customer["id"], movieId=movie["id"])

        assert first.status_code == 200
        assert second.status_code == 409
        assert MovieRepository().find_by_id(movie["id"])["number_in_stock"] == movie["number_in_stock"] + 1

    def test_restock_failure_is_reported_as_degraded_success(self, client, token, customer, movie, make_rental):
        make_rental(customer_id=customer["id"], movie_id=movie["id"])
        app.dependency_overrides[get_return_workflow] = lambda: RentalReturnWorkflow(
            inventory=FlakyInventory(failures=2)
        )

        res = post_return(client, token, customerId=customer["id"], movieId=movie["id"])

        assert res.status_code == 200
        assert res.headers["x-inventory-status"] == "pending"
        assert res.json()["rentalFee"] is not None

    def test_persistence_failure_is_a_generic_500(self, client, token):
        class BrokenRentals(RentalRepository):
            def find_by_pair(self, customer_id, movie_id):
                raise RepositoryUnavailable("find rental failed: disk I/O error")

        app.dependency_overrides[get_return_workflow] = lambda: RentalReturnWorkflow(rentals=BrokenRentals())

        res = post_return(client, token, customerId=new_object_id(), movieId=new_object_id())

        assert res.status_code == 500
        assert res.json() == {"detail": "Something failed."}


class TestRentalReturnWorkflow:
    def test_closes_rental_and_restocks(self, customer, movie, make_rental, issued_at):
        rental = make_rental(customer_id=customer["id"], movie_id=movie["id"], date_out=issued_at)
        returned_at = issued_at + timedelta(hours=1)
        workflow = RentalReturnWorkflow(clock=lambda: returned_at)

        outcome = asyncio.run(workflow.return_rental(customer["id"], movie["id"]))

        assert outcome.restocked is True
        assert outcome.rental.date_returned == returned_at
        assert outcome.rental.rental_fee == 2
        stored = RentalRepository().get(rental.id)
        assert stored.date_returned == returned_at
        assert stored.rental_fee == 2
        assert MovieRepository().find_by_id(movie["id"])["number_in_stock"] == 8

    def test_fee_uses_the_rate_captured_at_issue(self, customer, movie, make_rental, issued_at):
        make_rental(customer_id=customer["id"], movie_id=movie["id"], date_out=issued_at, daily_rental_rate=3)
        MovieRepository().update_by_id(movie["id"], {"daily_rental_rate": 100})
        workflow = RentalReturnWorkflow(clock=lambda: issued_at + timedelta(days=2))

        outcome = asyncio.run(workflow.return_rental(customer["id"], movie["id"]))

        assert outcome.rental.rental_fee == 6

    def test_unknown_pair_is_not_found(self):
        with pytest.raises(RentalNotFound):
            asyncio.run(RentalReturnWorkflow().return_rental(new_object_id(), new_object_id()))

    def test_malformed_ids_fail_before_any_lookup(self):
        class UntouchableRentals(RentalRepository):
            def find_by_pair(self, customer_id, movie_id):
                raise AssertionError("lookup must not happen")

        workflow = RentalReturnWorkflow(rentals=UntouchableRentals())

        with pytest.raises(InvalidInput):
            asyncio.run(workflow.return_rental("not-an-id", new_object_id()))

    def test_concurrent_returns_restock_once(self, customer, movie, make_rental):
        rental = make_rental(customer_id=customer["id"], movie_id=movie["id"])
        stale = StaleRentalRepository()
        first = RentalReturnWorkflow(rentals=stale)
        second = RentalReturnWorkflow(rentals=stale)
        # Both requests read the rental while it is still open.
        assert stale.find_by_pair(customer["id"], movie["id"]).date_returned is None

        async def race():
            return await asyncio.gather(
                first.return_rental(customer["id"], movie["id"]),
                second.return_rental(customer["id"], movie["id"]),
                return_exceptions=True,
            )

        results = asyncio.run(race())

        assert sum(1 for r in results if isinstance(r, RentalAlreadyProcessed)) == 1
        winner = next(r for r in results if not isinstance(r, Exception))
        assert RentalRepository().get(rental.id).rental_fee == winner.rental.rental_fee
        assert MovieRepository().find_by_id(movie["id"])["number_in_stock"] == 8

    def test_restock_timeout_is_retried_once(self, customer, movie, make_rental):
        make_rental(customer_id=customer["id"], movie_id=movie["id"])
        inventory = FlakyInventory(failures=1)

        outcome = asyncio.run(RentalReturnWorkflow(inventory=inventory).return_rental(customer["id"], movie["id"]))

        assert outcome.restocked is True
        assert inventory.calls == 2
        assert MovieRepository().find_by_id(movie["id"])["number_in_stock"] == 8

    def test_restock_failure_keeps_rental_closed(self, customer, movie, make_rental):
        rental = make_rental(customer_id=customer["id"], movie_id=movie["id"])
        inventory = FlakyInventory(failures=5, error=RepositoryUnavailable)

        outcome = asyncio.run(RentalReturnWorkflow(inventory=inventory).return_rental(customer["id"], movie["id"]))

        assert outcome.restocked is False
        assert inventory.calls == 1
        assert RentalRepository().get(rental.id).date_returned is not None
        assert MovieRepository().find_by_id(movie["id"])["number_in_stock"] == 7

    def test_open_rental_preferred_over_earlier_closed_one(self, customer, movie, make_rental, issued_at):
        make_rental(
            customer_id=customer["id"],
            movie_id=movie["id"],
            date_out=issued_at,
            date_returned=issued_at + timedelta(days=1),
            rental_fee=2,
        )
        open_rental = make_rental(customer_id=customer["id"], movie_id=movie["id"], date_out=issued_at + timedelta(days=3))

        outcome = asyncio.run(
            RentalReturnWorkflow(clock=lambda: issued_at + timedelta(days=4)).return_rental(customer["id"], movie["id"])
        )

        assert outcome.rental.date_out == open_rental.date_out
        assert outcome.rental.rental_fee == 2
