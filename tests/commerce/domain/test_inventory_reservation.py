import random
import threading

import pytest
from commerce.errors import OutOfStock, StoreFailure
from commerce.inventory.fake_store import FakeStockStore
from commerce.inventory.port import StockRecord
from commerce.inventory.reservation import InventoryReservation, Reservation
from protean.exceptions import ValidationError


def _race(reservation, calls):
    """Start every (product_id, quantity) call on its own thread at the same moment."""
    barrier = threading.Barrier(len(calls))
    results = [None] * len(calls)

    def run(index, product_id, quantity):
        barrier.wait()
        results[index] = reservation.reserve(product_id, quantity)

    threads = [threading.Thread(target=run, args=(i, *call)) for i, call in enumerate(calls)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return results


class TestReserve:
    def test_reserve_decrements_stock(self):
        store = FakeStockStore({"P": 5})
        result = InventoryReservation(store).reserve("P", 2)

        assert result == Reservation(product_id="P", quantity=2)
        assert store.quantity_of("P") == 3

    def test_reserve_exact_remaining_stock(self):
        store = FakeStockStore({"P": 2})
        assert isinstance(InventoryReservation(store).reserve("P", 2), Reservation)
        assert store.quantity_of("P") == 0

    def test_insufficient_stock_is_refused_without_writing(self):
        store = FakeStockStore({"P": 1})
        result = InventoryReservation(store).reserve("P", 2)

        assert result == OutOfStock(product_id="P", available=1)
        assert store.quantity_of("P") == 1
        assert not any(call["method"] == "write_if_current" for call in store.calls)

    def test_unknown_product_is_out_of_stock(self):
        result = InventoryReservation(FakeStockStore()).reserve("ghost", 1)
        assert result == OutOfStock(product_id="ghost", available=0)
        assert result.code == "OUT_OF_STOCK"

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationError) as exc:
            InventoryReservation(FakeStockStore({"P": 5})).reserve("P", 0)
        assert "quantity" in exc.value.messages

    def test_unavailable_store_is_a_store_failure(self):
        store = FakeStockStore({"P": 5})
        store.configure(available=False)
        result = InventoryReservation(store).reserve("P", 1)

        assert isinstance(result, StoreFailure)
        assert result.code == "STORE_FAILURE"


class TestConditionalWrite:
    def test_stale_record_is_not_written(self):
        store = FakeStockStore({"P": 5})
        stale = store.read("P")
        store.seed("P", 7)

        assert store.write_if_current(stale, 4) is False
        assert store.quantity_of("P") == 7

    def test_lost_race_retries_from_a_fresh_read(self):
        store = FakeStockStore({"P": 5})
        reservation = InventoryReservation(store)
        store.interleave(lambda: reservation.reserve("P", 1))

        result = reservation.reserve("P", 2)

        assert isinstance(result, Reservation)
        assert store.quantity_of("P") == 2

    def test_competitor_taking_the_last_unit_means_out_of_stock(self):
        store = FakeStockStore({"P": 1})
        reservation = InventoryReservation(store)
        store.interleave(lambda: reservation.reserve("P", 1))

        assert isinstance(reservation.reserve("P", 1), OutOfStock)
        assert store.quantity_of("P") == 0

    def test_gives_up_after_max_attempts(self):
        class AlwaysStale(FakeStockStore):
            def write_if_current(self, record: StockRecord, quantity: int) -> bool:
                return False

        store = AlwaysStale({"P": 5})
        result = InventoryReservation(store, max_attempts=3).reserve("P", 1)

        assert isinstance(result, StoreFailure)
        assert store.quantity_of("P") == 5
        assert [call["method"] for call in store.calls] == ["read"] * 3


class TestRelease:
    def test_release_gives_stock_back(self):
        store = FakeStockStore({"P": 5})
        reservation = InventoryReservation(store)
        held = reservation.reserve("P", 3)

        assert reservation.release(held) is True
        assert store.quantity_of("P") == 5

    def test_release_against_unavailable_store_reports_failure(self):
        store = FakeStockStore({"P": 5})
        reservation = InventoryReservation(store)
        held = reservation.reserve("P", 1)
        store.configure(available=False)

        assert reservation.release(held) is False


class TestConcurrentReservations:
    def test_two_buyers_for_the_last_copy(self):
        store = FakeStockStore({"P": 1})
        results = _race(InventoryReservation(store), [("P", 1), ("P", 1)])

        assert sum(isinstance(r, Reservation) for r in results) == 1
        assert sum(isinstance(r, OutOfStock) for r in results) == 1
        assert store.quantity_of("P") == 0

    def test_many_buyers_never_oversell(self):
        store = FakeStockStore({"P": 10})
        # Every lost race means another buyer won, so 11 attempts always settle
        reservation = InventoryReservation(store, max_attempts=25)
        results = _race(reservation, [("P", 1)] * 25)

        assert sum(isinstance(r, Reservation) for r in results) == 10
        assert sum(isinstance(r, OutOfStock) for r in results) == 15
        assert store.quantity_of("P") == 0

    def test_mixed_quantities_never_exceed_initial_stock(self):
        rng = random.Random(7)
        for _ in range(5):
            initial = rng.randint(1, 12)
            store = FakeStockStore({"P": initial})
            calls = [("P", rng.randint(1, 4)) for _ in range(12)]
            results = _race(InventoryReservation(store, max_attempts=50), calls)

            taken = sum(r.quantity for r in results if isinstance(r, Reservation))
            assert taken <= initial
            assert store.quantity_of("P") == initial - taken
            assert all(isinstance(r, (Reservation, OutOfStock)) for r in results)
