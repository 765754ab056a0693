"""Stock store factory.

Provides get_stock_store() / set_stock_store() to swap implementations:
- DomainStockStore (default) over the Product aggregate
- FakeStockStore for tests that need real thread races or outages
"""

from commerce.inventory.port import StockStore

_current_store: StockStore | None = None


def get_stock_store() -> StockStore:
    """Return the active stock store. Defaults to DomainStockStore."""
    global _current_store
    if _current_store is None:
        from commerce.inventory.domain_store import DomainStockStore

        _current_store = DomainStockStore()
    return _current_store


def set_stock_store(store: StockStore) -> None:
    global _current_store
    _current_store = store


def reset_stock_store() -> None:
    """Reset to the default store."""
    global _current_store
    _current_store = None
