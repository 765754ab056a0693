from commerce.account.account import UserAccount
from commerce.wishlist.remote import DomainWishlistRemote
from protean import current_domain


class TestDomainWishlistRemote:
    def test_unknown_user_has_empty_wishlist(self):
        assert DomainWishlistRemote().fetch_ids("nobody") == []

    def test_store_creates_account_when_missing(self):
        remote = DomainWishlistRemote()
        remote.store_ids("u1", ["A", "B"])

        account = current_domain.repository_for(UserAccount).get("u1")
        assert account.wishlist == ["A", "B"]
        assert remote.fetch_ids("u1") == ["A", "B"]

    def test_store_replaces_existing_list(self):
        current_domain.repository_for(UserAccount).add(UserAccount.register(user_id="u1"))
        remote = DomainWishlistRemote()
        remote.store_ids("u1", ["A"])
        remote.store_ids("u1", ["C"])
        assert remote.fetch_ids("u1") == ["C"]

    def test_is_suspended(self):
        account = UserAccount.register(user_id="u1")
        account.suspend()
        current_domain.repository_for(UserAccount).add(account)

        remote = DomainWishlistRemote()
        assert remote.is_suspended("u1")
        assert not remote.is_suspended("u2")
