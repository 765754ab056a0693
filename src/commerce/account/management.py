"""Account administration: suspend a buyer."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from commerce.account.account import UserAccount
from commerce.domain import commerce


@commerce.command(part_of="UserAccount")
class SuspendAccount:
    """Ban a buyer. Suspended accounts are refused at wishlist sign-in."""

    user_id = Identifier(required=True)


@commerce.command_handler(part_of=UserAccount)
class AccountManagementHandler:
    @handle(SuspendAccount)
    def suspend_account(self, command):
        repo = current_domain.repository_for(UserAccount)
        account = repo.get(command.user_id)
        if not account.is_banned:
            account.suspend()
            repo.add(account)
