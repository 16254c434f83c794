"""Utility for resolving account labels to IDs."""

from kasbook.domain.account import AccountService
from kasbook.domain.errors import AccountNotFound, NotFoundError, account_label_not_found


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve account label or ID to account ID.

    Labels win over IDs, so an account literally labelled "2" is still
    reachable by name.

    Args:
        account_service: AccountService instance
        account: Account label (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        NotFoundError: If account is not found
    """
    # If it's already an integer, use it as ID
    if isinstance(account, int):
        return account_service.require_account(account).id

    label = account.strip()
    by_label = account_service.get_account_by_label(label)
    if by_label is not None:
        return by_label.id

    try:
        account_id = int(label)
    except ValueError:
        raise NotFoundError(account_label_not_found(label)) from None

    account_obj = account_service.get_account(account_id)
    if account_obj is None:
        raise AccountNotFound(account_id)
    return account_id
