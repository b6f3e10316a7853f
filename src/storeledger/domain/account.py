"""Account Registry domain service."""

import logging
from typing import Iterable, Optional

from storeledger.database.base import Database
from storeledger.domain.chart import DEFAULT_CHART
from storeledger.domain.entities import (
    Account as AccountEntity,
    AccountCategory,
    AccountType,
    NormalBalance,
)
from storeledger.domain.errors import (
    DuplicateCodeError,
    NotFoundError,
    ValidationError,
    account_not_found,
    duplicate_account_code,
)

logger = logging.getLogger(__name__)

_DEBIT_NORMAL_TYPES = frozenset({AccountType.ASSET, AccountType.EXPENSE})


def normal_balance(account_type: AccountType) -> NormalBalance:
    """Return the side on which accounts of ``account_type`` increase.

    ASSET and EXPENSE are debit-normal; LIABILITY, EQUITY and REVENUE are
    credit-normal. Every balance computation derives its sign from here.
    """
    if AccountType(account_type) in _DEBIT_NORMAL_TYPES:
        return NormalBalance.DEBIT
    return NormalBalance.CREDIT


def classify(account: AccountEntity) -> NormalBalance:
    """Return the normal balance side of an account."""
    return normal_balance(account.account_type)


class AccountService:
    """Service for managing the chart of accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    normal_balance = staticmethod(normal_balance)
    classify = staticmethod(classify)

    def resolve_level(self, parent_id: Optional[int]) -> int:
        """Return the depth level of an account placed under ``parent_id``.

        Raises:
            NotFoundError: If the parent does not exist
        """
        if parent_id is None:
            return 1
        parent = self.db.get_account(parent_id)
        if parent is None:
            raise NotFoundError(account_not_found(parent_id))
        return parent.level + 1

    def create_account(
        self,
        code: str,
        name: str,
        account_type: AccountType,
        category: AccountCategory,
        parent_id: Optional[int] = None,
        description: Optional[str] = None,
    ) -> AccountEntity:
        """Create a new account.

        Args:
            code: Unique account code
            name: Account name
            account_type: ASSET, LIABILITY, EQUITY, REVENUE or EXPENSE
            category: Sub-classification within the type
            parent_id: Optional parent account ID
            description: Optional description

        Returns:
            Created account

        Raises:
            ValidationError: If code or name is empty
            DuplicateCodeError: If the code is used by any account, active or not
            NotFoundError: If the parent does not exist
        """
        code = (code or "").strip()
        name = (name or "").strip()
        if not code:
            raise ValidationError("Account code is required")
        if not name:
            raise ValidationError("Account name is required")
        account_type = AccountType(account_type)
        category = AccountCategory(category)

        if self.db.get_account_by_code(code) is not None:
            raise DuplicateCodeError(duplicate_account_code(code))

        level = self.resolve_level(parent_id)
        account_id = self.db.create_account(
            code=code,
            name=name,
            account_type=account_type,
            category=category,
            parent_id=parent_id,
            level=level,
            description=description,
        )
        logger.info("Created account %s %s (%s)", code, name, account_type.value)
        return self.db.get_account(account_id)

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID."""
        return self.db.get_account(account_id)

    def get_account_by_code(self, code: str) -> Optional[AccountEntity]:
        """Get account by code."""
        return self.db.get_account_by_code(code)

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID or raise NotFoundError."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(
        self,
        account_type: Optional[AccountType] = None,
        include_inactive: bool = False,
        search: Optional[str] = None,
    ) -> list[AccountEntity]:
        """List accounts ordered by code.

        Args:
            account_type: Optional type filter
            include_inactive: Include soft-deleted accounts
            search: Optional substring matched against code and name
        """
        return self.db.list_accounts(
            account_type=account_type, include_inactive=include_inactive, search=search
        )

    def update_account(
        self,
        account_id: int,
        code: Optional[str] = None,
        name: Optional[str] = None,
        category: Optional[AccountCategory] = None,
        parent_id: Optional[int] = None,
        clear_parent: bool = False,
        description: Optional[str] = None,
    ) -> AccountEntity:
        """Update account fields.

        The account type is fixed once created. Moving an account recomputes
        its level and the levels of its descendants.

        Args:
            account_id: Account ID to update
            code: Optional new code
            name: Optional new name
            category: Optional new category
            parent_id: Optional new parent ID
            clear_parent: If True, make the account a root account
            description: Optional new description

        Raises:
            NotFoundError: If the account or the new parent does not exist
            DuplicateCodeError: If the new code is already used
            ValidationError: If the code changes after journal activity, or the
                new parent would create a cycle
        """
        account = self.require_account(account_id)

        if code is not None:
            code = code.strip()
            if not code:
                raise ValidationError("Account code is required")
            if code != account.code:
                existing = self.db.get_account_by_code(code)
                if existing is not None and existing.id != account_id:
                    raise DuplicateCodeError(duplicate_account_code(code))
                if self.db.get_account_line_count(account_id) > 0:
                    raise ValidationError(
                        f"Cannot change code of account '{account.code}': "
                        "it is referenced by journal lines"
                    )
        if name is not None and not name.strip():
            raise ValidationError("Account name is required")

        if clear_parent and parent_id is not None:
            raise ValidationError("Cannot set both parent_id and clear_parent")

        move = clear_parent or (parent_id is not None and parent_id != account.parent_id)
        level = None
        if move:
            if parent_id is not None:
                self._check_not_descendant(account_id, parent_id)
            level = self.resolve_level(parent_id)

        with self.db.transaction():
            self.db.update_account(
                account_id=account_id,
                code=code,
                name=name.strip() if name is not None else None,
                category=category,
                parent_id=parent_id,
                level=level,
                description=description,
                update_parent=move,
            )
            if level is not None and level != account.level:
                self._relevel_children(account_id, level)

        return self.db.get_account(account_id)

    def deactivate_account(self, account_id: int) -> AccountEntity:
        """Soft-delete an account. Accounts are never removed from the ledger.

        Raises:
            NotFoundError: If the account does not exist
        """
        account = self.require_account(account_id)
        if account.is_active:
            self.db.update_account(account_id=account_id, is_active=False)
            logger.info("Deactivated account %s", account.code)
        return self.db.get_account(account_id)

    def reactivate_account(self, account_id: int) -> AccountEntity:
        """Undo a soft delete."""
        account = self.require_account(account_id)
        if not account.is_active:
            self.db.update_account(account_id=account_id, is_active=True)
        return self.db.get_account(account_id)

    def seed_chart(
        self,
        chart: Optional[Iterable[tuple]] = None,
    ) -> tuple[list[AccountEntity], list[str]]:
        """Create the default chart of accounts, skipping codes that exist.

        Args:
            chart: Rows of (code, name, type, category, parent code); defaults
                to the built-in store chart

        Returns:
            Tuple of (created accounts, skipped codes)
        """
        created: list[AccountEntity] = []
        skipped: list[str] = []
        with self.db.transaction():
            for code, name, account_type, category, parent_code in chart or DEFAULT_CHART:
                if self.db.get_account_by_code(code) is not None:
                    skipped.append(code)
                    continue
                parent_id = None
                if parent_code is not None:
                    parent = self.db.get_account_by_code(parent_code)
                    if parent is None:
                        raise NotFoundError(f"Parent account '{parent_code}' not found")
                    parent_id = parent.id
                created.append(
                    self.create_account(
                        code=code,
                        name=name,
                        account_type=account_type,
                        category=category,
                        parent_id=parent_id,
                    )
                )
        return created, skipped

    def _check_not_descendant(self, account_id: int, new_parent_id: int) -> None:
        """Refuse a parent that is the account itself or one of its descendants."""
        current = self.db.get_account(new_parent_id)
        if current is None:
            raise NotFoundError(account_not_found(new_parent_id))
        seen = set()
        while current is not None and current.id not in seen:
            if current.id == account_id:
                raise ValidationError("An account cannot be moved under itself or its descendants")
            seen.add(current.id)
            current = self.db.get_account(current.parent_id) if current.parent_id else None

    def _relevel_children(self, parent_id: int, parent_level: int) -> None:
        for child in self.db.list_child_accounts(parent_id):
            self.db.update_account(account_id=child.id, level=parent_level + 1)
            self._relevel_children(child.id, parent_level + 1)
