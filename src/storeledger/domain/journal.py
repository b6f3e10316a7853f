"""Journal Engine domain service."""

import logging
from datetime import date
from typing import Optional, Sequence

from storeledger.database.base import Database
from storeledger.domain.entities import (
    AccountingPeriod,
    JournalEntry as JournalEntryEntity,
    JournalLineInput,
    ReferenceType,
)
from storeledger.domain.errors import (
    AlreadyReversedError,
    ConflictError,
    ImmutableEntryError,
    NotFoundError,
    PeriodClosedError,
    UnbalancedEntryError,
    ValidationError,
    account_not_found,
    entry_not_found,
    period_closed,
)
from storeledger.domain.money import ZERO, amounts_equal, is_zero, to_money, total
from storeledger.domain.period import PeriodService

logger = logging.getLogger(__name__)

MANUAL_PREFIX = "JR"
REVERSAL_PREFIX = "RV"
CLOSING_PREFIX = "CL"
NUMBER_ATTEMPTS = 5


class JournalService:
    """Service for creating, reversing and deleting journal entries."""

    def __init__(self, db: Database):
        """Initialize journal service.

        Args:
            db: Database instance
        """
        self.db = db
        self.periods = PeriodService(db)

    def create_entry(
        self,
        entry_date: date,
        description: str,
        period_id: int,
        lines: Sequence[JournalLineInput],
        reference: Optional[str] = None,
        reference_type: Optional[ReferenceType] = None,
        source_id: Optional[str] = None,
        user_id: Optional[str] = None,
        posted: bool = True,
        prefix: str = MANUAL_PREFIX,
    ) -> JournalEntryEntity:
        """Create a journal entry with all its lines in one atomic step.

        Args:
            entry_date: Entry date; must fall inside the period
            description: Free-text description
            period_id: Owning accounting period
            lines: Debit/credit lines; their totals must agree within 0.01
            reference: Optional external reference
            reference_type: Optional source event kind
            source_id: Optional source event ID, correlated with reference_type
            user_id: Optional authoring user
            posted: Create the entry posted (default) or as a draft
            prefix: Entry number prefix

        Returns:
            Created entry with lines

        Raises:
            ValidationError: If the input is malformed
            NotFoundError: If the period or a line account does not exist
            PeriodClosedError: If the period is closed
            UnbalancedEntryError: If total debit differs from total credit
        """
        description = (description or "").strip()
        if not description:
            raise ValidationError("Journal entry description is required")
        normalized = self._normalize_lines(lines)
        self._check_balanced(normalized)

        period = self.periods.require_open_period(period_id)
        if not period.contains(entry_date):
            raise ValidationError(
                f"Entry date {entry_date} is outside period '{period.name}' "
                f"({period.start_date} - {period.end_date})"
            )

        return self._insert(
            number_prefix=prefix,
            entry_date=entry_date,
            description=description,
            period=period,
            lines=normalized,
            reference=reference,
            reference_type=reference_type,
            source_id=source_id,
            user_id=user_id,
            posted=posted,
        )

    def post_entry(self, entry_id: int) -> JournalEntryEntity:
        """Mark a draft entry posted. Posting an already posted entry is a no-op.

        Raises:
            NotFoundError: If the entry does not exist
            PeriodClosedError: If the entry's period is closed
            UnbalancedEntryError: If the stored lines do not balance
        """
        entry = self.require_entry(entry_id)
        if entry.is_posted:
            return entry
        self.periods.require_open_period(entry.period_id)
        if not amounts_equal(entry.total_debit, entry.total_credit):
            raise UnbalancedEntryError(entry.total_debit, entry.total_credit)

        self.db.set_entry_posted(entry_id)
        logger.info("Posted journal entry %s", entry.number)
        return self.db.get_journal_entry(entry_id)

    def get_entry(self, entry_id: int) -> Optional[JournalEntryEntity]:
        """Get journal entry by ID."""
        return self.db.get_journal_entry(entry_id)

    def require_entry(self, entry_id: int) -> JournalEntryEntity:
        """Get journal entry by ID or raise NotFoundError."""
        entry = self.db.get_journal_entry(entry_id)
        if entry is None:
            raise NotFoundError(entry_not_found(entry_id))
        return entry

    def list_entries(
        self,
        period_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        reference_type: Optional[ReferenceType] = None,
        search: Optional[str] = None,
        is_posted: Optional[bool] = None,
    ) -> list[JournalEntryEntity]:
        """List journal entries ordered by date, then creation."""
        return self.db.list_journal_entries(
            period_id=period_id,
            start_date=start_date,
            end_date=end_date,
            reference_type=reference_type,
            is_posted=is_posted,
            search=search,
        )

    def find_by_source(
        self, reference_type: ReferenceType, source_id: str
    ) -> list[JournalEntryEntity]:
        """Find the entries booked for one source event, oldest first."""
        return self.db.find_entries_by_source(ReferenceType(reference_type), str(source_id))

    def get_reversal(self, entry_id: int) -> Optional[JournalEntryEntity]:
        """Get the entry reversing ``entry_id``, if any."""
        return self.db.get_reversal_of(entry_id)

    def reverse_entry(
        self,
        entry_id: int,
        entry_date: Optional[date] = None,
        user_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> JournalEntryEntity:
        """Create a new entry mirroring a posted entry (debit and credit swapped).

        The original stays untouched. The reversal is booked in the original's
        period on the original date unless another date is given; when the
        original period is closed, it is booked in the active period.

        Args:
            entry_id: Entry to reverse
            entry_date: Optional date of the reversal
            user_id: Optional authoring user
            description: Optional description, defaults to "Reversal of <number>"

        Returns:
            The reversal entry

        Raises:
            NotFoundError: If the entry does not exist
            ImmutableEntryError: If the entry is a draft
            AlreadyReversedError: If the entry has already been reversed
            PeriodClosedError: If no open period can receive the reversal
        """
        original = self.require_entry(entry_id)
        if not original.is_posted:
            raise ImmutableEntryError(
                f"Journal entry {original.number} is not posted; delete it instead of reversing"
            )
        if self.db.get_reversal_of(entry_id) is not None:
            raise AlreadyReversedError(f"Journal entry {original.number} has already been reversed")

        period, reversal_date = self._reversal_target(original, entry_date)
        lines = [
            JournalLineInput(
                account_id=line.account_id,
                debit=line.credit,
                credit=line.debit,
                description=line.description,
            )
            for line in original.lines
        ]

        reversal = self._insert(
            number_prefix=REVERSAL_PREFIX,
            entry_date=reversal_date,
            description=description or f"Reversal of {original.number}: {original.description}",
            period=period,
            lines=lines,
            reference=original.number,
            reference_type=ReferenceType.REVERSAL,
            source_id=original.source_id,
            user_id=user_id,
            posted=True,
            reversal_of_id=original.id,
        )
        logger.info("Reversed journal entry %s with %s", original.number, reversal.number)
        return reversal

    def delete_entry(self, entry_id: int) -> None:
        """Delete a draft entry.

        Raises:
            NotFoundError: If the entry does not exist
            ImmutableEntryError: If the entry is posted or its period is closed
        """
        entry = self.require_entry(entry_id)
        if entry.is_posted:
            raise ImmutableEntryError(
                f"Journal entry {entry.number} is posted and cannot be deleted; reverse it instead"
            )
        period = self.db.get_period(entry.period_id)
        if period is not None and period.is_closed:
            raise ImmutableEntryError(
                f"Journal entry {entry.number} belongs to closed period '{period.name}'"
            )
        self.db.delete_journal_entry(entry_id)
        logger.info("Deleted journal entry %s", entry.number)

    def _reversal_target(
        self, original: JournalEntryEntity, entry_date: Optional[date]
    ) -> tuple[AccountingPeriod, date]:
        period = self.periods.require_period(original.period_id)
        if not period.is_closed:
            reversal_date = entry_date or original.entry_date
            if period.contains(reversal_date):
                return period, reversal_date

        active = self.db.get_active_period()
        if active is None or active.is_closed:
            raise PeriodClosedError(
                f"{period_closed(period.name)} and no active period can take the reversal"
            )
        reversal_date = entry_date or date.today()
        if not active.contains(reversal_date):
            raise ValidationError(
                f"Reversal date {reversal_date} is outside active period '{active.name}'"
            )
        return active, reversal_date

    def _insert(
        self,
        number_prefix: str,
        entry_date: date,
        description: str,
        period: AccountingPeriod,
        lines: Sequence[JournalLineInput],
        reference: Optional[str],
        reference_type: Optional[ReferenceType],
        source_id: Optional[str],
        user_id: Optional[str],
        posted: bool,
        reversal_of_id: Optional[int] = None,
    ) -> JournalEntryEntity:
        # Inside a larger unit a collision rolls back the whole unit, so only
        # standalone inserts can retry with a fresh number.
        attempts = 1 if self.db.in_transaction() else NUMBER_ATTEMPTS
        for attempt in range(1, attempts + 1):
            number = self.db.next_entry_number(number_prefix, entry_date)
            try:
                with self.db.transaction():
                    entry_id = self.db.create_journal_entry(
                        number=number,
                        entry_date=entry_date,
                        description=description,
                        period_id=period.id,
                        lines=lines,
                        reference=reference,
                        reference_type=reference_type,
                        source_id=str(source_id) if source_id is not None else None,
                        reversal_of_id=reversal_of_id,
                        user_id=user_id,
                        is_posted=posted,
                    )
                break
            except ConflictError:
                if attempt == attempts:
                    raise
                if reversal_of_id is not None and self.db.get_reversal_of(reversal_of_id):
                    raise AlreadyReversedError(
                        f"Journal entry {reversal_of_id} has already been reversed"
                    )
                logger.debug("Entry number %s was taken, retrying", number)
        entry = self.db.get_journal_entry(entry_id)
        if reversal_of_id is None:
            logger.info(
                "Created journal entry %s in %s (%s)", number, period.name, entry.total_debit
            )
        return entry

    def _normalize_lines(self, lines: Sequence[JournalLineInput]) -> list[JournalLineInput]:
        if not lines:
            raise ValidationError("Journal entry needs at least one line")

        normalized = []
        for index, line in enumerate(lines, start=1):
            try:
                debit = to_money(line.debit)
                credit = to_money(line.credit)
            except ValueError as e:
                raise ValidationError(f"Line {index}: {e}") from e
            if debit < ZERO or credit < ZERO:
                raise ValidationError(f"Line {index}: debit and credit must not be negative")
            if is_zero(debit) and is_zero(credit):
                raise ValidationError(f"Line {index}: debit or credit is required")

            account = self.db.get_account(line.account_id)
            if account is None:
                raise NotFoundError(account_not_found(line.account_id))
            if not account.is_active:
                raise ValidationError(f"Line {index}: account '{account.code}' is inactive")

            normalized.append(
                JournalLineInput(
                    account_id=line.account_id,
                    debit=debit,
                    credit=credit,
                    description=line.description,
                )
            )
        return normalized

    @staticmethod
    def _check_balanced(lines: Sequence[JournalLineInput]) -> None:
        total_debit = total(line.debit for line in lines)
        total_credit = total(line.credit for line in lines)
        if not amounts_equal(total_debit, total_credit):
            raise UnbalancedEntryError(total_debit, total_credit)
