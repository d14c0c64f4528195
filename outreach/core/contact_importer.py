"""Contact import, sync and duplicate resolution."""

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from outreach.config import get_settings
from outreach.core.dedupe import DuplicateMatch, find_duplicates, merge_contacts
from outreach.models.contact import Contact, ContactStatus, ContactPriority
from outreach.schemas.sheets import SheetsConfig
from outreach.services.google_sheets import EmptySheetError, parse_sheet_data, read_sheet
from outreach.services.settings_store import SHEETS_CONFIG_KEY, get_json_setting, set_json_setting

settings = get_settings()
logger = logging.getLogger(__name__)

# Fields copied from an imported row into a new contact
IMPORT_FIELDS = ("name", "email", "company", "phone", "website", "notes", "sheets_row_id")


class ContactNotFoundError(Exception):
    """Referenced contact does not exist."""


@dataclass
class PendingDuplicate:
    """An imported row held back because it matched existing contacts."""

    new_contact: dict[str, Any]
    matches: list[DuplicateMatch]


@dataclass
class ImportResult:
    """Outcome of an interactive import."""

    total_processed: int
    imported: int = 0
    duplicates: list[PendingDuplicate] = field(default_factory=list)


@dataclass
class SyncResult:
    """Outcome of an automated sync."""

    processed: int
    imported: int = 0
    updated: int = 0
    duplicates_found: int = 0

    def summary(self) -> str:
        """Multi-line message recorded in the automation log."""
        return "\n".join([
            f"Synced {self.processed} rows from Google Sheets",
            f"- {self.imported} new contacts imported",
            f"- {self.updated} existing contacts updated",
            f"- {self.duplicates_found} potential duplicates skipped",
        ])


class ContactImporter:
    """
    Run imported rows through the duplicate matcher and persist the outcome.

    The pool of known contacts is loaded once per batch and grows as rows are
    inserted, so repeated rows within one sheet are caught as duplicates too.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self._rows: dict[int, Contact] = {}
        self._pool: list[dict[str, Any]] = []

    async def load_existing(self) -> list[dict[str, Any]]:
        """Load every stored contact into the matching pool."""
        result = await self.db.execute(select(Contact).order_by(Contact.id))
        contacts = result.scalars().all()
        self._rows = {c.id: c for c in contacts}
        self._pool = [c.to_dict() for c in contacts]
        return self._pool

    async def create_contact(self, data: dict[str, Any]) -> Contact:
        """Insert a new contact from a partial record. Caller commits."""
        contact = Contact(
            **{k: data.get(k) for k in IMPORT_FIELDS},
            status=ContactStatus.NEW,
            priority=ContactPriority.MEDIUM,
        )
        self.db.add(contact)
        await self.db.flush()

        self._rows[contact.id] = contact
        self._pool.append(contact.to_dict())
        return contact

    async def merge_into(self, contact: Contact, new_data: dict[str, Any]) -> Contact:
        """Merge new data into a stored contact. Caller commits."""
        merged = merge_contacts(contact.to_dict(), new_data)
        contact.apply(merged)
        await self.db.flush()

        for i, entry in enumerate(self._pool):
            if entry.get("id") == contact.id:
                self._pool[i] = contact.to_dict()
                break
        return contact

    async def import_contacts(self, parsed: list[dict[str, Any]]) -> ImportResult:
        """
        Insert rows with no likely duplicate and hold the rest for review.

        Used by the interactive import, where a person resolves each held row
        through the dedupe endpoint.
        """
        await self.load_existing()
        result = ImportResult(total_processed=len(parsed))

        for row in parsed:
            matches = find_duplicates(row, self._pool)
            if matches:
                result.duplicates.append(PendingDuplicate(new_contact=row, matches=matches))
                continue

            await self.create_contact(row)
            result.imported += 1

        await self.db.commit()
        logger.info(
            f"Imported {result.imported} of {result.total_processed} rows, "
            f"{len(result.duplicates)} held for review"
        )
        return result

    async def sync_contacts(
        self,
        parsed: list[dict[str, Any]],
        auto_merge_confidence: int | None = None,
    ) -> SyncResult:
        """
        Insert new rows and auto-merge confident duplicates.

        Only the top match is merged, and only when its confidence reaches
        ``auto_merge_confidence``. Lower-confidence rows are left for review.
        """
        if auto_merge_confidence is None:
            auto_merge_confidence = settings.auto_merge_confidence

        await self.load_existing()
        result = SyncResult(processed=len(parsed))

        for row in parsed:
            matches = find_duplicates(row, self._pool)
            if not matches:
                await self.create_contact(row)
                result.imported += 1
                continue

            top_match = matches[0]
            if top_match.confidence < auto_merge_confidence:
                result.duplicates_found += 1
                continue

            contact = self._rows[top_match.existing_contact["id"]]
            await self.merge_into(contact, row)
            result.updated += 1

        await self.db.commit()
        return result

    async def resolve_duplicate(
        self,
        action: str,
        new_contact: dict[str, Any],
        existing_contact_id: int | None = None,
    ) -> Contact | None:
        """
        Apply a reviewer's decision for a held row.

        ``merge`` folds the row into ``existing_contact_id``, ``create``
        inserts it as a new contact and ``skip`` does nothing.
        """
        if action == "merge":
            if existing_contact_id is None:
                raise ValueError("Existing contact ID required for merge")
            result = await self.db.execute(
                select(Contact).where(Contact.id == existing_contact_id)
            )
            existing = result.scalar_one_or_none()
            if existing is None:
                raise ContactNotFoundError(f"Contact {existing_contact_id} not found")

            contact = await self.merge_into(existing, new_contact)
            await self.db.commit()
            await self.db.refresh(contact)
            return contact

        if action == "create":
            contact = await self.create_contact(new_contact)
            await self.db.commit()
            await self.db.refresh(contact)
            return contact

        if action == "skip":
            return None

        raise ValueError("Invalid action. Must be merge, create, or skip")


async def import_from_sheet(db: AsyncSession, config: SheetsConfig) -> ImportResult:
    """Read a sheet, import it interactively and remember its location."""
    rows = await read_sheet(db, config.spreadsheet_id, sheet_range(config.sheet_name))
    if not rows:
        raise EmptySheetError("No data found in spreadsheet")

    parsed = parse_sheet_data(rows, config.column_mapping)
    if not parsed:
        raise EmptySheetError("No valid contacts found in spreadsheet")

    importer = ContactImporter(db)
    result = await importer.import_contacts(parsed)

    await set_json_setting(db, SHEETS_CONFIG_KEY, config.model_dump())
    await db.commit()
    return result


async def sync_saved_sheet(db: AsyncSession) -> tuple[str, dict[str, Any]]:
    """
    Scheduled sync of the saved spreadsheet.

    Returns a log message and job details. A missing configuration is not an
    error; the sync is reported as skipped.
    """
    raw_config = await get_json_setting(db, SHEETS_CONFIG_KEY)
    if not raw_config:
        return "No sheets configuration found - skipping sync", {"skipped": True}

    config = SheetsConfig.model_validate(raw_config)
    rows = await read_sheet(db, config.spreadsheet_id, sheet_range(config.sheet_name))
    if not rows:
        raise EmptySheetError("No data found in spreadsheet")

    parsed = parse_sheet_data(rows, config.column_mapping)
    importer = ContactImporter(db)
    result = await importer.sync_contacts(parsed)

    return result.summary(), {
        "processed": result.processed,
        "imported": result.imported,
        "updated": result.updated,
        "duplicates_found": result.duplicates_found,
    }


def sheet_range(sheet_name: str) -> str:
    """A1 range covering the configured columns of one sheet."""
    return f"{sheet_name}!{settings.sheets_default_range}"
