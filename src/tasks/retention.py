"""
Retention purge task.

Permanently deletes entries that have been soft-deleted for longer than the
retention window. There is no in-process scheduler: the purge runs when an
admin calls POST /admin/retention/purge or when this module is run as a
cron job.

Usage:
    python -m tasks.retention [--days N]
"""
import argparse
import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy import and_, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import get_settings
from models.entry import Entry
from models.tag import entry_tags

logger = logging.getLogger(__name__)


@dataclass
class PurgeResult:
    """Outcome of a purge run."""

    purged: int
    cutoff: datetime

    def to_dict(self) -> dict[str, int | str]:
        """Convert to simple dict for logging."""
        return {"purged": self.purged, "cutoff": self.cutoff.isoformat()}


async def purge_deleted_entries(
    db: AsyncSession,
    days: int,
    now: datetime | None = None,
) -> PurgeResult:
    """
    Permanently delete entries soft-deleted before ``now - days``.

    This is a global maintenance operation across all users. Live entries
    (deleted_at IS NULL) are never touched. The predicate is re-evaluated on
    every run, so repeating a purge, or running one concurrently with ordinary
    mutations, only ever removes entries that are expired at that moment.

    Args:
        db: Database session. Changes are flushed, not committed.
        days: Retention window in days (positive).
        now: Current time for cutoff calculation. Defaults to datetime.now(UTC).
             Inject a specific time for testing boundary conditions.

    Returns:
        PurgeResult with the number of entries removed and the cutoff used.
    """
    if days < 1:
        raise ValueError("Retention days must be a positive integer")
    if now is None:
        now = datetime.now(UTC)

    cutoff = now - timedelta(days=days)
    expired = and_(
        Entry.deleted_at.is_not(None),
        Entry.deleted_at < cutoff,
    )

    # Association rows first, so this does not depend on FK cascades
    await db.execute(
        delete(entry_tags).where(
            entry_tags.c.entry_id.in_(select(Entry.id).where(expired)),
        ),
    )
    result = await db.execute(
        delete(Entry).where(expired).execution_options(synchronize_session=False),
    )
    await db.flush()

    purged = result.rowcount or 0
    logger.info(
        "Purged %d entries soft-deleted more than %d days ago (cutoff=%s)",
        purged,
        days,
        cutoff.isoformat(),
    )
    return PurgeResult(purged=purged, cutoff=cutoff)


async def run_purge(days: int | None = None, db: AsyncSession | None = None) -> PurgeResult:
    """
    Run a purge in its own transaction.

    Args:
        days: Retention window; defaults to RETENTION_DAYS from settings.
        db: Database session. If None, creates and commits one from async_session_factory.
    """
    if days is None:
        days = get_settings().retention_days

    if db is not None:
        return await purge_deleted_entries(db, days)

    from db.session import async_session_factory

    async with async_session_factory() as session:
        result = await purge_deleted_entries(session, days)
        await session.commit()
    return result


def main(argv: list[str] | None = None) -> None:
    """Entry point for running the purge as a script."""
    parser = argparse.ArgumentParser(description="Purge expired soft-deleted entries.")
    parser.add_argument(
        "--days",
        type=int,
        default=None,
        help="Retention window in days (default: RETENTION_DAYS)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    result = asyncio.run(run_purge(days=args.days))
    logger.info("Retention purge complete: %s", result.to_dict())


if __name__ == "__main__":
    main()
