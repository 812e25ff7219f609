"""Tests for tag service layer functionality."""
import asyncio
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from models.category import Category
from models.entry import Entry
from models.tag import Tag, entry_tags
from models.user import User
from services.tag_service import get_or_create_tags, reconcile_entry_tags


async def _make_entry(db_session: AsyncSession, user: User, category: Category) -> Entry:
    entry = Entry(
        user_id=user.id,
        category_id=category.id,
        prompt_text="prompt",
        output_text="output",
        model_used="gpt-4o",
    )
    db_session.add(entry)
    await db_session.flush()
    return entry


async def _tag_count(db_session: AsyncSession, user: User) -> int:
    result = await db_session.execute(
        select(func.count()).select_from(Tag).where(Tag.user_id == user.id),
    )
    return result.scalar_one()


async def _association_names(db_session: AsyncSession, entry_id) -> set[str]:  # noqa: ANN001
    result = await db_session.execute(
        select(Tag.name)
        .join(entry_tags, entry_tags.c.tag_id == Tag.id)
        .where(entry_tags.c.entry_id == entry_id),
    )
    return set(result.scalars())


# =============================================================================
# get_or_create_tags Tests
# =============================================================================


async def test__get_or_create_tags__creates_new_tags(
    db_session: AsyncSession,
    test_user: User,
) -> None:
    """Test that get_or_create_tags creates tags that don't exist."""
    tags = await get_or_create_tags(db_session, test_user.id, ["python", "web"])

    assert [t.name for t in tags] == ["python", "web"]
    for tag in tags:
        assert tag.user_id == test_user.id
        assert tag.id is not None


async def test__get_or_create_tags__returns_existing_tags(
    db_session: AsyncSession,
    test_user: User,
) -> None:
    """Calling twice with the same name yields the same row."""
    existing = await get_or_create_tags(db_session, test_user.id, ["python"])
    tags = await get_or_create_tags(db_session, test_user.id, ["python"])

    assert len(tags) == 1
    assert tags[0].id == existing[0].id
    assert await _tag_count(db_session, test_user) == 1


async def test__get_or_create_tags__mixes_new_and_existing(
    db_session: AsyncSession,
    test_user: User,
) -> None:
    """Existing names are reused while new ones are inserted."""
    (python,) = await get_or_create_tags(db_session, test_user.id, ["python"])
    tags = await get_or_create_tags(db_session, test_user.id, ["web", "python"])

    assert [t.name for t in tags] == ["web", "python"]
    assert tags[1].id == python.id
    assert await _tag_count(db_session, test_user) == 2


async def test__get_or_create_tags__trims_and_drops_blank_names(
    db_session: AsyncSession,
    test_user: User,
) -> None:
    """Whitespace is trimmed and blank names are ignored."""
    tags = await get_or_create_tags(db_session, test_user.id, ["  python  ", "", "   "])

    assert [t.name for t in tags] == ["python"]


async def test__get_or_create_tags__empty_list_creates_nothing(
    db_session: AsyncSession,
    test_user: User,
) -> None:
    """An empty request performs no insert."""
    assert await get_or_create_tags(db_session, test_user.id, []) == []
    assert await _tag_count(db_session, test_user) == 0


async def test__get_or_create_tags__names_are_case_sensitive(
    db_session: AsyncSession,
    test_user: User,
) -> None:
    """'Email' and 'email' are distinct tags."""
    tags = await get_or_create_tags(db_session, test_user.id, ["Email", "email"])

    assert len({t.id for t in tags}) == 2
    assert await _tag_count(db_session, test_user) == 2


async def test__get_or_create_tags__duplicate_names_in_one_request(
    db_session: AsyncSession,
    test_user: User,
) -> None:
    """A name repeated in one request is created once."""
    tags = await get_or_create_tags(db_session, test_user.id, ["Email", "pricing", "Email"])

    assert [t.name for t in tags] == ["Email", "pricing"]
    assert await _tag_count(db_session, test_user) == 2


async def test__get_or_create_tags__namespaces_are_per_user(
    db_session: AsyncSession,
    test_user: User,
    other_user: User,
) -> None:
    """The same name owned by two users is two rows."""
    (mine,) = await get_or_create_tags(db_session, test_user.id, ["python"])
    (theirs,) = await get_or_create_tags(db_session, other_user.id, ["python"])

    assert mine.id != theirs.id
    assert mine.user_id == test_user.id
    assert theirs.user_id == other_user.id


async def test__get_or_create_tags__concurrent_sessions_share_one_row_per_name(
    async_engine: AsyncEngine,
) -> None:
    """Sessions racing on the same names each commit and all end up with the same rows."""
    session_factory = async_sessionmaker(
        async_engine, class_=AsyncSession, expire_on_commit=False,
    )
    async with session_factory() as session:
        user = User(email="race@example.com", password_hash="x")
        session.add(user)
        await session.commit()
    user_id = user.id

    async def upsert() -> tuple[UUID, ...]:
        async with session_factory() as session:
            tags = await get_or_create_tags(session, user_id, ["race", "Race"])
            await session.commit()
            return tuple(tag.id for tag in tags)

    results = await asyncio.gather(*(upsert() for _ in range(8)))

    assert len(set(results)) == 1
    assert len(results[0]) == 2
    async with session_factory() as session:
        count = await session.execute(
            select(func.count()).select_from(Tag).where(Tag.user_id == user_id),
        )
        assert count.scalar_one() == 2


# =============================================================================
# reconcile_entry_tags Tests
# =============================================================================


async def test__reconcile_entry_tags__associates_tags_on_create(
    db_session: AsyncSession,
    test_user: User,
    category: Category,
) -> None:
    """Create mode attaches every requested tag."""
    entry = await _make_entry(db_session, test_user, category)

    tags = await reconcile_entry_tags(
        db_session, test_user.id, entry.id, ["Email", "pricing", "Email"], replace=False,
    )

    assert {t.name for t in tags} == {"Email", "pricing"}
    assert await _association_names(db_session, entry.id) == {"Email", "pricing"}


async def test__reconcile_entry_tags__replace_swaps_the_tag_set(
    db_session: AsyncSession,
    test_user: User,
    category: Category,
) -> None:
    """Update mode removes associations that are not requested any more."""
    entry = await _make_entry(db_session, test_user, category)
    await reconcile_entry_tags(db_session, test_user.id, entry.id, ["a", "b"], replace=False)

    await reconcile_entry_tags(db_session, test_user.id, entry.id, ["b", "c"], replace=True)

    assert await _association_names(db_session, entry.id) == {"b", "c"}
    # Orphaned tag rows are kept for reuse
    assert await _tag_count(db_session, test_user) == 3


async def test__reconcile_entry_tags__replace_with_empty_list_clears(
    db_session: AsyncSession,
    test_user: User,
    category: Category,
) -> None:
    """An empty list in update mode leaves the entry untagged."""
    entry = await _make_entry(db_session, test_user, category)
    await reconcile_entry_tags(db_session, test_user.id, entry.id, ["a"], replace=False)

    await reconcile_entry_tags(db_session, test_user.id, entry.id, [], replace=True)

    assert await _association_names(db_session, entry.id) == set()


async def test__reconcile_entry_tags__is_idempotent(
    db_session: AsyncSession,
    test_user: User,
    category: Category,
) -> None:
    """Repeating the same reconcile changes nothing."""
    entry = await _make_entry(db_session, test_user, category)
    await reconcile_entry_tags(db_session, test_user.id, entry.id, ["a", "b"], replace=False)
    await reconcile_entry_tags(db_session, test_user.id, entry.id, ["a", "b"], replace=False)

    result = await db_session.execute(
        select(func.count()).select_from(entry_tags).where(entry_tags.c.entry_id == entry.id),
    )
    assert result.scalar_one() == 2
    assert await _tag_count(db_session, test_user) == 2
