"""
SqlPostStore failure paths against real engines.

Each database failure must come out as the matching ``StoreError``
subclass, and the session must be rolled back and usable afterwards.
"""
import pytest
from sqlalchemy.exc import ProgrammingError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from blog.errors import ConflictError, StoreError, StoreUnavailableError
from blog.models import Post
from blog.schemas import PostCandidate, PostFields
from blog.services.post_service import CREATE_FAILED_MESSAGE, create_post
from blog.store import SqlPostStore


def _fields(slug: str, title: str = "T", markdown: str = "M") -> PostFields:
    return PostFields(slug=slug, title=title, markdown=markdown)


# ---------------------------------------------------------------------------
# Unreachable database
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_list_on_unreachable_database(unreachable_session: AsyncSession):
    store = SqlPostStore(unreachable_session)
    with pytest.raises(StoreUnavailableError):
        await store.list()
    assert not unreachable_session.in_transaction()


@pytest.mark.asyncio
async def test_get_on_unreachable_database(unreachable_session: AsyncSession):
    store = SqlPostStore(unreachable_session)
    with pytest.raises(StoreUnavailableError):
        await store.get("anything")


@pytest.mark.asyncio
async def test_create_on_unreachable_database(unreachable_session: AsyncSession):
    store = SqlPostStore(unreachable_session)
    with pytest.raises(StoreUnavailableError):
        await store.create(_fields("x"))
    assert list(unreachable_session.new) == []


@pytest.mark.asyncio
async def test_create_post_on_unreachable_database(unreachable_session: AsyncSession):
    result = await create_post(
        SqlPostStore(unreachable_session),
        PostCandidate(slug="x", title="T", markdown="M"),
    )
    assert result.status_code == 500
    assert result.errors == {"create": CREATE_FAILED_MESSAGE}


# ---------------------------------------------------------------------------
# Concurrent insert of the same slug
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_loses_race_to_another_session(
    store: SqlPostStore,
    db_session: AsyncSession,
    session_factory: async_sessionmaker,
    monkeypatch,
):
    find = store._find

    async def find_then_insert_elsewhere(slug):
        found = await find(slug)
        # Another request commits the same slug between the check and the insert.
        async with session_factory() as other:
            other.add(Post(slug=slug, title="Theirs", markdown="M"))
            await other.commit()
        return found

    monkeypatch.setattr(store, "_find", find_then_insert_elsewhere)
    with pytest.raises(ConflictError) as excinfo:
        await store.create(_fields("taken", "Mine"))
    assert excinfo.value.slug == "taken"
    assert not db_session.in_transaction()

    monkeypatch.setattr(store, "_find", find)
    post = await store.get("taken")
    assert post.title == "Theirs"
    assert [p.slug for p in await store.list()] == ["taken"]


# ---------------------------------------------------------------------------
# Other database errors
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_rejected_statement_is_store_error(
    store: SqlPostStore, db_session: AsyncSession, seeded_post: dict, monkeypatch
):
    async def rejecting_execute(statement, *args, **kwargs):
        raise ProgrammingError(str(statement), {}, Exception("syntax error"))

    monkeypatch.setattr(db_session, "execute", rejecting_execute)
    with pytest.raises(StoreError) as excinfo:
        await store.get(seeded_post["slug"])
    assert type(excinfo.value) is StoreError
    assert excinfo.value.message == "The post store rejected the operation"

    monkeypatch.undo()
    post = await store.get(seeded_post["slug"])
    assert post.title == seeded_post["title"]
