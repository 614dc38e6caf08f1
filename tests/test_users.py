import pytest
from sqlalchemy.exc import IntegrityError

from cmdb.core import RepositoryException
from cmdb.identity.domain import User, hash_password, verify_password
from cmdb.identity.infrastructure import SQLAlchemyUserRepository


def test_hash_is_salted():
    first = hash_password("s3cret")
    second = hash_password("s3cret")
    assert first != second
    assert first.startswith("pbkdf2_sha256$")
    assert "s3cret" not in first


def test_verify_password():
    encoded = hash_password("s3cret", iterations=1_000)
    assert verify_password("s3cret", encoded)
    assert not verify_password("wrong", encoded)
    assert not verify_password("s3cret", "garbage")
    assert not verify_password("s3cret", "md5$1$salt$digest")


async def test_create_and_lookup_user(db_session):
    repo = SQLAlchemyUserRepository(db_session)
    created = await repo.create({"username": "admin", "password": "s3cret"})

    assert created.password_hash != "s3cret"
    assert (await repo.get_by_username("admin")).id == created.id
    assert (await repo.get_by_id(str(created.id))).username == "admin"
    assert await repo.get_by_username("nobody") is None
    assert await repo.get_by_id("not-a-uuid") is None

    user = User.from_model(created)
    assert user.check_password("s3cret")
    assert "s3cret" not in repr(user)
    assert created.password_hash not in repr(user)


async def test_usernames_are_unique(db_session):
    repo = SQLAlchemyUserRepository(db_session)
    await repo.create({"username": "admin", "password": "one"})

    with pytest.raises(RepositoryException) as exc_info:
        await repo.create({"username": "admin", "password": "two"})
    assert isinstance(exc_info.value.__cause__, IntegrityError)
    await db_session.rollback()
