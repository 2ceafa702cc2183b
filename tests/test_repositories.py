from datetime import timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from app.models.file_metadata import FileMetadata
from app.models.user import User
from app.repositories.file_metadata import FileMetadataRepository
from app.repositories.role import RoleRepository
from app.repositories.user import UserRepository
from app.utils.datetime import utc_now


async def _user(session, username, **kwargs):
    role = await RoleRepository().get_by_name(session, "ROLE_USER")
    user = User(username=username, email=kwargs.pop("email", f"{username}@example.com"),
                roles=[role], **kwargs)
    return await UserRepository().save(session, user)


def _file(file_uuid, owner=None, days=7, size=10, downloads=0, uploaded_ago=0):
    now = utc_now()
    return FileMetadata(
        uuid=file_uuid,
        filename=f"{file_uuid}.bin",
        size=size,
        upload_date=now - timedelta(minutes=uploaded_ago),
        expiry_date=now + timedelta(days=days),
        download_count=downloads,
        user_id=owner.id if owner else None,
        is_public=owner is None,
    )


async def test_seeded_roles(session):
    roles = await RoleRepository().get_all(session)

    assert [role.name for role in roles] == ["ROLE_ADMIN", "ROLE_USER"]


async def test_seeded_admin(session):
    admin = await UserRepository().get_by_username(session, "admin")

    assert admin.role_names == ["ROLE_ADMIN"]
    assert admin.active is True
    assert admin.verify_password("admin123")


async def test_user_lookups(session):
    repo = UserRepository()
    user = await _user(session, "lookup", google_id="g-1", email_verification_token="tok-1")

    assert (await repo.get_by_id(session, user.id)).username == "lookup"
    assert (await repo.get_by_email(session, "lookup@example.com")).id == user.id
    assert (await repo.get_by_google_id(session, "g-1")).id == user.id
    assert (await repo.get_by_email_verification_token(session, "tok-1")).id == user.id
    assert await repo.exists_by_username(session, "lookup")
    assert await repo.exists_by_email(session, "lookup@example.com")
    assert not await repo.exists_by_username(session, "nobody")
    assert await repo.get_by_username(session, "nobody") is None


async def test_duplicate_username_rolls_back(session):
    await _user(session, "dupe")

    with pytest.raises(IntegrityError):
        await _user(session, "dupe", email="dupe2@example.com")

    # 세션은 rollback 후 계속 사용 가능
    assert await UserRepository().exists_by_username(session, "dupe")


async def test_files_by_owner_newest_first(session):
    repo = FileMetadataRepository()
    owner = await _user(session, "owner")
    await repo.save(session, _file("older", owner, uploaded_ago=10))
    await repo.save(session, _file("newer", owner, uploaded_ago=1))
    await repo.save(session, _file("public"))

    files = await repo.get_by_owner(session, owner.id)

    assert [f.uuid for f in files] == ["newer", "older"]
    assert files[0].owner.username == "owner"


async def test_get_by_uuid_and_owner(session):
    repo = FileMetadataRepository()
    owner = await _user(session, "owner")
    other = await _user(session, "other")
    await repo.save(session, _file("mine", owner))

    assert await repo.get_by_uuid_and_owner(session, "mine", owner.id) is not None
    assert await repo.get_by_uuid_and_owner(session, "mine", other.id) is None


async def test_expired_before(session):
    repo = FileMetadataRepository()
    await repo.save(session, _file("expired", days=-1))
    await repo.save(session, _file("valid", days=1))

    expired = await repo.get_expired_before(session, utc_now())

    assert [f.uuid for f in expired] == ["expired"]


async def test_owner_totals(session):
    repo = FileMetadataRepository()
    owner = await _user(session, "stats")
    await repo.save(session, _file("a", owner, size=100, downloads=2))
    await repo.save(session, _file("b", owner, size=50, downloads=3))
    await repo.save(session, _file("c", size=999, downloads=9))

    assert await repo.get_owner_totals(session, owner.id) == (2, 150, 5)


async def test_owner_totals_without_files(session):
    owner = await _user(session, "empty")

    assert await FileMetadataRepository().get_owner_totals(session, owner.id) == (0, 0, 0)


async def test_delete_file_metadata(session):
    repo = FileMetadataRepository()
    metadata = await repo.save(session, _file("to-delete"))

    await repo.delete(session, metadata)

    assert not await repo.exists_by_uuid(session, "to-delete")
