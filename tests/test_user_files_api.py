import pytest

from app.core.config import settings

from conftest import auth_headers, create_user, expire_file, get_file


def _upload(client, headers, content=b"report body", filename="report.pdf",
            content_type="application/pdf"):
    return client.post(
        "/user/files/upload",
        files={"file": (filename, content, content_type)},
        headers=headers,
    )


@pytest.fixture
def owner(client):
    return create_user("fileowner")


@pytest.fixture
def other(client):
    return create_user("otheruser")


def test_upload_requires_authentication(client):
    response = client.post("/user/files/upload", files={"file": ("a.txt", b"a", "text/plain")})

    assert response.status_code == 401


def test_upload_for_user(client, owner):
    response = _upload(client, auth_headers(owner))

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "File uploaded successfully"

    metadata = get_file(body["uuid"])
    assert metadata.user_id == owner.id
    assert metadata.is_public is False
    assert (metadata.expiry_date - metadata.upload_date).days == settings.USER_EXPIRY_DAYS


def test_upload_empty_file(client, owner):
    response = _upload(client, auth_headers(owner), content=b"")

    assert response.status_code == 400
    assert response.json()["message"] == "File is missing"


def test_list_files_newest_first(client, owner, other):
    first = _upload(client, auth_headers(owner), filename="first.pdf").json()["uuid"]
    second = _upload(client, auth_headers(owner), filename="second.pdf").json()["uuid"]
    _upload(client, auth_headers(other), filename="not-mine.pdf")

    response = client.get("/user/files", headers=auth_headers(owner))

    assert response.status_code == 200
    files = response.json()
    assert [f["uuid"] for f in files] == [second, first]
    assert all(f["ownerUsername"] == "fileowner" for f in files)
    assert all(f["isPublic"] is False for f in files)


def test_get_metadata(client, owner):
    file_uuid = _upload(client, auth_headers(owner)).json()["uuid"]

    response = client.get(f"/user/files/{file_uuid}", headers=auth_headers(owner))

    assert response.status_code == 200
    assert response.json()["filename"] == "report.pdf"
    assert response.json()["mimeType"] == "application/pdf"


def test_get_metadata_expired(client, owner):
    file_uuid = _upload(client, auth_headers(owner)).json()["uuid"]
    expire_file(file_uuid)

    response = client.get(f"/user/files/{file_uuid}", headers=auth_headers(owner))

    assert response.status_code == 400
    assert response.json()["message"] == "File expired"


def test_owner_can_download(client, owner):
    file_uuid = _upload(client, auth_headers(owner)).json()["uuid"]

    response = client.get(f"/user/files/download/{file_uuid}", headers=auth_headers(owner))

    assert response.status_code == 200
    assert response.content == b"report body"
    assert response.headers["content-disposition"] == 'attachment; filename="report.pdf"'
    assert get_file(file_uuid).download_count == 1


def test_other_user_cannot_download_private_file(client, owner, other):
    file_uuid = _upload(client, auth_headers(owner)).json()["uuid"]

    response = client.get(f"/user/files/download/{file_uuid}", headers=auth_headers(other))

    assert response.status_code == 403
    assert response.json()["message"] == "Not authorized to download this file"
    assert get_file(file_uuid).download_count == 0


def test_any_user_can_download_public_file(client, other):
    file_uuid = client.post(
        "/api/public/files/upload", files={"file": ("shared.txt", b"shared", "text/plain")}
    ).json()["uuid"]

    response = client.get(f"/user/files/download/{file_uuid}", headers=auth_headers(other))

    assert response.status_code == 200
    assert response.content == b"shared"


def test_user_download_limit(client, owner, monkeypatch):
    monkeypatch.setattr(settings, "USER_MAX_DOWNLOADS", 2)
    file_uuid = _upload(client, auth_headers(owner)).json()["uuid"]

    for _ in range(2):
        assert client.get(f"/user/files/download/{file_uuid}", headers=auth_headers(owner)).status_code == 200

    response = client.get(f"/user/files/download/{file_uuid}", headers=auth_headers(owner))

    assert response.status_code == 403
    assert response.json()["message"] == "File download limit reached for this file. (Max. 2 Times)"


def test_private_file_through_public_download_uses_user_limit(client, owner, monkeypatch):
    monkeypatch.setattr(settings, "USER_MAX_DOWNLOADS", 1)
    file_uuid = _upload(client, auth_headers(owner)).json()["uuid"]

    assert client.get(f"/api/public/files/download/{file_uuid}").status_code == 200
    response = client.get(f"/api/public/files/download/{file_uuid}")

    assert response.status_code == 403
    assert response.json()["message"] == "File download limit reached for this file. (Max. 1 Times)"


def test_delete_own_file(client, owner, storage_dirs):
    storage, _ = storage_dirs
    file_uuid = _upload(client, auth_headers(owner)).json()["uuid"]
    assert (storage / f"{file_uuid}.pdf").is_file()

    response = client.delete(f"/user/files/{file_uuid}", headers=auth_headers(owner))

    assert response.status_code == 200
    assert response.json() == {"message": "File deleted successfully"}
    assert get_file(file_uuid) is None
    assert not (storage / f"{file_uuid}.pdf").exists()


def test_delete_someone_elses_file(client, owner, other):
    file_uuid = _upload(client, auth_headers(owner)).json()["uuid"]

    response = client.delete(f"/user/files/{file_uuid}", headers=auth_headers(other))

    assert response.status_code == 404
    assert response.json()["message"] == "File not found or you don't own this file"
    assert get_file(file_uuid) is not None


def test_admin_can_use_user_endpoints(client):
    admin = create_user("superuser", roles=("ROLE_ADMIN",))

    response = client.get("/user/files", headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.json() == []


def test_user_without_role_is_forbidden(client):
    nobody = create_user("noroles", roles=())

    response = client.get("/user/files", headers=auth_headers(nobody))

    assert response.status_code == 403
