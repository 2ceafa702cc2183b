from app.core.config import settings
from app.utils.datetime import ensure_utc, utc_now

from conftest import expire_file, get_file


def _upload(client, content=b"hello world", filename="hello.txt", content_type="text/plain"):
    return client.post("/api/public/files/upload", files={"file": (filename, content, content_type)})


def test_upload_stores_file_and_metadata(client, storage_dirs):
    storage, _ = storage_dirs

    response = _upload(client)

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"uuid"}

    metadata = get_file(body["uuid"])
    assert metadata.filename == "hello.txt"
    assert metadata.size == 11
    assert metadata.mime_type == "text/plain"
    assert metadata.is_public is True
    assert metadata.user_id is None
    assert metadata.download_count == 0

    lifetime = ensure_utc(metadata.expiry_date) - ensure_utc(metadata.upload_date)
    assert lifetime.days == settings.PUBLIC_EXPIRY_DAYS

    stored = storage / f"{body['uuid']}.txt"
    assert stored.read_bytes() == b"hello world"


def test_upload_without_file_part(client):
    response = client.post("/api/public/files/upload")

    assert response.status_code == 400
    assert response.json()["message"] == (
        "Required file parameter is missing. Please provide a file to upload."
    )


def test_upload_empty_file(client):
    response = _upload(client, content=b"")

    assert response.status_code == 400
    assert response.json()["message"] == "File is missing"


def test_upload_over_size_limit(client, monkeypatch):
    monkeypatch.setattr(settings, "PUBLIC_MAX_SIZE", 1_048_576)

    response = _upload(client, content=b"x" * (1_048_576 + 1))

    assert response.status_code == 400
    assert response.json()["message"] == "File size exceeds 1MB limit"


def test_get_metadata(client):
    file_uuid = _upload(client).json()["uuid"]

    response = client.get(f"/api/public/files/{file_uuid}")

    assert response.status_code == 200
    body = response.json()
    assert body["uuid"] == file_uuid
    assert body["filename"] == "hello.txt"
    assert body["size"] == 11
    assert body["downloadCount"] == 0
    assert body["isPublic"] is True
    assert body["ownerUsername"] is None
    assert body["mimeType"] == "text/plain"
    assert "uploadDate" in body and "expiryDate" in body


def test_get_metadata_unknown_uuid(client):
    response = client.get("/api/public/files/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"message": "File not found or expired"}


def test_get_metadata_expired(client):
    file_uuid = _upload(client).json()["uuid"]
    expire_file(file_uuid)

    response = client.get(f"/api/public/files/{file_uuid}")

    assert response.status_code == 400
    assert response.json()["message"] == "File expired"


def test_download_streams_file_and_counts(client):
    file_uuid = _upload(client).json()["uuid"]

    response = client.get(f"/api/public/files/download/{file_uuid}")

    assert response.status_code == 200
    assert response.content == b"hello world"
    assert response.headers["content-disposition"] == 'attachment; filename="hello.txt"'
    assert response.headers["content-type"].startswith("text/plain")
    assert get_file(file_uuid).download_count == 1


def test_download_limit_for_public_files(client):
    file_uuid = _upload(client).json()["uuid"]

    for _ in range(settings.PUBLIC_MAX_DOWNLOADS):
        assert client.get(f"/api/public/files/download/{file_uuid}").status_code == 200

    response = client.get(f"/api/public/files/download/{file_uuid}")

    assert response.status_code == 403
    assert response.json()["message"] == "File download limit reached for this file. (Max. 3 Times)"
    assert get_file(file_uuid).download_count == settings.PUBLIC_MAX_DOWNLOADS


def test_download_expired_file(client):
    file_uuid = _upload(client).json()["uuid"]
    expire_file(file_uuid)

    response = client.get(f"/api/public/files/download/{file_uuid}")

    assert response.status_code == 400
    assert response.json()["message"] == "File expired"
    assert get_file(file_uuid).download_count == 0


def test_download_unknown_file(client):
    response = client.get("/api/public/files/download/does-not-exist")

    assert response.status_code == 404


def test_upload_keeps_name_without_extension(client, storage_dirs):
    storage, _ = storage_dirs

    file_uuid = _upload(client, filename="README").json()["uuid"]

    assert get_file(file_uuid).filename == "README"
    assert (storage / file_uuid).is_file()
    assert ensure_utc(get_file(file_uuid).expiry_date) > utc_now()
