from datetime import datetime
from typing import Optional

from app.schemas.common import CamelModel
from app.utils.datetime import ensure_utc


class FileMetadataResponse(CamelModel):
    """
    파일 메타데이터 응답 (owner는 username만 노출)
    """
    uuid: str
    filename: str
    size: int
    upload_date: datetime
    expiry_date: datetime
    download_count: int
    is_public: bool
    owner_username: Optional[str] = None
    mime_type: Optional[str] = None

    @classmethod
    def from_entity(cls, metadata) -> "FileMetadataResponse":
        return cls(
            uuid=metadata.uuid,
            filename=metadata.filename,
            size=metadata.size,
            upload_date=ensure_utc(metadata.upload_date),
            expiry_date=ensure_utc(metadata.expiry_date),
            download_count=metadata.download_count,
            is_public=metadata.is_public,
            owner_username=metadata.owner.username if metadata.owner is not None else None,
            mime_type=metadata.mime_type,
        )


class UploadResponse(CamelModel):
    uuid: str
    message: Optional[str] = None


class RoleResponse(CamelModel):
    id: int
    name: str
