"""
데이터 모델 모듈

SQLModel ORM 모델들을 정의합니다.
데이터베이스 테이블 구조를 정의합니다.
"""
from app.models.role import Role, UserRole
from app.models.user import User
from app.models.file_metadata import FileMetadata

__all__ = ["Role", "UserRole", "User", "FileMetadata"]
