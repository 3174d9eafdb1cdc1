from pydantic import BaseModel, Field
from typing import Optional


class FileCreate(BaseModel):
    file_name: str = Field(min_length=1, max_length=255)
    file_type: Optional[str] = None
    size_bytes: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    storage_path: Optional[str] = None
    is_public: bool = False


class FileUpdate(BaseModel):
    file_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    # sharing decision, owner only
    is_public: Optional[bool] = None


class CommentCreate(BaseModel):
    comment: str = Field(min_length=1, max_length=5000)
    timestamp_position: Optional[float] = Field(default=None, ge=0)


class ShareCreate(BaseModel):
    shared_with_user_id: str = Field(min_length=1)
    permission_level: str = "view"
