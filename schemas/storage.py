"""Folder and file listing models."""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class FolderInfo(BaseModel):
    name: str
    created_at: Optional[datetime] = None


class FileInfo(BaseModel):
    name: str
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FoldersResponse(BaseModel):
    success: bool = True
    folders: List[FolderInfo]


class FilesResponse(BaseModel):
    success: bool = True
    files: List[FileInfo]
