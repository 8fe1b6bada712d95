from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class ConversionResult(BaseModel):
    success: bool
    repository: Optional[str] = None
    c_files_count: Optional[int] = None
    header_files_count: Optional[int] = None
    filename: Optional[str] = None
    error: Optional[str] = None

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)
