"""
Bookstore Backend — Attachment Upload Schema
==============================================

What:  Framework-neutral representation of one uploaded file part.
Why:   Services receive plain data instead of Starlette's UploadFile, so
       they can be exercised without a multipart request.
"""

from typing import Optional

from pydantic import BaseModel, Field


class AttachmentUpload(BaseModel):
    """A file part already read into memory by the route."""

    filename: Optional[str] = Field(default=None, description="Original filename as sent by the client")
    content_type: Optional[str] = Field(default=None, description="Content-Type of the part")
    data: bytes = Field(default=b"", description="Raw file bytes")

    def __repr__(self) -> str:
        return f"AttachmentUpload(filename={self.filename!r}, size={len(self.data)})"
