# server/tools/files.py
import base64
import binascii

from pydantic import BaseModel, Field, field_validator


class FilePathIn(BaseModel):
    path: str = Field(..., min_length=1, description="File path, relative to the game directory or absolute")


class FileWriteTextIn(BaseModel):
    path: str = Field(..., min_length=1, description="File path, relative to the game directory or absolute")
    content: str = Field(..., description="UTF-8 text content to write")


class FileWriteBytesIn(BaseModel):
    path: str = Field(..., min_length=1, description="File path, relative to the game directory or absolute")
    content_b64: str = Field(..., description="Base64-encoded bytes to write")

    @field_validator("content_b64")
    @classmethod
    def check_base64(cls, v: str) -> str:
        try:
            base64.b64decode(v, validate=True)
        except binascii.Error as exc:
            raise ValueError(f"not valid base64: {exc}") from exc
        return v

    def data(self) -> bytes:
        return base64.b64decode(self.content_b64, validate=True)


class FileTransferIn(BaseModel):
    path: str = Field(..., min_length=1, description="Source file path")
    destination: str = Field(..., min_length=1, description="Destination file path (must be inside the sandbox)")
