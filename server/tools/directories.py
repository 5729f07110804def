# server/tools/directories.py
from pydantic import BaseModel, Field


class DirPathIn(BaseModel):
    path: str = Field(..., min_length=1, description="Directory path, relative to the game directory or absolute")


class DirRelativizeIn(BaseModel):
    path: str = Field(..., min_length=1, description="Base directory path")
    target: str = Field(..., min_length=1, description="Path to express relative to the base directory")


class SaveDataIn(BaseModel):
    pass
