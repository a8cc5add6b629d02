####################################
# --- Request/response schemas --- #
####################################

from typing import List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
)


class FileDescriptor(BaseModel):
    """A stored file as presented to clients."""
    name: str = Field(
        description="The object key, or the key without the `uploads/` prefix in listings.",
        json_schema_extra={"example": "uploads/1718000000000_report.pdf"},
    )
    url: str = Field(
        description="Public access URL of the object.",
        json_schema_extra={
            "example": "https://my-bucket.s3.us-east-1.amazonaws.com/uploads/1718000000000_report.pdf"
        },
    )


class UploadFilesResponse(BaseModel):
    """Response model for `POST /upload`."""
    message: str = Field(description="A message about the operation.")
    files: List[FileDescriptor]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "Files uploaded successfully",
                "files": [
                    {
                        "name": "uploads/1718000000000_report.pdf",
                        "url": "https://my-bucket.s3.us-east-1.amazonaws.com/uploads/1718000000000_report.pdf",
                    }
                ],
            }
        }
    )


class GetFilesResponse(BaseModel):
    """Response model for `GET /files`."""
    files: List[FileDescriptor]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "files": [
                    {
                        "name": "1718000000000_report.pdf",
                        "url": "https://my-bucket.s3.us-east-1.amazonaws.com/uploads/1718000000000_report.pdf",
                    }
                ],
            }
        }
    )


class DeleteFileResponse(BaseModel):
    """Response model for `DELETE /delete/:file_name`."""
    message: str


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response."""
    message: str = Field(description="What failed.")
    error: Optional[str] = Field(None, description="Raw text of the underlying error, when there is one.")
