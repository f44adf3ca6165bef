"""Document and answering-backend response models."""

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """Response for uploads."""

    message: str = "File uploaded successfully"
    filename: str


class DocumentListResponse(BaseModel):
    """Response for GET /pdfs/."""

    pdfs: list[str] = Field(default_factory=list)


class AnswerResponse(BaseModel):
    """Response for POST /ask/."""

    answer: str
