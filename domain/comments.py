from pydantic import BaseModel
from typing import Optional

REQUIRED_COMMENT_FIELDS = ("author", "content")


class CommentFields(BaseModel):
    author: Optional[str] = None
    content: Optional[str] = None


class CommentCreate(CommentFields):
    pass


class CommentUpdate(CommentFields):
    pass


class Comment(BaseModel):
    id: str
    author: str # Display name of the commenter
    content: str

    class Config:
        from_attributes = True
