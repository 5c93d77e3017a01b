from pydantic import BaseModel, Field
from typing import Optional, Union

# A post is a game review; postContent must be unique across all posts
REQUIRED_POST_FIELDS = (
    "postTitle",
    "postDate",
    "postContent",
    "gameTitle",
    "platform",
    "rating",
    "reviewer",
)


class PostFields(BaseModel):
    # Everything optional so presence is checked by the handler, not the parser
    postTitle: Optional[str] = None
    postDate: Optional[str] = None
    postContent: Optional[str] = None
    gameTitle: Optional[str] = None
    platform: Optional[str] = None
    rating: Optional[Union[str, int, float]] = None
    reviewer: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "postTitle": "Zelda Review",
                "postDate": "2024-01-01",
                "postContent": "Great game",
                "gameTitle": "Zelda",
                "platform": "Switch",
                "rating": "9",
                "reviewer": "Alex",
            }
        }


class PostCreate(PostFields):
    pass


class PostUpdate(PostFields):
    pass


class Post(BaseModel):
    id: str
    postTitle: str
    postDate: str
    postContent: str
    gameTitle: Optional[str] = Field(default=None)
    platform: Optional[str] = Field(default=None)
    rating: Optional[Union[str, int, float]] = Field(default=None)
    reviewer: Optional[str] = Field(default=None)

    class Config:
        from_attributes = True
