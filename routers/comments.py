import logging
from fastapi import APIRouter, HTTPException, Request, Depends, Response, status
from typing import List

from domain.comments import Comment, CommentCreate, CommentUpdate, REQUIRED_COMMENT_FIELDS
from domain.validation import blank_fields, missing_fields
from services.record_store import RecordStore, StoreError

logger = logging.getLogger('uvicorn.error')

router = APIRouter(tags=["comments"])


async def get_comment_store(request: Request) -> RecordStore:
    if not hasattr(request.app.state, 'comment_store') or not request.app.state.comment_store:
        logger.error("Comment store not initialized or unavailable.")
        raise HTTPException(status_code=503, detail="Database service unavailable")
    return request.app.state.comment_store


@router.get(
    "/comments",
    response_model=List[Comment],
    summary="Get all comments",
    responses={500: {"description": "Error getting comments"}},
)
async def get_all_comments(store: RecordStore = Depends(get_comment_store)):
    try:
        return await store.find_all()
    except StoreError as e:
        logger.exception(f"Error retrieving all comments: {e}")
        raise HTTPException(status_code=500, detail="Error getting comments")


@router.get(
    "/comments/{comment_id}",
    response_model=Comment,
    summary="Get a specific comment using an ID",
    responses={404: {"description": "Comment not found"}, 500: {"description": "Error getting comment"}},
)
async def get_comment_by_id(comment_id: str, store: RecordStore = Depends(get_comment_store)):
    try:
        comment = await store.find_by_id(comment_id)
    except StoreError as e:
        logger.exception(f"Error retrieving comment {comment_id}: {e}")
        raise HTTPException(status_code=500, detail="Error getting comment")
    if comment is None:
        logger.warning(f"Comment {comment_id} not found")
        raise HTTPException(status_code=404, detail="Comment not found")
    return comment


@router.post(
    "/new-comment",
    status_code=status.HTTP_201_CREATED,
    summary="Create a new comment",
    responses={400: {"description": "A field is missing data"}, 500: {"description": "Error creating comment"}},
)
async def create_comment(comment_in: CommentCreate, store: RecordStore = Depends(get_comment_store)):
    payload = comment_in.model_dump()
    if missing_fields(payload, REQUIRED_COMMENT_FIELDS):
        raise HTTPException(status_code=400, detail="Author and content are required")
    try:
        comment_id = await store.insert({"author": payload["author"], "content": payload["content"]})
    except StoreError as e:
        logger.exception(f"Error creating comment by '{comment_in.author}': {e}")
        raise HTTPException(status_code=500, detail="Error creating comment")
    logger.info(f"Created comment '{comment_id}' by '{comment_in.author}'")
    return {"id": comment_id}


@router.put(
    "/update-comment/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Update a comment",
    responses={
        400: {"description": "No fields to update, or an empty field"},
        404: {"description": "Failed to find the comment"},
        500: {"description": "Error updating the comment"},
    },
)
async def update_comment(comment_id: str, comment_in: CommentUpdate, store: RecordStore = Depends(get_comment_store)):
    changes = comment_in.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    if blank_fields(changes):
        raise HTTPException(status_code=400, detail="Fields cannot be empty")
    try:
        outcome = await store.update_by_id(comment_id, changes)
    except StoreError as e:
        logger.exception(f"Error updating comment {comment_id}: {e}")
        raise HTTPException(status_code=500, detail="Error updating comment")
    if outcome.matched_count == 0:
        logger.warning(f"Attempt to update non-existent comment {comment_id}")
        raise HTTPException(status_code=404, detail="Comment not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/delete-comment/{comment_id}",
    summary="Delete a comment",
    responses={404: {"description": "Failed to find the comment"}, 500: {"description": "Error deleting the comment"}},
)
async def delete_comment(comment_id: str, store: RecordStore = Depends(get_comment_store)):
    try:
        deleted_count = await store.delete_by_id(comment_id)
    except StoreError as e:
        logger.exception(f"Error deleting comment {comment_id}: {e}")
        raise HTTPException(status_code=500, detail="Error deleting comment")
    if deleted_count == 0:
        logger.warning(f"Attempt to delete non-existent comment {comment_id}")
        raise HTTPException(status_code=404, detail="Comment not found")
    return {"message": "Comment deleted"}
