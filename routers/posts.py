# In routers/posts.py

import logging
from fastapi import APIRouter, HTTPException, Request, Depends, Response, status
from typing import List

from domain.posts import Post, PostCreate, PostUpdate, REQUIRED_POST_FIELDS
from domain.validation import blank_fields, missing_fields
from services.record_store import RecordStore, StoreError

logger = logging.getLogger('uvicorn.error')

router = APIRouter(tags=["posts"])


async def get_post_store(request: Request) -> RecordStore:
    if not hasattr(request.app.state, 'post_store') or not request.app.state.post_store:
        logger.error("Post store not initialized or unavailable.")
        raise HTTPException(status_code=503, detail="Database service unavailable")
    return request.app.state.post_store


@router.get(
    "/posts",
    response_model=List[Post],
    summary="Get all posts",
    responses={500: {"description": "Error getting posts"}},
)
async def get_all_posts(store: RecordStore = Depends(get_post_store)):
    try:
        return await store.find_all()
    except StoreError as e:
        logger.exception(f"Error retrieving all posts: {e}")
        raise HTTPException(status_code=500, detail="Error getting posts")


@router.get(
    "/posts/{post_id}",
    response_model=Post,
    summary="Get a specific post using an ID",
    responses={404: {"description": "Post not found"}, 500: {"description": "Error getting post"}},
)
async def get_post_by_id(post_id: str, store: RecordStore = Depends(get_post_store)):
    try:
        post = await store.find_by_id(post_id)
    except StoreError as e:
        logger.exception(f"Error retrieving post {post_id}: {e}")
        raise HTTPException(status_code=500, detail="Error getting post")
    if post is None:
        logger.warning(f"Post with ID {post_id} not found.")
        raise HTTPException(status_code=404, detail="Post not found")
    return post


@router.post(
    "/new-post",
    status_code=status.HTTP_201_CREATED,
    summary="Create a new post",
    responses={400: {"description": "A field is missing data"}, 500: {"description": "Error creating post"}},
)
async def create_post(post_in: PostCreate, store: RecordStore = Depends(get_post_store)):
    payload = post_in.model_dump()
    if missing_fields(payload, REQUIRED_POST_FIELDS):
        logger.warning("Rejected new post with missing fields.")
        raise HTTPException(status_code=400, detail="All fields are required")

    new_post_data = {field: payload[field] for field in REQUIRED_POST_FIELDS}
    try:
        post_id = await store.insert(new_post_data)
    except StoreError as e:
        logger.exception(f"Error creating post '{post_in.postTitle}': {e}")
        raise HTTPException(status_code=500, detail="Error creating post")
    logger.info(f"Created post with ID '{post_id}'")
    return {"id": post_id}


@router.put(
    "/update-post/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Update a post",
    responses={
        400: {"description": "No fields to update, or an empty field"},
        404: {"description": "Failed to find the post"},
        500: {"description": "Error updating the post"},
    },
)
async def update_post(post_id: str, post_in: PostUpdate, store: RecordStore = Depends(get_post_store)):
    changes = post_in.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    if blank_fields(changes):
        raise HTTPException(status_code=400, detail="Fields cannot be empty")
    try:
        outcome = await store.update_by_id(post_id, changes)
    except StoreError as e:
        logger.exception(f"Error updating post {post_id}: {e}")
        raise HTTPException(status_code=500, detail="Error updating post")
    if outcome.matched_count == 0:
        logger.warning(f"Attempt to update non-existent post {post_id}")
        raise HTTPException(status_code=404, detail="Post not found")
    logger.info(f"Updated post {post_id} (modified: {outcome.modified_count})")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/delete-post/{post_id}",
    summary="Delete a post",
    responses={404: {"description": "Failed to find the post"}, 500: {"description": "Error deleting the post"}},
)
async def delete_post(post_id: str, store: RecordStore = Depends(get_post_store)):
    try:
        deleted_count = await store.delete_by_id(post_id)
    except StoreError as e:
        logger.exception(f"Error deleting post {post_id}: {e}")
        raise HTTPException(status_code=500, detail="Error deleting post")
    if deleted_count == 0:
        logger.warning(f"Attempt to delete non-existent post {post_id}")
        raise HTTPException(status_code=404, detail="Post not found")
    logger.info(f"Deleted post {post_id}")
    return {"message": "Post deleted"}
