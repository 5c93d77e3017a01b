from pathlib import Path

from fastapi import APIRouter, status
from fastapi.responses import FileResponse, RedirectResponse

from auth import CurrentUser

FRONTEND_DIR = Path(__file__).resolve().parent.parent / "frontend"
# Only this subfolder is publicly mounted; pages above it go through routes
STATIC_DIR = FRONTEND_DIR / "static"

router = APIRouter(include_in_schema=False)


@router.get("/")
async def root():
    return RedirectResponse("/home", status_code=status.HTTP_302_FOUND)


@router.get("/login")
async def login_page():
    return FileResponse(FRONTEND_DIR / "login.html")


@router.get("/home")
async def home_page(current_user: CurrentUser):
    return FileResponse(FRONTEND_DIR / "index.html")
