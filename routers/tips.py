from fastapi import APIRouter, HTTPException
from typing import List, Optional
from services import storage
from core.logger import setup_logger

router = APIRouter(prefix="/api/tips", tags=["Tips"])
logger = setup_logger("routers.tips")


@router.get("", response_model=List[dict])
async def get_tips(category: Optional[str] = None):
    """Active interview tips, optionally for one category"""
    try:
        return storage.get_tips(category)
    except Exception as e:
        logger.exception("Failed to get tips")
        raise HTTPException(status_code=500, detail=str(e))
