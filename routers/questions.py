from fastapi import APIRouter, HTTPException
from typing import List, Optional
from services import storage
from services.question_bank import QUESTION_POOLS, known_majors, pool_for
from core.logger import setup_logger

router = APIRouter(prefix="/api/questions", tags=["Questions"])
logger = setup_logger("routers.questions")


@router.get("", response_model=List[dict])
async def get_questions(category: Optional[str] = None):
    """Get saved questions, optionally for one category"""
    try:
        return storage.get_questions(category)
    except Exception as e:
        logger.exception("Failed to get questions")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/bank", response_model=dict)
async def get_question_bank():
    """List the built-in majors and how many questions each pool holds"""
    return {
        "majors": [
            {"major": major, "question_count": len(QUESTION_POOLS[major])}
            for major in known_majors()
        ]
    }


@router.get("/bank/{major}", response_model=dict)
async def get_major_questions(major: str):
    """Questions for a major; unknown majors get the generic templates"""
    return {
        "major": major,
        "builtin": major in QUESTION_POOLS,
        "questions": [q.model_dump() for q in pool_for(major)]
    }
