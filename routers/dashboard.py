from fastapi import APIRouter, HTTPException, Depends
from typing import List
from services import storage
from services.interview_ai import round_half_up
from models.interview import PreferenceSave
from auth.dependencies import get_current_user
from core.logger import setup_logger

router = APIRouter(prefix="/api/user", tags=["Dashboard"])
logger = setup_logger("routers.dashboard")

SESSION_TYPE_TITLES = {
    "technical": "技术面试",
    "behavioral": "行为面试",
}


@router.get("/stats")
async def get_user_stats(current_user: dict = Depends(get_current_user)):
    """
    Practice statistics for the current user
    """
    try:
        sessions = storage.get_user_sessions(current_user['id'])
        completed = [s for s in sessions if s['status'] == "completed"]

        total_practices = len(completed)
        average_score = 0
        if total_practices:
            average_score = round_half_up(
                sum(s.get('overall_score') or 0 for s in completed) / total_practices
            )

        total_seconds = sum(s.get('duration') or 0 for s in completed)

        return {
            "total_practices": total_practices,
            "average_score": average_score,
            "total_hours": round_half_up(total_seconds / 3600),
            "recent_activities": [
                {
                    "id": s['id'],
                    "title": SESSION_TYPE_TITLES.get(s['type'], "综合面试"),
                    "score": s.get('overall_score') or 0,
                    "end_time": s.get('end_time')
                }
                for s in completed[:3]
            ]
        }

    except Exception as e:
        logger.exception("Failed to get user stats")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/progress")
async def get_progress(current_user: dict = Depends(get_current_user)):
    """Per-category practice progress and unlocked achievements"""
    try:
        return {
            "progress": storage.get_user_progress(current_user['id']),
            "achievements": storage.get_user_achievements(current_user['id'])
        }
    except Exception as e:
        logger.exception("Failed to get user progress")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/sessions", response_model=List[dict])
async def get_sessions(current_user: dict = Depends(get_current_user)):
    """All interview sessions of the current user, newest first"""
    try:
        return storage.get_user_sessions(current_user['id'])
    except Exception as e:
        logger.exception("Failed to get sessions")
        raise HTTPException(status_code=500, detail=str(e))


# ============ SAVED CONFIGURATIONS ============

@router.get("/preferences/{preference_type}", response_model=List[dict])
async def get_preferences(preference_type: str, current_user: dict = Depends(get_current_user)):
    """Saved configurations of one type, most recently used first"""
    try:
        return storage.get_user_preferences(current_user['id'], preference_type)
    except Exception as e:
        logger.exception("Failed to get preferences")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/preferences", response_model=dict)
async def save_preference(preference: PreferenceSave, current_user: dict = Depends(get_current_user)):
    """
    Save an interview configuration by name
    An existing name is overwritten and its usage count goes up by one
    """
    try:
        return storage.save_user_preference(
            current_user['id'],
            preference.type,
            preference.name,
            preference.config
        )
    except Exception as e:
        logger.exception("Failed to save preference")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/preferences/{preference_id}/use", response_model=dict)
async def use_preference(preference_id: int, current_user: dict = Depends(get_current_user)):
    """Record that a saved configuration was used again"""
    try:
        preference = storage.use_user_preference(preference_id, current_user['id'])
        if not preference:
            raise HTTPException(status_code=404, detail="Preference not found")
        return preference

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Failed to update preference {preference_id}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/preferences/{preference_id}")
async def delete_preference(preference_id: int, current_user: dict = Depends(get_current_user)):
    try:
        if not storage.delete_user_preference(preference_id, current_user['id']):
            raise HTTPException(status_code=404, detail="Preference not found")
        return {"message": "Preference deleted successfully"}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Failed to delete preference {preference_id}")
        raise HTTPException(status_code=500, detail=str(e))
