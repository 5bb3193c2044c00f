from fastapi import APIRouter, HTTPException, Depends, Request
from services import storage
from services.interview_ai import (
    evaluate_interview_response, generate_interview_question,
    calculate_session_score, evaluate_session
)
from services.question_generator import session_generators
from services.rate_limiter import limiter, EVALUATION_LIMIT
from models.interview import (
    InterviewSessionCreate, NextQuestionRequest, ResponseSubmit, InterviewEnd, EvaluationInput
)
from auth.dependencies import get_current_user
from core.config import DEFAULT_QUESTION_COUNT, MAX_QUESTION_COUNT
from core.logger import setup_logger

router = APIRouter(prefix="/api/interview", tags=["Interview"])
logger = setup_logger("routers.interview")


def difficulty_for(experience: str) -> str:
    if experience == "fresh":
        return "easy"
    if experience == "1-3":
        return "medium"
    return "hard"


def _get_owned_session(session_id: int, current_user: dict) -> dict:
    session = storage.get_interview_session(session_id, current_user['id'])
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@router.post("/start", response_model=dict)
async def start_interview_session(
    request: InterviewSessionCreate,
    current_user: dict = Depends(get_current_user)
):
    """
    Start a new interview session for a major
    Picks questions from the major's pool and saves them to the database
    """
    try:
        count = request.question_count
        if count is None:
            count = DEFAULT_QUESTION_COUNT
        count = min(count, MAX_QUESTION_COUNT)

        session = storage.create_interview_session(current_user['id'], request.type)

        generator = session_generators.get(session['id'])
        generator.reset()
        generated = generator.generate_questions(request.major, count)

        difficulty = difficulty_for(request.experience)
        tags = [t for t in (request.major, request.position) if t]

        questions = [
            storage.create_question(
                title=q.title,
                content=q.content,
                category=q.category,
                difficulty=difficulty,
                duration=q.expected_duration,
                tags=tags
            )
            for q in generated
        ]

        logger.info(f"Started session {session['id']} for user {current_user['id']} with {len(questions)} questions")

        return {
            "session": session,
            "questions": questions,
            "current_question": questions[0] if questions else None,
            "config": {
                "major": request.major,
                "position": request.position,
                "company": request.company,
                "experience": request.experience,
                "question_count": count
            }
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to start interview")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/evaluate", response_model=dict)
@limiter.limit(EVALUATION_LIMIT)
async def evaluate_practice_answer(request: Request, payload: EvaluationInput):
    """
    Score an answer without a session (nothing is saved)
    """
    evaluation = await evaluate_interview_response(
        payload.answer,
        payload.duration,
        payload.expected_duration,
        payload.major,
        payload.position
    )
    return {"evaluation": evaluation.model_dump()}


@router.post("/{session_id}/next-question", response_model=dict)
async def next_interview_question(
    session_id: int,
    request: NextQuestionRequest,
    current_user: dict = Depends(get_current_user)
):
    """
    Add one more question to a running session
    """
    try:
        session = _get_owned_session(session_id, current_user)
        if session['status'] == "completed":
            raise HTTPException(status_code=400, detail="Session already completed")

        question = await generate_interview_question(
            request.category,
            request.difficulty,
            request.major,
            request.position,
            generator=session_generators.get(session_id)
        )

        saved = storage.create_question(
            title=question['title'],
            content=question['content'],
            category=question['category'],
            difficulty=request.difficulty,
            duration=question['expected_duration'],
            tags=[t for t in (request.major, request.position) if t]
        )
        return {"question": saved}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Failed to generate question for session {session_id}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{session_id}/response", response_model=dict)
@limiter.limit(EVALUATION_LIMIT)
async def submit_interview_response(
    request: Request,
    session_id: int,
    payload: ResponseSubmit,
    current_user: dict = Depends(get_current_user)
):
    """
    Submit an answer to an interview question and get its evaluation
    """
    try:
        _get_owned_session(session_id, current_user)

        question = storage.get_question(payload.question_id)
        if not question:
            raise HTTPException(status_code=404, detail="Question not found")

        evaluation = await evaluate_interview_response(
            payload.answer,
            payload.duration,
            question['duration'],
            payload.major,
            payload.position
        )
        evaluation_data = evaluation.model_dump()

        response = storage.create_response(
            session_id=session_id,
            question_id=payload.question_id,
            answer=payload.answer,
            duration=payload.duration,
            evaluation=evaluation_data
        )

        return {
            "response": response,
            "evaluation": evaluation_data
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Failed to submit response for session {session_id}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{session_id}/end", response_model=dict)
async def end_interview_session(
    session_id: int,
    request: InterviewEnd,
    current_user: dict = Depends(get_current_user)
):
    """
    Complete a session: score it, update progress, evaluate all answers together
    """
    try:
        session = _get_owned_session(session_id, current_user)
        responses = storage.get_session_responses(session_id)

        overall_score = calculate_session_score(responses)

        updated_session = storage.complete_interview_session(
            session_id,
            duration=request.duration,
            overall_score=overall_score,
            feedback={
                "responses": [r.get('ai_evaluation') for r in responses],
                "overall_score": overall_score
            }
        )

        storage.update_user_progress(
            session['user_id'],
            session['type'],
            total_practices=len(responses),
            average_score=overall_score
        )

        evaluation = await evaluate_session(responses, session['type'])
        session_generators.discard(session_id)

        logger.info(f"Completed session {session_id}: {len(responses)} responses, score {overall_score}")

        return {
            "session": updated_session,
            "evaluation": evaluation.model_dump(),
            "overall_score": overall_score,
            "responses": responses
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Failed to end session {session_id}")
        raise HTTPException(status_code=500, detail=str(e))
