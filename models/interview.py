from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional, List


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    content: str
    expected_duration: int
    category: str


class InterviewEvaluation(BaseModel):
    model_config = ConfigDict(frozen=True)

    overall_score: int
    speech_score: int
    content_score: int
    confidence_score: int
    body_language_score: int
    strengths: List[str]
    improvements: List[str]
    detailed_feedback: str
    next_recommendations: List[str]


class EvaluationInput(BaseModel):
    answer: str
    duration: int = Field(ge=0)
    expected_duration: int = Field(ge=0)
    major: Optional[str] = None
    position: Optional[str] = None


class InterviewSessionCreate(BaseModel):
    type: str = "random"
    major: str = "general"
    position: Optional[str] = None
    company: Optional[str] = None
    experience: Optional[str] = None
    question_count: Optional[int] = Field(default=None, ge=0)


class NextQuestionRequest(BaseModel):
    category: str = "general"
    difficulty: str = "medium"
    major: Optional[str] = None
    position: Optional[str] = None


class ResponseSubmit(BaseModel):
    question_id: int
    answer: str
    duration: int = Field(ge=0)
    major: Optional[str] = None
    position: Optional[str] = None


class InterviewEnd(BaseModel):
    duration: int = Field(default=0, ge=0)


class PreferenceSave(BaseModel):
    type: str = "interview_config"
    name: str = Field(min_length=1)
    config: Dict[str, Any]
