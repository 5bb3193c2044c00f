from .auth import UserCreate, UserLogin, Token, TokenData, User
from .interview import (
    Question, InterviewEvaluation, EvaluationInput,
    InterviewSessionCreate, NextQuestionRequest, ResponseSubmit, InterviewEnd, PreferenceSave
)
