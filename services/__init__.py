from .question_generator import QuestionGenerator, SessionQuestionGenerators, session_generators
from .interview_ai import (
    ResponseEvaluator, evaluate_interview_response, generate_interview_question,
    calculate_session_score, evaluate_session
)
