"""
Rule-based interview answer scoring.

Scores come from keyword containment, a handful of regular expressions and
weighted averages. Nothing here calls a model or a network service.
"""
import math
import random
import re
from typing import Dict, Iterable, List, Optional

from core.config import COMPREHENSIVE_EXPECTED_SECONDS, LEXICON_PATH
from core.lexicon import Lexicon, load_lexicon
from core.logger import setup_logger
from models.interview import InterviewEvaluation
from services.question_bank import FALLBACK_CONTENT, FALLBACK_DURATION, FALLBACK_TITLE
from services.question_generator import QuestionGenerator

logger = setup_logger("interview_ai")

MIN_ANSWER_LENGTH = 10
SENTENCE_SPLIT = re.compile(r"[。！？.!?]")

OVERALL_WEIGHTS = {
    "content": 0.35,
    "fluency": 0.25,
    "depth": 0.20,
    "attitude": 0.15,
    "speech": 0.05,
}

NEXT_RECOMMENDATIONS = [
    "继续练习专业相关的面试题目",
    "多参与实际项目提升专业技能",
    "练习在不同场景下的表达能力",
    "定期进行自我反思和总结",
]

SHORT_ANSWER_EVALUATION = InterviewEvaluation(
    overall_score=15,
    speech_score=20,
    content_score=10,
    confidence_score=15,
    body_language_score=60,
    strengths=["完成了基本回答"],
    improvements=["需要提供更详细和完整的回答", "建议深入思考问题后再回答"],
    detailed_feedback="回答过于简短，缺乏具体内容。建议仔细思考问题，提供更详细的回答。",
    next_recommendations=["多练习面试题目", "准备充分的回答内容", "提高表达的完整性"],
)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float, high: float):
    return max(low, min(value, high))


def _count_present(answer: str, words: Iterable[str]) -> int:
    return sum(1 for word in words if word in answer)


class ResponseEvaluator:
    """
    Turns one free-text answer into an ``InterviewEvaluation``.

    Args:
        lexicon: Word lists and patterns; defaults to the configured lexicon
        rng: Source for the simulated body-language score
    """

    def __init__(self, lexicon: Optional[Lexicon] = None, rng: Optional[random.Random] = None):
        self.lexicon = lexicon or load_lexicon(LEXICON_PATH)
        self.rng = rng or random.Random()

        self._example = re.compile(self.lexicon.example_pattern)
        self._sequencing = re.compile(self.lexicon.sequencing_pattern)
        self._reflection = re.compile(self.lexicon.reflection_pattern)
        self._perspectives = [re.compile(p) for p in self.lexicon.perspective_patterns]

    # ------------------------------------------------------------------
    # Sub-scores
    # ------------------------------------------------------------------

    def content_score(self, answer: str, major: Optional[str] = None) -> int:
        """Professional-term coverage for the major's dictionary."""
        keywords = self.lexicon.keywords_for(major)
        if keywords is None:
            return 70

        positive = _count_present(answer, keywords.positive)
        negative = _count_present(answer, keywords.negative)
        advanced = _count_present(answer, keywords.advanced)

        score = 60 + 2 * positive - 5 * negative + 5 * advanced
        if positive >= 3:
            score += 10
        if advanced >= 1:
            score += 15

        return clamp(score, 10, 100)

    def fluency_score(self, answer: str) -> int:
        score = 70

        sentences = [s for s in SENTENCE_SPLIT.split(answer) if s.strip()]
        if sentences:
            avg_length = sum(len(s) for s in sentences) / len(sentences)
            if 10 <= avg_length <= 30:
                score += 10

        tokens = re.split(r"\s+", answer)
        if len(set(tokens)) / len(tokens) > 0.7:
            score += 10

        score += min(_count_present(answer, self.lexicon.connectors) * 2, 10)

        return clamp(score, 0, 100)

    def depth_score(self, answer: str) -> int:
        score = 50

        if len(answer) > 200:
            score += 15
        if len(answer) > 400:
            score += 10

        if self._example.search(answer):
            score += 15
        if self._sequencing.search(answer):
            score += 10
        if self._reflection.search(answer):
            score += 10

        score += 5 * sum(1 for pattern in self._perspectives if pattern.search(answer))

        return min(score, 100)

    def attitude_score(self, answer: str) -> int:
        positive = _count_present(answer, self.lexicon.attitude_positive)
        negative = _count_present(answer, self.lexicon.attitude_negative)

        score = 70 + 3 * positive - 8 * negative
        if "！" in answer:
            score += 5
        if ("?" in answer or "？" in answer) and positive > 0:
            score += 3

        return clamp(score, 10, 100)

    @staticmethod
    def speech_score(duration: float, expected_duration: float) -> int:
        """Timing appropriateness of the answer length."""
        score = 75

        if expected_duration > 0:
            ratio = duration / expected_duration
        elif duration > 0:
            ratio = math.inf
        else:
            return score

        if 0.7 <= ratio <= 1.3:
            score += 15
        elif ratio < 0.5:
            score -= 20
        elif ratio > 2:
            score -= 10

        return score

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate(
        self,
        answer: str,
        duration: float,
        expected_duration: float,
        major: Optional[str] = None,
        position: Optional[str] = None
    ) -> InterviewEvaluation:
        """
        Evaluate a single interview answer.

        Args:
            answer: Candidate's answer text
            duration: Seconds the candidate spent answering
            expected_duration: Seconds the question was designed for
            major: Major used to pick the keyword dictionary and feedback wording
            position: Target position (accepted for the caller's convenience)

        Returns:
            InterviewEvaluation with overall/speech/content/confidence scores in [10, 100]
            and a body-language score in [70, 90)
        """
        if not answer or len(answer.strip()) < MIN_ANSWER_LENGTH:
            logger.info("Answer too short for scoring, returning floor evaluation")
            return SHORT_ANSWER_EVALUATION

        content = self.content_score(answer, major)
        fluency = self.fluency_score(answer)
        depth = self.depth_score(answer)
        attitude = self.attitude_score(answer)
        speech = self.speech_score(duration, expected_duration)

        confidence = round_half_up((attitude + depth) / 2)
        overall = round_half_up(
            content * OVERALL_WEIGHTS["content"]
            + fluency * OVERALL_WEIGHTS["fluency"]
            + depth * OVERALL_WEIGHTS["depth"]
            + attitude * OVERALL_WEIGHTS["attitude"]
            + speech * OVERALL_WEIGHTS["speech"]
        )

        scores = {
            "content": content,
            "fluency": fluency,
            "depth": depth,
            "attitude": attitude,
            "speech": speech,
            "confidence": confidence,
        }
        major_label = major or ""

        evaluation = InterviewEvaluation(
            overall_score=clamp(overall, 10, 100),
            speech_score=clamp(speech, 10, 100),
            content_score=clamp(content, 10, 100),
            confidence_score=clamp(confidence, 10, 100),
            body_language_score=70 + self.rng.randrange(20),  # no video analysis, simulated
            strengths=build_strengths(scores),
            improvements=build_improvements(scores, major_label),
            detailed_feedback=build_detailed_feedback(scores, major_label),
            next_recommendations=list(NEXT_RECOMMENDATIONS),
        )

        logger.info(
            f"Evaluated answer ({len(answer)} chars, major={major}): overall={evaluation.overall_score}, "
            f"content={content}, fluency={fluency}, depth={depth}, attitude={attitude}, speech={speech}"
        )
        return evaluation


# ----------------------------------------------------------------------
# Narrative feedback
# ----------------------------------------------------------------------

STRENGTH_SENTENCES = [
    ("content", "专业知识掌握扎实"),
    ("fluency", "语言表达流畅自然"),
    ("depth", "思考深入，分析全面"),
    ("attitude", "工作态度积极主动"),
    ("speech", "回答时长控制得当"),
]

IMPROVEMENT_SENTENCES = [
    ("content", "加强{major}专业知识学习，多阅读相关理论和案例"),
    ("fluency", "多练习口语表达，提高语言流畅度和逻辑性"),
    ("confidence", "增强自信心，练习在公开场合表达观点"),
    ("depth", "深化思考，多从不同角度分析问题"),
    ("attitude", "培养积极主动的工作态度和职业热情"),
]

# (dimension, [>=85, >=70, otherwise])
FEEDBACK_TIERS = [
    ("content", [
        "您的回答内容丰富，专业知识掌握扎实，展现了良好的{major}专业素养。",
        "您的回答有一定的专业基础，建议进一步丰富专业知识的表达。",
        "建议加强{major}专业知识的学习，在回答中融入更多专业术语和概念。",
    ]),
    ("fluency", [
        "语言表达流畅自然，逻辑清晰，沟通能力出色。",
        "表达基本流畅，可以适当增加逻辑连接词的使用。",
        "建议多练习口语表达，提高语言的流畅度和逻辑性。",
    ]),
    ("attitude", [
        "展现出积极的工作态度和强烈的职业热情。",
        "工作态度较为积极，可以进一步展现对职业的热情。",
        "建议培养更积极的工作态度，展现对专业领域的热爱。",
    ]),
]


def build_strengths(scores: Dict[str, int]) -> List[str]:
    strengths = [sentence for key, sentence in STRENGTH_SENTENCES if scores[key] >= 80]
    return strengths or ["完成了面试回答", "展现了基本的表达能力"]


def build_improvements(scores: Dict[str, int], major: str = "") -> List[str]:
    return [
        sentence.format(major=major)
        for key, sentence in IMPROVEMENT_SENTENCES
        if scores[key] < 80
    ]


def build_detailed_feedback(scores: Dict[str, int], major: str = "") -> str:
    feedbacks = []
    for key, (high, mid, low) in FEEDBACK_TIERS:
        if scores[key] >= 85:
            sentence = high
        elif scores[key] >= 70:
            sentence = mid
        else:
            sentence = low
        feedbacks.append(sentence.format(major=major))
    return " ".join(feedbacks)


# ----------------------------------------------------------------------
# Async entry points used by the routers
# ----------------------------------------------------------------------

_default_evaluator = None


def get_evaluator() -> ResponseEvaluator:
    """Get or create the shared evaluator (it holds no per-request state)."""
    global _default_evaluator
    if _default_evaluator is None:
        _default_evaluator = ResponseEvaluator()
    return _default_evaluator


async def evaluate_interview_response(
    answer: str,
    duration: float,
    expected_duration: float,
    major: Optional[str] = None,
    position: Optional[str] = None,
    evaluator: Optional[ResponseEvaluator] = None
) -> InterviewEvaluation:
    evaluator = evaluator or get_evaluator()
    return evaluator.evaluate(answer, duration, expected_duration, major, position)


async def generate_interview_question(
    category: str,
    difficulty: str,
    major: Optional[str] = None,
    position: Optional[str] = None,
    generator: Optional[QuestionGenerator] = None
) -> dict:
    """
    Draw one question for the given major (or category).

    Returns:
        Dict with title, content, expected_duration and category. Falls back
        to a templated question when the generator yields nothing.
    """
    generator = generator or QuestionGenerator()
    questions = generator.generate_questions(major or category, 1)

    if questions:
        return questions[0].model_dump()

    logger.warning(f"No question generated for major={major}, category={category}; using fallback")
    return {
        "title": FALLBACK_TITLE.format(major=major or ""),
        "content": FALLBACK_CONTENT.format(major=major or ""),
        "expected_duration": FALLBACK_DURATION,
        "category": category,
    }


def calculate_session_score(responses: List[dict]) -> int:
    """
    Session score: mean over responses of the speech/content/confidence average.

    Missing scores count as 0; no responses gives 0.
    """
    if not responses:
        return 0

    total = sum(
        ((r.get('speech_score') or 0) + (r.get('content_score') or 0) + (r.get('confidence_score') or 0)) / 3
        for r in responses
    )
    return round_half_up(total / len(responses))


async def evaluate_session(
    responses: List[dict],
    session_type: Optional[str] = None,
    evaluator: Optional[ResponseEvaluator] = None
) -> InterviewEvaluation:
    """Comprehensive evaluation of every answer in a session taken as one text."""
    all_answers = "\n".join(r['answer'] for r in responses)
    total_duration = sum(r.get('duration') or 0 for r in responses)
    expected_total = len(responses) * COMPREHENSIVE_EXPECTED_SECONDS

    return await evaluate_interview_response(
        all_answers,
        total_duration,
        expected_total,
        session_type,
        "general",
        evaluator=evaluator
    )
