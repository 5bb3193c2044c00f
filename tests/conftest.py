import itertools
import os

os.environ.setdefault("REDIS_URL", "redis://127.0.0.1:1/0")

import pytest
from fastapi.testclient import TestClient

from main import app
from auth.dependencies import get_current_user
from services import storage
from services.rate_limiter import limiter

TEST_USER = {
    "id": 1,
    "username": "xiaoming",
    "email": "xiaoming@example.com",
    "name": "小明",
    "major": "computer_science",
    "university": None,
    "target_position": "后端开发",
    "created_at": "2026-01-01T00:00:00",
}


SEED_TIPS = [
    {"title": "STAR法则", "content": "...", "category": "behavioral", "icon": "lightbulb", "color": "blue", "is_active": True},
    {"title": "眼神交流技巧", "content": "...", "category": "presentation", "icon": "eye", "color": "green", "is_active": True},
    {"title": "语言表达要点", "content": "...", "category": "communication", "icon": "comments", "color": "purple", "is_active": True},
    {"title": "已下线", "content": "...", "category": "behavioral", "icon": "x", "color": "gray", "is_active": False},
]


class FakeStorage:
    """In-memory stand-in for services.storage, same function signatures."""

    def __init__(self):
        self.users = {}
        self.sessions = {}
        self.questions = {}
        self.responses = []
        self.progress = {}
        self.achievements = []
        self.tips = [dict(tip, id=i) for i, tip in enumerate(SEED_TIPS, start=1)]
        self.preferences = {}
        self._ids = itertools.count(1)

    def _next_id(self):
        return next(self._ids)

    def create_user(self, username, name, email, password_hash, major=None, university=None, target_position=None):
        user = {
            "id": self._next_id(), "username": username, "name": name, "email": email,
            "password": password_hash, "major": major, "university": university,
            "target_position": target_position, "created_at": "2026-01-01T00:00:00",
        }
        self.users[user["id"]] = user
        return {k: v for k, v in user.items() if k != "password"}

    def get_user_by_email(self, email):
        return next((dict(u) for u in self.users.values() if u["email"] == email), None)

    def get_user_by_id(self, user_id):
        user = self.users.get(user_id)
        if user is None:
            return None
        return {k: v for k, v in user.items() if k != "password"}

    def record_login(self, user_id):
        pass

    def create_interview_session(self, user_id, session_type):
        session = {
            "id": self._next_id(), "user_id": user_id, "type": session_type,
            "status": "in_progress", "duration": None, "overall_score": None,
            "end_time": None, "feedback": None,
        }
        self.sessions[session["id"]] = session
        return dict(session)

    def get_interview_session(self, session_id, user_id=None):
        session = self.sessions.get(session_id)
        if session is None or (user_id is not None and session["user_id"] != user_id):
            return None
        return dict(session)

    def complete_interview_session(self, session_id, duration, overall_score, feedback):
        session = self.sessions[session_id]
        session.update(status="completed", duration=duration, overall_score=overall_score,
                       feedback=feedback, end_time="2026-01-01T01:00:00")
        return dict(session)

    def get_user_sessions(self, user_id):
        return [dict(s) for s in reversed(list(self.sessions.values())) if s["user_id"] == user_id]

    def create_question(self, title, content, category, difficulty, duration, tags):
        question = {
            "id": self._next_id(), "title": title, "content": content, "category": category,
            "difficulty": difficulty, "duration": duration, "tags": tags, "is_active": True,
        }
        self.questions[question["id"]] = question
        return dict(question)

    def get_question(self, question_id):
        question = self.questions.get(question_id)
        return dict(question) if question else None

    def get_questions(self, category=None):
        return [dict(q) for q in self.questions.values() if category in (None, q["category"])]

    def create_response(self, session_id, question_id, answer, duration, evaluation):
        response = {
            "id": self._next_id(), "session_id": session_id, "question_id": question_id,
            "answer": answer, "duration": duration,
            "speech_score": evaluation["speech_score"],
            "content_score": evaluation["content_score"],
            "confidence_score": evaluation["confidence_score"],
            "ai_evaluation": evaluation,
        }
        self.responses.append(response)
        return dict(response)

    def get_session_responses(self, session_id):
        return [dict(r) for r in self.responses if r["session_id"] == session_id]

    def update_user_progress(self, user_id, category, total_practices, average_score):
        row = {"user_id": user_id, "category": category,
               "total_practices": total_practices, "average_score": average_score}
        self.progress[(user_id, category)] = row
        return dict(row)

    def get_user_progress(self, user_id):
        return [dict(p) for (uid, _), p in self.progress.items() if uid == user_id]

    def get_user_achievements(self, user_id):
        return [dict(a) for a in reversed(self.achievements) if a["user_id"] == user_id]

    def get_tips(self, category=None):
        return [dict(t) for t in self.tips if t["is_active"] and category in (None, t["category"])]

    def get_user_preferences(self, user_id, preference_type):
        # last_used_at holds a counter value, which orders like a timestamp
        matches = [p for p in self.preferences.values()
                   if p["user_id"] == user_id and p["type"] == preference_type]
        return [dict(p) for p in sorted(matches, key=lambda p: p["last_used_at"], reverse=True)]

    def save_user_preference(self, user_id, preference_type, name, config):
        for pref in self.preferences.values():
            if (pref["user_id"], pref["type"], pref["name"]) == (user_id, preference_type, name):
                pref.update(config=config, usage_count=pref["usage_count"] + 1, last_used_at=self._next_id())
                return dict(pref)
        pref = {
            "id": self._next_id(), "user_id": user_id, "type": preference_type, "name": name,
            "config": config, "usage_count": 1, "last_used_at": self._next_id(),
        }
        self.preferences[pref["id"]] = pref
        return dict(pref)

    def use_user_preference(self, preference_id, user_id):
        pref = self.preferences.get(preference_id)
        if pref is None or pref["user_id"] != user_id:
            return None
        pref.update(usage_count=pref["usage_count"] + 1, last_used_at=self._next_id())
        return dict(pref)

    def delete_user_preference(self, preference_id, user_id):
        pref = self.preferences.get(preference_id)
        if pref is None or pref["user_id"] != user_id:
            return False
        del self.preferences[preference_id]
        return True


STORAGE_FUNCTIONS = [
    "create_user", "get_user_by_email", "get_user_by_id", "record_login",
    "create_interview_session", "get_interview_session", "complete_interview_session",
    "get_user_sessions", "create_question", "get_question", "get_questions",
    "create_response", "get_session_responses", "update_user_progress", "get_user_progress",
    "get_user_achievements", "get_tips", "get_user_preferences", "save_user_preference",
    "use_user_preference", "delete_user_preference",
]


@pytest.fixture
def fake_storage(monkeypatch):
    fake = FakeStorage()
    for name in STORAGE_FUNCTIONS:
        monkeypatch.setattr(storage, name, getattr(fake, name))
    return fake


@pytest.fixture(autouse=True)
def no_rate_limits():
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def anonymous_client(fake_storage):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def client(fake_storage):
    app.dependency_overrides[get_current_user] = lambda: TEST_USER
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
