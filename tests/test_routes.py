from auth.utils import create_access_token, decode_access_token, hash_password
from services.question_bank import QUESTION_POOLS
from services.question_generator import session_generators
from conftest import TEST_USER

CS_ANSWER = "首先，我认为因为我热爱编程，其次我完成了一个开源项目，例如给github贡献代码"


def start_session(client, **overrides):
    body = {"type": "technical", "major": "computer_science", "position": "后端开发",
            "experience": "fresh", "question_count": 3}
    body.update(overrides)
    response = client.post("/api/interview/start", json=body)
    assert response.status_code == 200, response.text
    return response.json()


def test_root(client):
    assert client.get("/").status_code == 200


# ============ INTERVIEW ============

def test_start_session_saves_generated_questions(client, fake_storage):
    data = start_session(client)

    questions = data["questions"]
    assert len(questions) == 3
    assert len({q["title"] for q in questions}) == 3
    assert data["current_question"] == questions[0]
    assert all(q["difficulty"] == "easy" for q in questions)
    assert all(q["tags"] == ["computer_science", "后端开发"] for q in questions)
    assert all(q["category"] == "computer_science" for q in questions)
    assert data["session"]["user_id"] == TEST_USER["id"]
    assert len(fake_storage.questions) == 3


def test_start_session_caps_count_at_pool_size(client):
    data = start_session(client, question_count=10, experience="5+")

    assert len(data["questions"]) == len(QUESTION_POOLS["computer_science"])
    assert data["questions"][0]["difficulty"] == "hard"


def test_start_session_with_unknown_major(client):
    data = start_session(client, major="考古学", question_count=5, experience="1-3")

    assert len(data["questions"]) == 3
    assert {q["category"] for q in data["questions"]} == {"考古学"}
    assert data["questions"][0]["difficulty"] == "medium"


def test_start_session_rejects_negative_count(client):
    response = client.post("/api/interview/start", json={"major": "general", "question_count": -1})

    assert response.status_code == 422


def test_next_question_does_not_repeat_session_questions(client):
    data = start_session(client, question_count=5)
    session_id = data["session"]["id"]
    issued = {q["title"] for q in data["questions"]}

    response = client.post(f"/api/interview/{session_id}/next-question",
                           json={"category": "general", "difficulty": "medium", "major": "computer_science"})

    assert response.status_code == 200
    question = response.json()["question"]
    assert question["title"] not in issued
    assert question["difficulty"] == "medium"


def test_submit_response_evaluates_against_question_duration(client, fake_storage):
    data = start_session(client)
    session_id = data["session"]["id"]
    question = data["questions"][0]
    duration = round(question["duration"] * 0.9)

    response = client.post(f"/api/interview/{session_id}/response", json={
        "question_id": question["id"],
        "answer": CS_ANSWER,
        "duration": duration,
        "major": "computer_science",
    })

    assert response.status_code == 200, response.text
    evaluation = response.json()["evaluation"]
    assert evaluation["speech_score"] == 90
    assert evaluation["content_score"] == 78
    assert evaluation["overall_score"] == 81
    assert 70 <= evaluation["body_language_score"] < 90

    saved = fake_storage.responses[0]
    assert saved["session_id"] == session_id
    assert saved["content_score"] == 78
    assert saved["ai_evaluation"] == evaluation


def test_submit_short_response(client):
    data = start_session(client)
    session_id = data["session"]["id"]

    response = client.post(f"/api/interview/{session_id}/response", json={
        "question_id": data["questions"][0]["id"], "answer": "不知道", "duration": 10,
    })

    assert response.status_code == 200
    assert response.json()["evaluation"]["overall_score"] == 15


def test_submit_response_unknown_question(client):
    session_id = start_session(client)["session"]["id"]

    response = client.post(f"/api/interview/{session_id}/response", json={
        "question_id": 9999, "answer": CS_ANSWER, "duration": 100,
    })

    assert response.status_code == 404
    assert response.json()["detail"] == "Question not found"


def test_other_users_session_is_not_found(client, fake_storage):
    session = fake_storage.create_interview_session(user_id=42, session_type="technical")

    response = client.post(f"/api/interview/{session['id']}/response", json={
        "question_id": 1, "answer": CS_ANSWER, "duration": 100,
    })

    assert response.status_code == 404
    assert response.json()["detail"] == "Session not found"


def test_end_session_scores_and_updates_progress(client, fake_storage):
    data = start_session(client)
    session_id = data["session"]["id"]
    question = data["questions"][0]
    client.post(f"/api/interview/{session_id}/response", json={
        "question_id": question["id"], "answer": "不知道", "duration": 10,
    })

    response = client.post(f"/api/interview/{session_id}/end", json={"duration": 600})

    assert response.status_code == 200, response.text
    body = response.json()
    # (20 + 10 + 15) / 3
    assert body["overall_score"] == 15
    assert body["session"]["status"] == "completed"
    assert body["session"]["duration"] == 600
    assert body["evaluation"]["overall_score"] == 15
    assert len(body["responses"]) == 1
    assert fake_storage.progress[(TEST_USER["id"], "technical")]["total_practices"] == 1
    assert fake_storage.get_interview_session(session_id)["feedback"]["overall_score"] == 15


def test_end_session_releases_its_generator(client):
    session_id = start_session(client)["session"]["id"]
    generator = session_generators.get(session_id)

    client.post(f"/api/interview/{session_id}/end", json={})

    assert session_generators.get(session_id) is not generator
    session_generators.discard(session_id)


def test_practice_evaluation_needs_no_session(anonymous_client):
    response = anonymous_client.post("/api/interview/evaluate", json={
        "answer": CS_ANSWER, "duration": 150, "expected_duration": 180, "major": "computer_science",
    })

    assert response.status_code == 200
    assert response.json()["evaluation"]["overall_score"] == 81


def test_practice_evaluation_validates_durations(anonymous_client):
    response = anonymous_client.post("/api/interview/evaluate", json={
        "answer": CS_ANSWER, "duration": -1, "expected_duration": 180,
    })

    assert response.status_code == 422


# ============ QUESTIONS ============

def test_question_bank_lists_builtin_majors(anonymous_client):
    majors = anonymous_client.get("/api/questions/bank").json()["majors"]

    assert {m["major"]: m["question_count"] for m in majors} == {
        "general": 7, "education": 10, "preschool_education": 10, "computer_science": 6,
        "business": 5, "marketing": 5, "engineering": 5,
    }


def test_question_bank_for_unknown_major(anonymous_client):
    body = anonymous_client.get("/api/questions/bank/考古学").json()

    assert body["builtin"] is False
    assert len(body["questions"]) == 3


def test_saved_questions_filter_by_category(client):
    start_session(client, question_count=2)
    start_session(client, major="marketing", question_count=2)

    response = client.get("/api/questions", params={"category": "marketing"})

    assert response.status_code == 200
    assert [q["category"] for q in response.json()] == ["marketing", "marketing"]


# ============ DASHBOARD ============

def test_user_stats_and_sessions(client):
    first = start_session(client)["session"]["id"]
    start_session(client)
    client.post(f"/api/interview/{first}/end", json={"duration": 7200})

    stats = client.get("/api/user/stats").json()
    assert stats["total_practices"] == 1
    assert stats["total_hours"] == 2
    assert stats["recent_activities"][0]["title"] == "技术面试"

    sessions = client.get("/api/user/sessions").json()
    assert len(sessions) == 2

    progress = client.get("/api/user/progress").json()["progress"]
    assert progress[0]["category"] == "technical"


def test_progress_includes_achievements(client, fake_storage):
    fake_storage.achievements.extend([
        {"id": 1, "user_id": TEST_USER["id"], "type": "first_perfect", "title": "满分回答", "description": "..."},
        {"id": 2, "user_id": 42, "type": "streak_7", "title": "连续七天", "description": "..."},
        {"id": 3, "user_id": TEST_USER["id"], "type": "tech_expert", "title": "技术达人", "description": "..."},
    ])

    body = client.get("/api/user/progress").json()

    assert body["progress"] == []
    assert [a["type"] for a in body["achievements"]] == ["tech_expert", "first_perfect"]


def test_save_and_list_preferences(client):
    config = {"type": "technical", "major": "computer_science", "question_count": 3}

    first = client.post("/api/user/preferences", json={"name": "后端模拟", "config": config})
    assert first.status_code == 200
    assert first.json()["usage_count"] == 1
    assert first.json()["type"] == "interview_config"
    client.post("/api/user/preferences", json={"name": "教育模拟", "config": {"major": "education"}})

    listed = client.get("/api/user/preferences/interview_config").json()
    assert [p["name"] for p in listed] == ["教育模拟", "后端模拟"]
    assert client.get("/api/user/preferences/other").json() == []


def test_saving_existing_name_overwrites_and_counts_use(client):
    client.post("/api/user/preferences", json={"name": "后端模拟", "config": {"question_count": 3}})

    response = client.post("/api/user/preferences", json={"name": "后端模拟", "config": {"question_count": 5}})

    assert response.json()["usage_count"] == 2
    assert response.json()["config"] == {"question_count": 5}
    assert len(client.get("/api/user/preferences/interview_config").json()) == 1


def test_use_preference_moves_it_to_the_front(client):
    older = client.post("/api/user/preferences", json={"name": "A", "config": {}}).json()
    client.post("/api/user/preferences", json={"name": "B", "config": {}})

    response = client.put(f"/api/user/preferences/{older['id']}/use")

    assert response.status_code == 200
    assert response.json()["usage_count"] == 2
    assert client.get("/api/user/preferences/interview_config").json()[0]["name"] == "A"


def test_delete_preference(client):
    pref = client.post("/api/user/preferences", json={"name": "A", "config": {}}).json()

    assert client.delete(f"/api/user/preferences/{pref['id']}").status_code == 200
    assert client.delete(f"/api/user/preferences/{pref['id']}").status_code == 404
    assert client.get("/api/user/preferences/interview_config").json() == []


def test_other_users_preferences_are_not_touched(client, fake_storage):
    pref = fake_storage.save_user_preference(42, "interview_config", "theirs", {})

    assert client.put(f"/api/user/preferences/{pref['id']}/use").status_code == 404
    assert client.delete(f"/api/user/preferences/{pref['id']}").status_code == 404
    assert pref["id"] in fake_storage.preferences


def test_preference_needs_a_name(client):
    response = client.post("/api/user/preferences", json={"name": "", "config": {}})

    assert response.status_code == 422


# ============ TIPS ============

def test_tips_list_active_only(anonymous_client):
    tips = anonymous_client.get("/api/tips").json()

    assert [t["title"] for t in tips] == ["STAR法则", "眼神交流技巧", "语言表达要点"]


def test_tips_filter_by_category(anonymous_client):
    tips = anonymous_client.get("/api/tips", params={"category": "behavioral"}).json()

    assert [t["title"] for t in tips] == ["STAR法则"]


# ============ AUTH ============

def test_register_login_and_me(anonymous_client):
    response = anonymous_client.post("/api/auth/register", json={
        "username": "lihua", "name": "李华", "email": "lihua@example.com",
        "password": "secret123", "major": "education",
    })
    assert response.status_code == 200, response.text
    assert response.json()["user"]["major"] == "education"

    response = anonymous_client.post("/api/auth/login", json={
        "email": "lihua@example.com", "password": "secret123",
    })
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = anonymous_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["username"] == "lihua"


def test_register_duplicate_email(anonymous_client, fake_storage):
    fake_storage.create_user("lihua", "李华", "lihua@example.com", hash_password("x"))

    response = anonymous_client.post("/api/auth/register", json={
        "username": "lihua2", "name": "李华", "email": "lihua@example.com", "password": "secret123",
    })

    assert response.status_code == 400


def test_register_unique_violation_is_a_client_error(anonymous_client, monkeypatch):
    from psycopg2.errors import UniqueViolation

    from services import storage

    def create_user(**kwargs):
        raise UniqueViolation("duplicate key value violates unique constraint \"users_email_key\"")

    monkeypatch.setattr(storage, "create_user", create_user)

    response = anonymous_client.post("/api/auth/register", json={
        "username": "lihua", "name": "李华", "email": "lihua@example.com", "password": "secret123",
    })

    assert response.status_code == 400
    assert response.json()["detail"] == "Email or username already registered"


def test_login_with_wrong_password(anonymous_client, fake_storage):
    fake_storage.create_user("lihua", "李华", "lihua@example.com", hash_password("right"))

    response = anonymous_client.post("/api/auth/login", json={
        "email": "lihua@example.com", "password": "wrong",
    })

    assert response.status_code == 401


def test_invalid_token_is_rejected(anonymous_client):
    response = anonymous_client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401


def test_token_round_trip():
    token_data = decode_access_token(create_access_token(7, "a@example.com"))

    assert token_data.user_id == 7
    assert token_data.email == "a@example.com"


# ============ RATE LIMITING ============

def test_rate_limit_key_prefers_token_user():
    from starlette.requests import Request
    from services.rate_limiter import get_identifier

    def request(headers):
        return Request({
            "type": "http",
            "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
            "client": ("10.0.0.9", 5000),
        })

    token = create_access_token(7, "a@example.com")
    assert get_identifier(request({"Authorization": f"Bearer {token}"})) == "user:7"
    assert get_identifier(request({"Authorization": "Bearer junk"})) == "10.0.0.9"
    assert get_identifier(request({"X-Forwarded-For": "1.2.3.4, 10.0.0.1"})) == "1.2.3.4"


# ============ SESSION GENERATORS ============

def test_abandoned_sessions_do_not_grow_generator_registry(client, monkeypatch):
    monkeypatch.setattr(session_generators, "max_sessions", 10)

    for _ in range(50):
        start_session(client, question_count=1)

    assert len(session_generators) <= 10
