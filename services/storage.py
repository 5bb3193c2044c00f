"""
Data access for users, interview sessions, questions, responses, progress,
achievements, tips and saved interview configurations.

Every function opens its own connection, commits on success and always
closes the cursor and connection.
"""
from contextlib import contextmanager
from typing import List, Optional

from psycopg2.extras import Json, RealDictCursor

from services.database import get_connection

USER_COLUMNS = "id, username, email, name, major, university, target_position, created_at"


@contextmanager
def _cursor(commit: bool = False):
    conn = get_connection()
    cursor = conn.cursor(cursor_factory=RealDictCursor)
    try:
        yield cursor
        if commit:
            conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cursor.close()
        conn.close()


# ============ USERS ============

def create_user(username: str, name: str, email: str, password_hash: str,
                major: Optional[str] = None, university: Optional[str] = None,
                target_position: Optional[str] = None) -> dict:
    with _cursor(commit=True) as cursor:
        cursor.execute(f"""
            INSERT INTO users (username, name, email, password, major, university, target_position)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING {USER_COLUMNS}
        """, (username, name, email, password_hash, major, university, target_position))
        return cursor.fetchone()


def get_user_by_email(email: str) -> Optional[dict]:
    """Includes the password hash, for login."""
    with _cursor() as cursor:
        cursor.execute(
            f"SELECT {USER_COLUMNS}, password FROM users WHERE email = %s",
            (email,)
        )
        return cursor.fetchone()


def get_user_by_id(user_id: int) -> Optional[dict]:
    with _cursor() as cursor:
        cursor.execute(f"SELECT {USER_COLUMNS} FROM users WHERE id = %s", (user_id,))
        return cursor.fetchone()


def record_login(user_id: int):
    with _cursor(commit=True) as cursor:
        cursor.execute("UPDATE users SET last_login = CURRENT_TIMESTAMP WHERE id = %s", (user_id,))


# ============ INTERVIEW SESSIONS ============

def create_interview_session(user_id: int, session_type: str) -> dict:
    with _cursor(commit=True) as cursor:
        cursor.execute("""
            INSERT INTO interview_sessions (user_id, type, status)
            VALUES (%s, %s, 'in_progress')
            RETURNING *
        """, (user_id, session_type))
        return cursor.fetchone()


def get_interview_session(session_id: int, user_id: Optional[int] = None) -> Optional[dict]:
    with _cursor() as cursor:
        if user_id is None:
            cursor.execute("SELECT * FROM interview_sessions WHERE id = %s", (session_id,))
        else:
            cursor.execute(
                "SELECT * FROM interview_sessions WHERE id = %s AND user_id = %s",
                (session_id, user_id)
            )
        return cursor.fetchone()


def complete_interview_session(session_id: int, duration: int, overall_score: int, feedback: dict) -> Optional[dict]:
    with _cursor(commit=True) as cursor:
        cursor.execute("""
            UPDATE interview_sessions
            SET status = 'completed',
                end_time = CURRENT_TIMESTAMP,
                duration = %s,
                overall_score = %s,
                feedback = %s
            WHERE id = %s
            RETURNING *
        """, (duration, overall_score, Json(feedback), session_id))
        return cursor.fetchone()


def get_user_sessions(user_id: int) -> List[dict]:
    with _cursor() as cursor:
        cursor.execute("""
            SELECT
                s.*,
                COUNT(r.id) as answered_questions
            FROM interview_sessions s
            LEFT JOIN responses r ON s.id = r.session_id
            WHERE s.user_id = %s
            GROUP BY s.id
            ORDER BY s.start_time DESC
        """, (user_id,))
        return cursor.fetchall()


# ============ QUESTIONS ============

def create_question(title: str, content: str, category: str, difficulty: str,
                    duration: int, tags: List[str]) -> dict:
    with _cursor(commit=True) as cursor:
        cursor.execute("""
            INSERT INTO questions (title, content, category, difficulty, duration, tags, is_active)
            VALUES (%s, %s, %s, %s, %s, %s, TRUE)
            RETURNING *
        """, (title, content, category, difficulty, duration, tags))
        return cursor.fetchone()


def get_question(question_id: int) -> Optional[dict]:
    with _cursor() as cursor:
        cursor.execute("SELECT * FROM questions WHERE id = %s", (question_id,))
        return cursor.fetchone()


def get_questions(category: Optional[str] = None) -> List[dict]:
    with _cursor() as cursor:
        if category:
            cursor.execute(
                "SELECT * FROM questions WHERE is_active = TRUE AND category = %s ORDER BY id",
                (category,)
            )
        else:
            cursor.execute("SELECT * FROM questions WHERE is_active = TRUE ORDER BY id")
        return cursor.fetchall()


# ============ RESPONSES ============

def create_response(session_id: int, question_id: int, answer: str, duration: int,
                    evaluation: dict) -> dict:
    with _cursor(commit=True) as cursor:
        cursor.execute("""
            INSERT INTO responses
                (session_id, question_id, answer, duration, speech_score, content_score, confidence_score, ai_evaluation)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING *
        """, (
            session_id,
            question_id,
            answer,
            duration,
            evaluation['speech_score'],
            evaluation['content_score'],
            evaluation['confidence_score'],
            Json(evaluation)
        ))
        return cursor.fetchone()


def get_session_responses(session_id: int) -> List[dict]:
    with _cursor() as cursor:
        cursor.execute(
            "SELECT * FROM responses WHERE session_id = %s ORDER BY timestamp, id",
            (session_id,)
        )
        return cursor.fetchall()


# ============ PROGRESS ============

def update_user_progress(user_id: int, category: str, total_practices: int, average_score: int) -> dict:
    """Create or update the user's progress row for a category."""
    with _cursor(commit=True) as cursor:
        cursor.execute("""
            SELECT id FROM user_progress WHERE user_id = %s AND category = %s
        """, (user_id, category))
        existing = cursor.fetchone()

        if existing:
            cursor.execute("""
                UPDATE user_progress
                SET total_practices = %s,
                    average_score = %s,
                    last_practice = CURRENT_TIMESTAMP,
                    updated_at = CURRENT_TIMESTAMP
                WHERE id = %s
                RETURNING *
            """, (total_practices, average_score, existing['id']))
        else:
            cursor.execute("""
                INSERT INTO user_progress (user_id, category, total_practices, average_score, last_practice)
                VALUES (%s, %s, %s, %s, CURRENT_TIMESTAMP)
                RETURNING *
            """, (user_id, category, total_practices, average_score))
        return cursor.fetchone()


def get_user_progress(user_id: int) -> List[dict]:
    with _cursor() as cursor:
        cursor.execute(
            "SELECT * FROM user_progress WHERE user_id = %s ORDER BY category",
            (user_id,)
        )
        return cursor.fetchall()


# ============ ACHIEVEMENTS ============

def get_user_achievements(user_id: int) -> List[dict]:
    with _cursor() as cursor:
        cursor.execute(
            "SELECT * FROM achievements WHERE user_id = %s ORDER BY unlocked_at DESC",
            (user_id,)
        )
        return cursor.fetchall()


# ============ TIPS ============

def get_tips(category: Optional[str] = None) -> List[dict]:
    with _cursor() as cursor:
        if category:
            cursor.execute(
                "SELECT * FROM tips WHERE is_active = TRUE AND category = %s ORDER BY id",
                (category,)
            )
        else:
            cursor.execute("SELECT * FROM tips WHERE is_active = TRUE ORDER BY id")
        return cursor.fetchall()


# ============ PREFERENCES ============

def get_user_preferences(user_id: int, preference_type: str) -> List[dict]:
    """Saved configurations of one type, most recently used first."""
    with _cursor() as cursor:
        cursor.execute("""
            SELECT * FROM user_preferences
            WHERE user_id = %s AND type = %s
            ORDER BY last_used_at DESC, id DESC
        """, (user_id, preference_type))
        return cursor.fetchall()


def save_user_preference(user_id: int, preference_type: str, name: str, config: dict) -> dict:
    """
    Save a configuration under ``name``. Saving an existing name replaces
    its config and counts as one more use.
    """
    with _cursor(commit=True) as cursor:
        cursor.execute("""
            INSERT INTO user_preferences (user_id, type, name, config, usage_count, last_used_at)
            VALUES (%s, %s, %s, %s, 1, CURRENT_TIMESTAMP)
            ON CONFLICT (user_id, type, name) DO UPDATE
            SET config = EXCLUDED.config,
                usage_count = user_preferences.usage_count + 1,
                last_used_at = CURRENT_TIMESTAMP
            RETURNING *
        """, (user_id, preference_type, name, Json(config)))
        return cursor.fetchone()


def use_user_preference(preference_id: int, user_id: int) -> Optional[dict]:
    with _cursor(commit=True) as cursor:
        cursor.execute("""
            UPDATE user_preferences
            SET usage_count = usage_count + 1,
                last_used_at = CURRENT_TIMESTAMP
            WHERE id = %s AND user_id = %s
            RETURNING *
        """, (preference_id, user_id))
        return cursor.fetchone()


def delete_user_preference(preference_id: int, user_id: int) -> bool:
    with _cursor(commit=True) as cursor:
        cursor.execute(
            "DELETE FROM user_preferences WHERE id = %s AND user_id = %s",
            (preference_id, user_id)
        )
        return cursor.rowcount > 0
