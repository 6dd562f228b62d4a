"""HTTP surface, driven end to end through httpx."""

import pytest

API = "/api/v1"
PASSWORD = "SecurePass123"


async def register(client, email, full_name="Test Person"):
    response = await client.post(
        f"{API}/auth/register",
        json={"email": email, "password": PASSWORD, "full_name": full_name},
    )
    assert response.status_code == 201, response.text
    return response.json()


def bearer(tokens):
    return {"Authorization": f"Bearer {tokens['access_token']}"}


# ============================================================
# Auth
# ============================================================

@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_register_grants_user_role(client):
    tokens = await register(client, "newcomer@simplelms.org")

    assert tokens["token_type"] == "bearer"
    assert tokens["user"]["roles"] == ["User"]


@pytest.mark.asyncio
async def test_bootstrap_admin_email_gets_admin_role(client):
    tokens = await register(client, "Admin@SimpleLMS.org")

    assert "Admin" in tokens["user"]["roles"]


@pytest.mark.asyncio
async def test_register_same_email_twice(client):
    await register(client, "twice@simplelms.org")

    response = await client.post(
        f"{API}/auth/register",
        json={"email": "twice@simplelms.org", "password": PASSWORD, "full_name": "Again"},
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_register_rejects_weak_password(client):
    response = await client.post(
        f"{API}/auth/register",
        json={"email": "weak@simplelms.org", "password": "password", "full_name": "Weak"},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_login_and_me(client):
    await register(client, "returning@simplelms.org", "Returning Learner")

    response = await client.post(
        f"{API}/auth/login",
        json={"email": "returning@simplelms.org", "password": PASSWORD},
    )
    assert response.status_code == 200
    me = await client.get(f"{API}/auth/me", headers=bearer(response.json()))

    assert me.status_code == 200
    assert me.json()["full_name"] == "Returning Learner"
    assert me.json()["last_login"] is not None


@pytest.mark.asyncio
async def test_login_with_wrong_password(client):
    await register(client, "forgetful@simplelms.org")

    response = await client.post(
        f"{API}/auth/login",
        json={"email": "forgetful@simplelms.org", "password": "WrongPass999"},
    )

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_refresh_issues_new_access_token(client):
    tokens = await register(client, "refresher@simplelms.org")

    response = await client.post(
        f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
    )

    assert response.status_code == 200
    assert response.json()["access_token"]


@pytest.mark.asyncio
async def test_requests_without_token_are_refused(client):
    response = await client.get(f"{API}/courses")

    assert response.status_code in (401, 403)


@pytest.mark.asyncio
async def test_garbage_token_is_unauthorized(client):
    response = await client.get(f"{API}/courses", headers={"Authorization": "Bearer nonsense"})

    assert response.status_code == 401


# ============================================================
# Roles
# ============================================================

@pytest.mark.asyncio
async def test_student_cannot_create_courses_or_quizzes(client):
    student = bearer(await register(client, "curious@simplelms.org"))

    course = await client.post(
        f"{API}/courses",
        json={"title": "Mine", "description": "Mine", "content_path": "courses/mine"},
        headers=student,
    )
    quiz = await client.post(
        f"{API}/quiz/create",
        json={"title": "Mine", "content_item_id": "00000000-0000-0000-0000-000000000000"},
        headers=student,
    )

    assert course.status_code == 403
    assert quiz.status_code == 403


@pytest.mark.asyncio
async def test_role_request_review_by_admin(client):
    admin = bearer(await register(client, "admin@simplelms.org"))
    hopeful = bearer(await register(client, "hopeful@simplelms.org"))

    submitted = await client.post(
        f"{API}/role-requests", json={"reason": "Ten years teaching"}, headers=hopeful
    )
    assert submitted.status_code == 201
    assert submitted.json()["status"] == "pending"

    duplicate = await client.post(f"{API}/role-requests", json={}, headers=hopeful)
    assert duplicate.status_code == 400

    forbidden = await client.get(f"{API}/admin/role-requests", headers=hopeful)
    assert forbidden.status_code == 403

    pending = await client.get(f"{API}/admin/role-requests?status=pending", headers=admin)
    assert [r["id"] for r in pending.json()] == [submitted.json()["id"]]

    approved = await client.post(
        f"{API}/admin/role-requests/{submitted.json()['id']}/approve",
        json={"admin_notes": "Approved"},
        headers=admin,
    )
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"

    me = await client.get(f"{API}/auth/me", headers=hopeful)
    assert "Instructor" in me.json()["roles"]


# ============================================================
# Full course and quiz flow
# ============================================================

async def make_instructor(client, admin):
    tokens = await register(client, "instructor@simplelms.org", "Ada Instructor")
    headers = bearer(tokens)
    request = await client.post(f"{API}/role-requests", json={}, headers=headers)
    await client.post(
        f"{API}/admin/role-requests/{request.json()['id']}/approve", json={}, headers=admin
    )
    return tokens["user"]["id"], headers


@pytest.mark.asyncio
async def test_course_to_quiz_results_flow(client):
    admin = bearer(await register(client, "admin@simplelms.org"))
    instructor_id, instructor = await make_instructor(client, admin)

    course = await client.post(
        f"{API}/courses",
        json={
            "title": "Statistics 101",
            "description": "Distributions and sampling",
            "content_path": "courses/stats-101",
            "instructor": instructor_id,
            "duration_hours": 20,
            "level": "Beginner",
        },
        headers=admin,
    )
    assert course.status_code == 201, course.text
    course_id = course.json()["id"]

    topic = await client.post(
        f"{API}/courses/{course_id}/topics", json={"title": "Averages", "order": 1}, headers=instructor
    )
    assert topic.status_code == 201, topic.text
    item = await client.post(
        f"{API}/topics/{topic.json()['id']}/content-items",
        json={"title": "Averages check", "content_type": "quiz"},
        headers=instructor,
    )
    assert item.status_code == 201, item.text

    quiz = await client.post(
        f"{API}/quiz/create",
        json={"title": "Averages check", "content_item_id": item.json()["id"], "passing_score": 60},
        headers=instructor,
    )
    assert quiz.status_code == 201, quiz.text
    quiz_id = quiz.json()["id"]

    mean = await client.post(
        f"{API}/quiz/edit/{quiz_id}/questions",
        json={
            "question_text": "Mean of 2, 4, 6?",
            "points": 3,
            "order": 1,
            "options": [
                {"option_text": "4", "is_correct": True, "order": 1},
                {"option_text": "6", "order": 2},
            ],
        },
        headers=instructor,
    )
    assert mean.status_code == 201, mean.text
    median = await client.post(
        f"{API}/quiz/edit/{quiz_id}/questions",
        json={
            "question_text": "The median is always one of the values",
            "question_type": "true_false",
            "points": 2,
            "order": 2,
            "options": [
                {"option_text": "True", "order": 1},
                {"option_text": "False", "is_correct": True, "order": 2},
            ],
        },
        headers=instructor,
    )
    assert median.status_code == 201, median.text

    student = bearer(await register(client, "pupil@simplelms.org"))

    not_enrolled = await client.get(f"{API}/quiz/take/{quiz_id}", headers=student)
    assert not_enrolled.status_code == 403

    enrolled = await client.post(f"{API}/courses/{course_id}/enroll", headers=student)
    assert enrolled.status_code == 200

    taken = await client.get(f"{API}/quiz/take/{quiz_id}", headers=student)
    assert taken.status_code == 200
    flow = taken.json()
    assert flow["route"] == "continue"
    assert flow["session"]["attempt"]["total_points"] == 5
    assert all("is_correct" not in o for q in flow["session"]["questions"] for o in q["options"])

    correct_mean = next(o["id"] for o in mean.json()["options"] if o["is_correct"])
    submitted = await client.post(
        f"{API}/quiz/submit",
        json={
            "attempt_id": flow["attempt_id"],
            "answers": {mean.json()["id"]: correct_mean, median.json()["id"]: True},
        },
        headers=student,
    )
    assert submitted.status_code == 200, submitted.text
    attempt = submitted.json()["attempt"]
    assert attempt["score"] == 3
    assert attempt["percentage_score"] == 60.0
    assert attempt["is_passed"] is True

    again = await client.post(
        f"{API}/quiz/submit",
        json={"attempt_id": flow["attempt_id"], "answers": {}},
        headers=student,
    )
    assert again.status_code == 400

    results = await client.get(f"{API}/quiz/results/{quiz_id}", headers=student)
    assert results.status_code == 200
    body = results.json()
    assert body["total_attempts"] == 1
    assert body["passed_attempts"] == 1
    assert body["best_attempt"]["id"] == flow["attempt_id"]

    outsider = bearer(await register(client, "outsider@simplelms.org"))
    peek = await client.get(f"{API}/quiz/continue/{flow['attempt_id']}", headers=outsider)
    assert peek.status_code == 403


@pytest.mark.asyncio
async def test_other_instructor_gets_forbidden_on_quiz_editor(client):
    admin = bearer(await register(client, "admin@simplelms.org"))
    instructor_id, instructor = await make_instructor(client, admin)
    course = await client.post(
        f"{API}/courses",
        json={"title": "Art", "description": "Colour", "content_path": "courses/art", "instructor": instructor_id},
        headers=admin,
    )
    topic = await client.post(f"{API}/courses/{course.json()['id']}/topics", json={"title": "Hue"}, headers=admin)
    item = await client.post(
        f"{API}/topics/{topic.json()['id']}/content-items", json={"title": "Hue quiz"}, headers=admin
    )
    quiz = await client.post(
        f"{API}/quiz/create",
        json={"title": "Hue quiz", "content_item_id": item.json()["id"]},
        headers=instructor,
    )

    rival = bearer(await register(client, "rival@simplelms.org"))
    request = await client.post(f"{API}/role-requests", json={}, headers=rival)
    await client.post(f"{API}/admin/role-requests/{request.json()['id']}/approve", json={}, headers=admin)

    response = await client.get(f"{API}/quiz/edit/{quiz.json()['id']}", headers=rival)

    assert response.status_code == 403
    assert response.json()["detail"] == "You are not allowed to edit this quiz"


@pytest.mark.asyncio
async def test_unknown_quiz_is_not_found(client):
    student = bearer(await register(client, "lost@simplelms.org"))

    response = await client.get(
        f"{API}/quiz/take/00000000-0000-0000-0000-000000000000", headers=student
    )

    assert response.status_code == 404
    assert response.json() == {"detail": "Quiz not found"}


@pytest.mark.asyncio
async def test_quiz_edit_with_null_title_is_rejected(client):
    admin = bearer(await register(client, "admin@simplelms.org"))
    course = await client.post(
        f"{API}/courses",
        json={"title": "Music", "description": "Scales", "content_path": "courses/music"},
        headers=admin,
    )
    topic = await client.post(f"{API}/courses/{course.json()['id']}/topics", json={"title": "Major"}, headers=admin)
    item = await client.post(
        f"{API}/topics/{topic.json()['id']}/content-items", json={"title": "Scale quiz"}, headers=admin
    )
    quiz = await client.post(
        f"{API}/quiz/create",
        json={"title": "Scale quiz", "content_item_id": item.json()["id"]},
        headers=admin,
    )
    quiz_id = quiz.json()["id"]

    response = await client.put(f"{API}/quiz/edit/{quiz_id}", json={"title": None}, headers=admin)

    assert response.status_code == 422
    unchanged = await client.get(f"{API}/quiz/edit/{quiz_id}", headers=admin)
    assert unchanged.json()["title"] == "Scale quiz"


# ============================================================
# Topic and content item editing, content progress
# ============================================================

@pytest.mark.asyncio
async def test_topic_and_content_item_edit_delete_and_completion(client):
    admin = bearer(await register(client, "admin@simplelms.org"))
    instructor_id, instructor = await make_instructor(client, admin)
    course = await client.post(
        f"{API}/courses",
        json={
            "title": "Chemistry",
            "description": "Atoms and bonds",
            "content_path": "courses/chemistry",
            "instructor": instructor_id,
        },
        headers=admin,
    )
    course_id = course.json()["id"]
    topic = await client.post(f"{API}/courses/{course_id}/topics", json={"title": "Atoms"}, headers=instructor)
    topic_id = topic.json()["id"]
    reading = await client.post(
        f"{API}/topics/{topic_id}/content-items", json={"title": "Reading", "order": 1}, headers=instructor
    )
    video = await client.post(
        f"{API}/topics/{topic_id}/content-items", json={"title": "Video", "order": 2}, headers=instructor
    )

    renamed = await client.put(f"{API}/topics/{topic_id}", json={"title": "Atomic structure"}, headers=instructor)
    assert renamed.status_code == 200
    assert renamed.json()["title"] == "Atomic structure"

    bad = await client.put(f"{API}/topics/{topic_id}", json={"order": None}, headers=instructor)
    assert bad.status_code == 422

    edited = await client.put(
        f"{API}/content-items/{reading.json()['id']}",
        json={"content": "Protons, neutrons and electrons"},
        headers=instructor,
    )
    assert edited.status_code == 200
    assert edited.json()["content"] == "Protons, neutrons and electrons"

    student = bearer(await register(client, "pupil@simplelms.org"))
    refused = await client.put(f"{API}/topics/{topic_id}", json={"title": "Mine"}, headers=student)
    assert refused.status_code == 403

    not_enrolled = await client.post(f"{API}/content-items/{reading.json()['id']}/complete", headers=student)
    assert not_enrolled.status_code == 403

    await client.post(f"{API}/courses/{course_id}/enroll", headers=student)
    completed = await client.post(f"{API}/content-items/{reading.json()['id']}/complete", headers=student)
    assert completed.status_code == 200, completed.text
    assert completed.json()["status"] == "complete"

    progress = await client.get(f"{API}/courses/{course_id}/progress", headers=student)
    assert [p["content_item_id"] for p in progress.json()] == [reading.json()["id"]]

    deleted = await client.delete(f"{API}/content-items/{video.json()['id']}", headers=instructor)
    assert deleted.status_code == 204
    gone = await client.get(f"{API}/content-items/{video.json()['id']}", headers=student)
    assert gone.status_code == 404

    dropped = await client.delete(f"{API}/topics/{topic_id}", headers=instructor)
    assert dropped.status_code == 204
    outline = await client.get(f"{API}/courses/{course_id}", headers=student)
    assert outline.json()["topics"] == []
