from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import update

from leave_tracker.core.security import create_access_token
from leave_tracker.models.leave import LeaveApplication

from conftest import admin_data, faculty_data, leave_data, student_data


@pytest.fixture
def alice(client):
    data = student_data(1, name="Alice")
    response = client.post("/api/auth/register", json=data)
    assert response.status_code == 201, response.text
    return data


@pytest.fixture
def rao(client):
    data = faculty_data(1, name="Dr. Rao")
    response = client.post("/api/auth/register", json=data)
    assert response.status_code == 201, response.text
    return data


def apply(client, headers, **overrides):
    response = client.post("/api/leaves/apply", json=leave_data(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]["leave"]


class TestAuthRoutes:

    def test_register_returns_public_profile(self, client):
        response = client.post("/api/auth/register", json=student_data())

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        user = body["data"]["user"]
        assert user["role"] == "student"
        assert user["roll_number"] == "CSE0001"
        assert user["employee_id"] is None
        assert "password" not in user and "password_hash" not in user

    def test_register_duplicate_email(self, client, alice):
        response = client.post("/api/auth/register", json=student_data(2, email=alice["email"].upper()))

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "User already exists with this email"}

    def test_register_validation_errors_are_field_level(self, client):
        data = student_data(phone="123")
        del data["roll_number"]

        response = client.post("/api/auth/register", json=data)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation failed"
        fields = {error["field"] for error in body["errors"]}
        assert any("phone" in field for field in fields)
        assert any("roll_number" in field for field in fields)

    def test_admin_cannot_self_register(self, client):
        response = client.post("/api/auth/register", json=admin_data())
        assert response.status_code == 400

    def test_login_and_me(self, client, alice, login):
        headers = login(alice)

        response = client.get("/api/auth/me", headers=headers)

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["email"] == "student1@college.edu"
        assert user["last_login"] is not None

    def test_login_wrong_role(self, client, alice):
        response = client.post(
            "/api/auth/login",
            json={"email": alice["email"], "password": alice["password"], "role": "faculty"},
        )
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_login_wrong_password(self, client, alice):
        response = client.post(
            "/api/auth/login",
            json={"email": alice["email"], "password": "nope-nope", "role": "student"},
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    def test_update_profile(self, client, alice, login):
        headers = login(alice)

        response = client.put(
            "/api/auth/profile", json={"name": "  Alice K  ", "semester": 6}, headers=headers
        )

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["name"] == "Alice K"
        assert user["semester"] == 6
        assert user["email"] == alice["email"]

    def test_update_profile_rejects_bad_phone(self, client, alice, login):
        response = client.put("/api/auth/profile", json={"phone": "12ab"}, headers=login(alice))
        assert response.status_code == 400

    def test_logout_acknowledges(self, client, alice, login):
        response = client.post("/api/auth/logout", headers=login(alice))
        assert response.json() == {"success": True, "message": "Logged out successfully"}


class TestAccessGuard:

    def test_missing_token(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json()["message"] == "No token provided, authorization denied"

    def test_invalid_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.token"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token, authorization denied"

    def test_expired_token(self, client, settings, alice):
        token = create_access_token({"sub": "1"}, settings, expires_delta=timedelta(minutes=-1))

        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["message"] == "Token expired, please login again"

    def test_token_for_missing_identity(self, client, settings):
        token = create_access_token({"sub": "42"}, settings)

        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["message"] == "User not found, authorization denied"

    def test_deactivated_identity_is_locked_out(self, client, make_user, alice, login):
        headers = login(alice)
        make_user(admin_data())
        admin_headers = login(admin_data())

        response = client.put("/api/users/1/active", json={"is_active": False}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["user"]["is_active"] is False

        response = client.get("/api/auth/me", headers=headers)
        assert response.status_code == 401
        assert "deactivated" in response.json()["message"]

    def test_role_filter(self, client, alice, rao, login):
        student_headers = login(alice)
        faculty_headers = login(rao)

        assert client.get("/api/leaves/pending", headers=student_headers).status_code == 403
        assert client.get("/api/leaves/all", headers=student_headers).status_code == 403
        assert client.post(
            "/api/leaves/apply", json=leave_data(), headers=faculty_headers
        ).status_code == 403
        assert client.put("/api/users/1/active", json={"is_active": False}, headers=faculty_headers).status_code == 403

        response = client.get("/api/leaves/my-leaves", headers=faculty_headers)
        assert response.json() == {"success": False, "message": "Access denied. Required roles: student"}


class TestLeaveRoutes:

    def test_end_to_end_review(self, client, alice, rao, login):
        student_headers = login(alice)
        faculty_headers = login(rao)

        created = apply(client, student_headers, start_in=3, days=3)
        assert created["status"] == "pending"
        assert created["total_days"] == 3

        response = client.put(
            f"/api/leaves/{created['id']}/approve",
            json={"comments": "Get well soon"},
            headers=faculty_headers,
        )
        assert response.status_code == 200
        leave = response.json()["data"]["leave"]
        assert leave["status"] == "approved"
        assert leave["reviewer_name"] == "Dr. Rao"
        assert leave["reviewer"]["employee_id"] == "EMP001"
        assert leave["is_upcoming"] is True

        again = client.put(f"/api/leaves/{created['id']}/approve", headers=faculty_headers)
        assert again.status_code == 400
        assert again.json()["message"] == "Leave application has already been reviewed"

        reject = client.put(
            f"/api/leaves/{created['id']}/reject", json={"comments": "Too late"}, headers=faculty_headers
        )
        assert reject.status_code == 400

    def test_reject_needs_comments(self, client, alice, rao, login):
        created = apply(client, login(alice))
        faculty_headers = login(rao)

        blank = client.put(f"/api/leaves/{created['id']}/reject", json={"comments": "   "}, headers=faculty_headers)
        missing = client.put(f"/api/leaves/{created['id']}/reject", headers=faculty_headers)

        assert blank.status_code == 400
        assert missing.status_code == 400
        assert blank.json()["errors"] == [
            {"field": "comments", "message": "Comments are required when rejecting a leave"}
        ]

    def test_submission_validation(self, client, alice, login):
        headers = login(alice)
        yesterday = (date.today() - timedelta(days=1)).isoformat()

        past = client.post(
            "/api/leaves/apply",
            json=leave_data(start_date=yesterday, end_date=yesterday),
            headers=headers,
        )
        backwards = client.post(
            "/api/leaves/apply", json=leave_data(start_in=5, end_date=date.today().isoformat()), headers=headers
        )
        short = client.post("/api/leaves/apply", json=leave_data(reason="sick"), headers=headers)
        bad_date = client.post("/api/leaves/apply", json=leave_data(start_date="next week"), headers=headers)

        assert past.status_code == 400
        assert past.json()["message"] == "Start date cannot be in the past"
        assert backwards.status_code == 400
        assert short.status_code == 400
        assert bad_date.status_code == 400

    def test_my_leaves_pagination(self, client, alice, login):
        headers = login(alice)
        for offset in range(3):
            apply(client, headers, start_in=2 + offset, days=1)

        response = client.get("/api/leaves/my-leaves?page=1&limit=2", headers=headers)

        data = response.json()["data"]
        assert len(data["leaves"]) == 2
        assert data["pagination"] == {"current": 1, "pages": 2, "total": 3}

    def test_blank_status_filter_means_all(self, client, alice, login):
        headers = login(alice)
        apply(client, headers)

        response = client.get("/api/leaves/my-leaves?status=", headers=headers)

        assert response.json()["data"]["pagination"]["total"] == 1

    def test_pending_is_department_scoped(self, client, alice, rao, login):
        apply(client, login(alice))
        ece_student = student_data(2, department="ECE")
        client.post("/api/auth/register", json=ece_student)
        apply(client, login(ece_student))

        headers = login(rao)
        response = client.get("/api/leaves/pending", headers=headers)

        leaves = response.json()["data"]["leaves"]
        assert [leave["department"] for leave in leaves] == ["CSE"]
        assert leaves[0]["student"]["phone"] == alice["phone"]

        other = client.get("/api/leaves/pending?department=ECE", headers=headers)
        assert other.status_code == 403

    def test_all_with_filters(self, client, alice, rao, login):
        headers = login(alice)
        apply(client, headers, start_in=3, leave_type="exam")
        apply(client, headers, start_in=20)

        window_start = (date.today() + timedelta(days=10)).isoformat()
        response = client.get(
            f"/api/leaves/all?start_date={window_start}&leave_type=medical", headers=login(rao)
        )

        leaves = response.json()["data"]["leaves"]
        assert len(leaves) == 1
        assert leaves[0]["leave_type"] == "medical"

    def test_get_leave_ownership(self, client, alice, rao, login):
        created = apply(client, login(alice))
        bob = student_data(2)
        client.post("/api/auth/register", json=bob)

        own = client.get(f"/api/leaves/{created['id']}", headers=login(alice))
        other = client.get(f"/api/leaves/{created['id']}", headers=login(bob))
        reviewer = client.get(f"/api/leaves/{created['id']}", headers=login(rao))
        missing = client.get("/api/leaves/9999", headers=login(alice))

        assert own.status_code == 200
        assert own.json()["data"]["leave"]["duration"] == "3 days"
        assert other.status_code == 403
        assert reviewer.status_code == 200
        assert missing.status_code == 404
        assert missing.json()["message"] == "Leave application not found"

    def test_calendar(self, client, alice, rao, login):
        apply(client, login(alice), start_in=5, days=5)
        start = (date.today() + timedelta(days=7)).isoformat()
        end = (date.today() + timedelta(days=20)).isoformat()

        response = client.get(f"/api/leaves/calendar?start_date={start}&end_date={end}", headers=login(rao))

        assert response.status_code == 200
        assert len(response.json()["data"]["leaves"]) == 1

    def test_stats(self, client, alice, rao, login):
        headers = login(alice)
        first = apply(client, headers)
        apply(client, headers)
        client.put(f"/api/leaves/{first['id']}/approve", headers=login(rao))

        student_stats = client.get("/api/leaves/stats", headers=headers).json()["data"]
        faculty_stats = client.get("/api/leaves/stats", headers=login(rao)).json()["data"]

        assert student_stats == {
            "total_leaves": 2, "pending_leaves": 1, "approved_leaves": 1, "rejected_leaves": 0,
        }
        assert faculty_stats == student_stats


class TestUsersAndDashboard:

    def test_students_listing(self, client, alice, rao, login):
        client.post("/api/auth/register", json=student_data(2, department="ECE", semester=5))

        response = client.get("/api/users/students?department=ECE", headers=login(rao))

        assert response.status_code == 200
        students = response.json()["data"]["students"]
        assert [s["semester"] for s in students] == [5]
        assert client.get("/api/users/students", headers=login(alice)).status_code == 403

    def test_faculty_listing_for_any_identity(self, client, alice, rao, login):
        response = client.get("/api/users/faculty", headers=login(alice))

        faculty = response.json()["data"]["faculty"]
        assert [f["employee_id"] for f in faculty] == ["EMP001"]

    def test_dashboards(self, client, alice, rao, login, make_user):
        student_headers = login(alice)
        for offset in range(6):
            apply(client, student_headers, start_in=2 + offset, days=1)

        student_view = client.get("/api/dashboard", headers=student_headers).json()["data"]
        faculty_view = client.get("/api/dashboard", headers=login(rao)).json()["data"]
        make_user(admin_data())
        admin_view = client.get("/api/dashboard", headers=login(admin_data())).json()["data"]

        assert student_view["stats"]["total_leaves"] == 6
        assert len(student_view["recent_leaves"]) == 5
        assert student_view["recent_leaves"][0]["start_date"] == (date.today() + timedelta(days=7)).isoformat()
        assert len(faculty_view["pending_leaves"]) == 5
        assert faculty_view["pending_leaves"][0]["start_date"] == (date.today() + timedelta(days=2)).isoformat()
        assert admin_view == {"stats": {}}


class TestEnvelope:

    def test_unknown_route(self, client):
        response = client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "API endpoint not found"}

    def test_health(self, client):
        body = client.get("/api/health").json()
        assert body["success"] is True
        assert body["environment"] == "test"

    def test_unexpected_error_is_500(self, app):
        @app.get("/api/boom")
        def boom():
            raise RuntimeError("database unavailable")

        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/api/boom")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "message": "Something went wrong!",
            "error": "database unavailable",
        }

    def test_production_hides_error_detail(self, settings):
        from leave_tracker.main import create_app

        app = create_app(settings.model_copy(update={"environment": "production"}))

        @app.get("/api/boom")
        def boom():
            raise RuntimeError("secret detail")

        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/api/boom")

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Something went wrong!"}

    def test_unrenderable_record_is_500(self, app, client, db, alice, login):
        created = apply(client, login(alice))
        db.execute(
            update(LeaveApplication)
            .where(LeaveApplication.id == created["id"])
            .values(leave_type="sabbatical")
        )
        db.commit()
        headers = login(alice)

        with TestClient(app, raise_server_exceptions=False) as raw_client:
            response = raw_client.get(f"/api/leaves/{created['id']}", headers=headers)

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Something went wrong!"
        assert "errors" not in body

    def test_registration_body_errors_stay_400(self, client):
        response = client.post("/api/auth/register", json={"role": "student"})

        assert response.status_code == 400
        assert response.json()["message"] == "Validation failed"
