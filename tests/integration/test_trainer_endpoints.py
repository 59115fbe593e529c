"""
Integration tests for the trainer-facing endpoints: students, sessions,
diet plans, workouts, dashboards and profiles.
"""

from datetime import timedelta

import pytest

from fitcoach.db.base_class import utcnow
from fitcoach.models.payment import AICreditLedger, PaymentIntent, PaymentStatus
from fitcoach.models.profile import StudentStatus, TrainerPlan, UserRole
from fitcoach.models.workout import WorkoutPlan, WorkoutPlanExercise
from tests.utils_jwt import auth_headers

API = "/api/v1"


def add_student(client, headers, n):
    return client.post(f"{API}/students/", headers=headers, json={
        "email": f"student{n}@example.com",
        "first_name": f"Student{n}",
        "last_name": "Test",
    })


class TestStudents:
    def test_free_plan_student_limit(self, client, trainer_headers):
        """
        Test the free plan student limit.

        This test ensures that a free trainer can add three students and
        the fourth is refused until one is paused.
        """
        for n in range(3):
            assert add_student(client, trainer_headers, n).status_code == 201

        response = add_student(client, trainer_headers, 3)
        assert response.status_code == 403

        students = client.get(f"{API}/students/", headers=trainer_headers).json()
        assert len(students) == 3

        response = client.patch(
            f"{API}/students/{students[0]['id']}/status", headers=trainer_headers, json={"status": "paused"}
        )
        assert response.status_code == 200
        assert response.json()["status"] == "paused"

        assert add_student(client, trainer_headers, 3).status_code == 201

        # Re-activating the paused student would exceed the limit again
        response = client.patch(
            f"{API}/students/{students[0]['id']}/status", headers=trainer_headers, json={"status": "active"}
        )
        assert response.status_code == 403

        stats = client.get(f"{API}/students/stats", headers=trainer_headers).json()
        assert stats == {"total": 4, "active": 3, "paused": 1, "cancelled": 0}

    def test_elite_plan_has_no_limit(self, client, make_user):
        elite = make_user(UserRole.trainer, plan=TrainerPlan.elite)
        headers = auth_headers(elite)
        for n in range(5):
            assert add_student(client, headers, n).status_code == 201

    def test_added_student_can_log_in_with_temp_password(self, client, trainer_headers):
        add_student(client, trainer_headers, 1)

        response = client.post(f"{API}/auth/login", json={"email": "student1@example.com", "password": "temp123456"})

        assert response.status_code == 200
        assert response.json()["role"] == "student"

    def test_duplicate_student_email(self, client, trainer_headers):
        add_student(client, trainer_headers, 1)
        assert add_student(client, trainer_headers, 1).status_code == 409

    def test_other_trainers_student_is_not_found(self, client, make_user, trainer_headers):
        other = make_user(UserRole.trainer)
        student = make_user(UserRole.student, trainer_id=other.id)

        response = client.patch(
            f"{API}/students/{student.id}/status", headers=trainer_headers, json={"status": "paused"}
        )
        assert response.status_code == 404

    def test_students_require_trainer_role(self, client, make_user):
        student = make_user(UserRole.student)
        response = client.get(f"{API}/students/", headers=auth_headers(student))
        assert response.status_code == 403


class TestSessions:
    @pytest.fixture
    def student(self, make_user, trainer):
        return make_user(UserRole.student, trainer_id=trainer.id, first_name="Ana")

    def test_schedule_and_complete(self, client, trainer_headers, student):
        scheduled_at = (utcnow() + timedelta(days=1)).isoformat()
        response = client.post(f"{API}/sessions/", headers=trainer_headers, json={
            "student_id": student.id,
            "scheduled_at": scheduled_at,
            "duration_minutes": 45,
        })
        assert response.status_code == 201
        session = response.json()
        assert session["status"] == "scheduled"
        assert session["student_name"] == "Ana Test"

        response = client.patch(
            f"{API}/sessions/{session['id']}/status", headers=trainer_headers, json={"status": "completed"}
        )
        assert response.status_code == 200
        assert response.json()["status"] == "completed"

        # Completed is final
        response = client.patch(
            f"{API}/sessions/{session['id']}/status", headers=trainer_headers, json={"status": "cancelled"}
        )
        assert response.status_code == 409

    def test_sessions_only_for_active_students(self, client, trainer, trainer_headers, make_user):
        paused = make_user(UserRole.student, trainer_id=trainer.id, status=StudentStatus.paused)

        response = client.post(f"{API}/sessions/", headers=trainer_headers, json={
            "student_id": paused.id,
            "scheduled_at": utcnow().isoformat(),
        })

        assert response.status_code == 400

    def test_invalid_duration(self, client, trainer_headers, student):
        response = client.post(f"{API}/sessions/", headers=trainer_headers, json={
            "student_id": student.id,
            "scheduled_at": utcnow().isoformat(),
            "duration_minutes": 0,
        })
        assert response.status_code == 422

    def test_active_students_and_student_view(self, client, trainer_headers, student):
        active = client.get(f"{API}/sessions/students", headers=trainer_headers).json()
        assert [s["id"] for s in active] == [student.id]

        client.post(f"{API}/sessions/", headers=trainer_headers, json={
            "student_id": student.id,
            "scheduled_at": (utcnow() + timedelta(hours=3)).isoformat(),
        })

        mine = client.get(f"{API}/sessions/mine", headers=auth_headers(student))
        assert mine.status_code == 200
        assert len(mine.json()) == 1


class TestDietPlans:
    PAYLOAD = {"name": "Cutting", "target_calories": 2000, "goal": "weight loss"}

    def create(self, client, headers, student_id):
        return client.post(f"{API}/diet-plans/", headers=headers, json={**self.PAYLOAD, "student_id": student_id})

    def test_free_trainer_pays_per_diet(self, client, db_session, trainer, trainer_headers, make_user):
        """
        Test diet plans on the free plan.

        This test ensures that a one-off payment is recorded and the diet
        is marked paid.
        """
        student = make_user(UserRole.student, trainer_id=trainer.id)

        response = self.create(client, trainer_headers, student.id)

        assert response.status_code == 201
        diet = response.json()
        assert diet["is_paid"] is True
        assert [meal["calories"] for meal in diet["content"]["meals"]] == [500, 700, 300, 500]
        payment = db_session.query(PaymentIntent).filter(PaymentIntent.trainer_id == trainer.id).one()
        assert payment.amount == 790
        assert payment.status == PaymentStatus.succeeded

    def test_pro_trainer_spends_ai_credit(self, client, db_session, make_user):
        pro = make_user(UserRole.trainer, plan=TrainerPlan.pro, ai_credits=1)
        student = make_user(UserRole.student, trainer_id=pro.id)
        headers = auth_headers(pro)

        response = self.create(client, headers, student.id)
        assert response.status_code == 201
        assert response.json()["is_paid"] is False
        assert db_session.query(AICreditLedger).filter(AICreditLedger.trainer_id == pro.id).count() == 1

        response = self.create(client, headers, student.id)
        assert response.status_code == 402

    def test_elite_trainer_generates_freely(self, client, db_session, make_user):
        elite = make_user(UserRole.trainer, plan=TrainerPlan.elite, ai_credits=0)
        student = make_user(UserRole.student, trainer_id=elite.id)

        response = self.create(client, auth_headers(elite), student.id)

        assert response.status_code == 201
        assert db_session.query(PaymentIntent).count() == 0

    def test_stats_and_student_view(self, client, trainer, trainer_headers, make_user):
        student = make_user(UserRole.student, trainer_id=trainer.id)
        self.create(client, trainer_headers, student.id)

        stats = client.get(f"{API}/diet-plans/stats", headers=trainer_headers).json()
        assert stats == {"total": 1, "paid": 1, "average_calories": 2000}

        mine = client.get(f"{API}/diet-plans/mine", headers=auth_headers(student)).json()
        assert len(mine) == 1


class TestWorkouts:
    EXERCISE = {
        "name": "Bench press",
        "description": "Flat barbell bench press",
        "muscle_groups": ["chest", "triceps"],
        "equipment": "Barbell",
        "difficulty_level": 3,
        "instructions": "Lower the bar to the chest and press it back up",
    }

    def test_plan_assign_and_complete(self, client, trainer, trainer_headers, make_user):
        """
        Test the workout flow.

        This test ensures that a template plan can be built from an
        exercise, copied to a student and a session on it completed.
        """
        student = make_user(UserRole.student, trainer_id=trainer.id)

        exercise = client.post(f"{API}/workouts/exercises", headers=trainer_headers, json=self.EXERCISE)
        assert exercise.status_code == 201
        exercise_id = exercise.json()["id"]

        plan = client.post(f"{API}/workouts/plans", headers=trainer_headers, json={
            "name": "Push day",
            "description": "Chest focused upper body day",
            "difficulty_level": 3,
            "muscle_groups": ["chest"],
            "exercises": [{"exercise_id": exercise_id, "target_sets": 3, "rest_seconds": 60}],
        })
        assert plan.status_code == 201
        plan = plan.json()
        assert plan["is_template"] is True
        assert plan["estimated_duration_minutes"] == 6
        assert plan["duration_text"] == "6min"
        assert plan["difficulty_text"] == "Intermediate"
        assert plan["exercises"][0]["order_in_workout"] == 1

        copy = client.post(
            f"{API}/workouts/plans/{plan['id']}/assign", headers=trainer_headers, json={"student_id": student.id}
        )
        assert copy.status_code == 201
        copy = copy.json()
        assert copy["is_template"] is False
        assert copy["student_id"] == student.id
        assert len(copy["exercises"]) == 1
        assert copy["muscle_groups"] == ["chest"]

        session = client.post(f"{API}/workouts/sessions", headers=trainer_headers, json={
            "student_id": student.id,
            "workout_plan_id": copy["id"],
            "scheduled_date": utcnow().isoformat(),
        })
        assert session.status_code == 201
        session_id = session.json()["id"]

        done = client.post(
            f"{API}/workouts/sessions/{session_id}/complete", headers=trainer_headers, json={"rating": 5}
        )
        assert done.status_code == 200
        assert done.json()["status"] == "completed"
        assert done.json()["workout_plan_name"] == "Push day"

        again = client.post(f"{API}/workouts/sessions/{session_id}/complete", headers=trainer_headers, json={})
        assert again.status_code == 409

        mine = client.get(f"{API}/workouts/plans/mine", headers=auth_headers(student)).json()
        assert [p["id"] for p in mine] == [copy["id"]]

    def test_plan_without_muscle_groups_uses_exercise_groups(self, client, db_session, trainer, trainer_headers):
        exercise = client.post(f"{API}/workouts/exercises", headers=trainer_headers, json=self.EXERCISE).json()
        plan = WorkoutPlan(
            trainer_id=trainer.id,
            name="Imported plan",
            difficulty_level=9,
            estimated_duration_minutes=95,
            muscle_groups=[],
        )
        plan.exercises = [WorkoutPlanExercise(exercise_id=exercise["id"], order_in_workout=1)]
        db_session.add(plan)
        db_session.commit()

        body = client.get(f"{API}/workouts/plans/{plan.id}", headers=trainer_headers).json()

        assert body["muscle_groups"] == ["chest", "triceps"]
        assert body["duration_text"] == "1h 35min"
        assert body["difficulty_text"] == "Undefined"

    def test_invalid_plan_reports_every_error(self, client, trainer_headers):
        response = client.post(f"{API}/workouts/plans", headers=trainer_headers, json={"name": "X"})
        assert response.status_code == 422
        assert response.json()["detail"] == [
            "Workout name must have at least 3 characters",
            "Description must have at least 10 characters",
            "Select at least one muscle group",
        ]

    def test_invalid_exercise(self, client, trainer_headers):
        response = client.post(f"{API}/workouts/exercises", headers=trainer_headers, json={"name": "Squat"})
        assert response.status_code == 422


class TestDashboardAndProfile:
    def test_trainer_dashboard(self, client, db_session, trainer, trainer_headers, make_user):
        student = make_user(UserRole.student, trainer_id=trainer.id)
        client.post(f"{API}/sessions/", headers=trainer_headers, json={
            "student_id": student.id,
            "scheduled_at": (utcnow() + timedelta(days=2)).isoformat(),
        })

        stats = client.get(f"{API}/dashboard/trainer/stats", headers=trainer_headers).json()
        assert stats["active_students"] == 1
        assert stats["max_students"] == 3
        assert stats["total_sessions"] == 1

        upcoming = client.get(f"{API}/dashboard/trainer/upcoming-sessions", headers=trainer_headers).json()
        assert len(upcoming) == 1

        activity = client.get(f"{API}/dashboard/trainer/recent-activity", headers=trainer_headers).json()
        assert activity[0]["type"] == "student_added"

    def test_student_dashboard(self, client, make_user):
        coach = make_user(UserRole.trainer, first_name="Coach")
        student = make_user(UserRole.student, trainer_id=coach.id)

        response = client.get(f"{API}/dashboard/student", headers=auth_headers(student))

        assert response.status_code == 200
        assert response.json()["trainer_name"] == "Coach Test"
        assert response.json()["upcoming_sessions"] == []

    def test_profile_updates(self, client, trainer_headers):
        response = client.put(f"{API}/profile/me", headers=trainer_headers, json={"phone": "+55 11 90000-0000"})
        assert response.status_code == 200
        assert response.json()["phone"] == "+55 11 90000-0000"

        response = client.put(f"{API}/profile/me/trainer", headers=trainer_headers, json={"bio": "Strength coach"})
        assert response.status_code == 200
        assert response.json()["bio"] == "Strength coach"
        assert response.json()["plan"] == "free"
