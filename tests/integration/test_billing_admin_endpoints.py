"""
Integration tests for payments, plans, AI credits, the admin panel and
notifications.
"""

from fitcoach.models.notification import SystemSetting
from fitcoach.models.profile import StudentStatus, TrainerPlan, UserRole
from fitcoach.models.user import User
from tests.utils_jwt import auth_headers

API = "/api/v1"


class TestPayments:
    def test_payment_intent_lifecycle(self, client, trainer_headers):
        response = client.post(f"{API}/payments/intents", headers=trainer_headers, json={
            "amount": 15000,
            "method": "pix",
            "description": "Monthly coaching",
        })
        assert response.status_code == 201
        payment = response.json()
        assert payment["status"] == "pending"
        assert payment["fee_percent"] == 1.5
        assert payment["currency"] == "BRL"
        assert payment["net_amount"] == 14775

        response = client.patch(
            f"{API}/payments/intents/{payment['id']}/status", headers=trainer_headers, json={"status": "succeeded"}
        )
        assert response.status_code == 200
        assert response.json()["status"] == "succeeded"

        # Only pending payments can change
        response = client.patch(
            f"{API}/payments/intents/{payment['id']}/status", headers=trainer_headers, json={"status": "failed"}
        )
        assert response.status_code == 409

        payments = client.get(f"{API}/payments/", headers=trainer_headers).json()
        assert [p["id"] for p in payments] == [payment["id"]]

    def test_subscription_switches_plan(self, client, trainer_headers):
        """
        Test subscribing to a paid plan.

        This test ensures that the plan limits follow the subscription and
        that canceling keeps the record.
        """
        assert client.get(f"{API}/payments/subscription", headers=trainer_headers).json() is None

        response = client.post(f"{API}/payments/subscription", headers=trainer_headers, json={"plan": "pro"})
        assert response.status_code == 201
        assert response.json()["status"] == "active"
        assert response.json()["billing_cycle"] == "monthly"

        limits = client.get(f"{API}/payments/plan/limits", headers=trainer_headers).json()
        assert limits["plan"] == "pro"
        assert limits["max_students"] == 40
        assert limits["ai_credits"] == 50
        assert limits["fee_percentage"] == 1.0
        assert limits["days_remaining"] == 30
        assert limits["downgrade_possible"] is True

        payments = client.get(f"{API}/payments/", headers=trainer_headers).json()
        assert payments[0]["amount"] == 2900
        assert payments[0]["status"] == "succeeded"

        response = client.delete(f"{API}/payments/subscription", headers=trainer_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "canceled"
        assert response.json()["cancel_at_period_end"] is True

        assert client.delete(f"{API}/payments/subscription", headers=trainer_headers).status_code == 404

    def test_free_plan_needs_no_subscription(self, client, trainer_headers):
        response = client.post(f"{API}/payments/subscription", headers=trainer_headers, json={"plan": "free"})
        assert response.status_code == 400

    def test_change_plan(self, client, trainer_headers):
        response = client.put(f"{API}/payments/plan", headers=trainer_headers, json={"plan": "elite"})

        assert response.status_code == 200
        body = response.json()
        assert body["plan"] == "elite"
        assert body["max_students"] == 0
        assert body["ai_credits"] == 100
        assert body["active_until"] is not None

    def test_plan_limits_recommendation(self, client, trainer, trainer_headers, make_user):
        for _ in range(3):
            make_user(UserRole.student, trainer_id=trainer.id)

        limits = client.get(f"{API}/payments/plan/limits", headers=trainer_headers).json()

        assert limits["current_students"] == 3
        assert limits["can_add_students"] is False
        assert limits["can_use_ai"] is False
        assert limits["recommended_plan"] == "free"
        assert limits["upgrade_recommended"] is False
        assert limits["days_remaining"] is None

        make_user(UserRole.student, trainer_id=trainer.id)
        limits = client.get(f"{API}/payments/plan/limits", headers=trainer_headers).json()
        assert limits["recommended_plan"] == "pro"
        assert limits["upgrade_recommended"] is True

    def test_ai_credits(self, client, make_user):
        pro = make_user(UserRole.trainer, plan=TrainerPlan.pro, ai_credits=1)
        headers = auth_headers(pro)
        student = make_user(UserRole.student, trainer_id=pro.id)
        client.post(f"{API}/diet-plans/", headers=headers, json={
            "student_id": student.id, "name": "Bulk", "target_calories": 3000, "goal": "muscle gain",
        })

        response = client.post(f"{API}/payments/ai-credits", headers=headers, json={"amount": 10})
        assert response.status_code == 200
        assert response.json()["ai_credits"] == 10

        usage = client.get(f"{API}/payments/ai-credits", headers=headers).json()
        assert usage == {"credits_remaining": 10, "credits_used": 1, "credits_purchased": 10}

    def test_plan_catalog(self, client, trainer_headers):
        catalog = client.get(f"{API}/payments/plans", headers=trainer_headers).json()

        plans = {p["plan"]: p for p in catalog["plans"]}
        assert list(plans) == ["free", "pro", "elite"]
        assert plans["pro"]["name"] == "Pro Plan"
        assert plans["pro"]["monthly_price_text"] == "R$ 29,00"
        assert plans["pro"]["yearly_price_text"] == "R$ 290,00"
        assert plans["pro"]["yearly_savings"] == 5800
        assert plans["elite"]["yearly_savings_text"] == "R$ 98,00"
        assert plans["free"]["yearly_savings"] == 0
        assert catalog["comparison"]["Platform fee"]["elite"] == "0.5%"
        assert catalog["comparison"]["Priority support"]["free"] is False

        assert client.get(f"{API}/payments/plans").status_code == 401

    def test_invalid_credit_amount(self, client, trainer_headers):
        response = client.post(f"{API}/payments/ai-credits", headers=trainer_headers, json={"amount": 0})
        assert response.status_code == 422


class TestAdmin:
    def test_admin_routes_require_admin(self, client, trainer_headers):
        assert client.get(f"{API}/admin/stats", headers=trainer_headers).status_code == 403
        assert client.get(f"{API}/admin/stats").status_code == 401

    def test_stats_and_payments(self, client, admin_headers, trainer, trainer_headers, make_user):
        make_user(UserRole.student, trainer_id=trainer.id)
        client.post(f"{API}/payments/subscription", headers=trainer_headers, json={"plan": "elite"})

        stats = client.get(f"{API}/admin/stats", headers=admin_headers).json()
        assert stats["active_trainers"] == 1
        assert stats["total_students"] == 1
        assert stats["total_revenue"] == 4900
        assert stats["monthly_revenue"] == 4900
        assert stats["weekly_signups"] == 1
        assert stats["system_health"] == "healthy"

        payments = client.get(f"{API}/admin/payments", headers=admin_headers, params={"limit": 5}).json()
        assert len(payments) == 1
        assert payments[0]["trainer_name"].endswith("Test")
        assert payments[0]["method"] == "credit_card"

        activity = client.get(f"{API}/admin/activity", headers=admin_headers).json()
        assert {item["type"] for item in activity} == {"payment_processed", "trainer_signup"}
        assert "Payment of R$ 49.00 processed successfully" in [item["description"] for item in activity]

    def test_trainer_search_and_plan_filter(self, client, admin_headers, make_user):
        make_user(UserRole.trainer, first_name="Alice")
        make_user(UserRole.trainer, plan=TrainerPlan.pro, first_name="Bruno")

        body = client.get(f"{API}/admin/trainers", headers=admin_headers, params={"search": "ali"}).json()
        assert body["total"] == 1
        assert body["trainers"][0]["first_name"] == "Alice"

        body = client.get(f"{API}/admin/trainers", headers=admin_headers, params={"plan": "pro"}).json()
        assert [t["first_name"] for t in body["trainers"]] == ["Bruno"]

        body = client.get(f"{API}/admin/trainers", headers=admin_headers).json()
        assert body["total"] == 2

    def test_unknown_plan_filter_is_rejected(self, client, admin_headers, make_user):
        make_user(UserRole.trainer, first_name="Alice")

        response = client.get(f"{API}/admin/trainers", headers=admin_headers, params={"plan": "gold"})

        assert response.status_code == 422

    def test_change_plan_and_remove_trainer(self, client, db_session, admin_headers, trainer, make_user):
        make_user(UserRole.student, trainer_id=trainer.id)
        make_user(UserRole.student, trainer_id=trainer.id, status=StudentStatus.paused)

        response = client.put(f"{API}/admin/trainers/{trainer.id}/plan", headers=admin_headers, json={"plan": "pro"})
        assert response.status_code == 200
        assert response.json()["max_students"] == 40

        trainers = client.get(f"{API}/admin/trainers", headers=admin_headers).json()["trainers"]
        assert trainers[0]["student_count"] == 1

        response = client.delete(f"{API}/admin/trainers/{trainer.id}", headers=admin_headers)
        assert response.status_code == 200
        db_session.expire_all()
        assert db_session.query(User).filter(User.id == trainer.id).one().is_active is False
        assert client.get(f"{API}/admin/trainers", headers=admin_headers).json()["total"] == 0

        response = client.delete(f"{API}/admin/trainers/missing", headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Trainer not found"

    def test_system_settings(self, client, db_session, admin_headers):
        db_session.add(SystemSetting(key="maintenance_mode", value="false", description="Maintenance mode"))
        db_session.commit()

        settings = client.get(f"{API}/admin/settings", headers=admin_headers).json()
        assert [s["key"] for s in settings] == ["maintenance_mode"]

        response = client.put(f"{API}/admin/settings/maintenance_mode", headers=admin_headers, json={"value": "true"})
        assert response.status_code == 200
        assert response.json()["value"] == "true"

        response = client.put(f"{API}/admin/settings/unknown", headers=admin_headers, json={"value": "1"})
        assert response.status_code == 404


class TestNotifications:
    def test_notification_flow(self, client, admin_headers, trainer, trainer_headers):
        """
        Test sending and reading notifications.

        This test ensures that an admin can notify a user and the user can
        mark it as read.
        """
        for title in ("Welcome", "Plan expiring"):
            response = client.post(f"{API}/admin/notifications", headers=admin_headers, json={
                "user_id": trainer.id,
                "title": title,
                "message": f"{title} message",
            })
            assert response.status_code == 201

        notifications = client.get(f"{API}/notifications/", headers=trainer_headers).json()
        assert len(notifications) == 2
        assert all(n["read"] is False for n in notifications)

        response = client.post(f"{API}/notifications/{notifications[0]['id']}/read", headers=trainer_headers)
        assert response.status_code == 200
        assert response.json()["read"] is True

        unread = client.get(f"{API}/notifications/", headers=trainer_headers, params={"unread_only": True}).json()
        assert len(unread) == 1

        response = client.post(f"{API}/notifications/read-all", headers=trainer_headers)
        assert response.json() == {"updated": 1}

    def test_cannot_read_other_users_notification(self, client, admin_headers, trainer, make_user):
        other = make_user(UserRole.trainer)
        notification = client.post(f"{API}/admin/notifications", headers=admin_headers, json={
            "user_id": trainer.id, "title": "Private", "message": "Only for the trainer",
        }).json()

        response = client.post(f"{API}/notifications/{notification['id']}/read", headers=auth_headers(other))

        assert response.status_code == 404
