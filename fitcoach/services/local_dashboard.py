"""Dashboard reads over the local document.

Same outputs as the relational dashboard and admin services, computed from
the demo document. Trainer monthly revenue is reported in reais.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from fitcoach.services.admin import trainer_label
from fitcoach.services.dashboard import (
    ACTIVITY_LIMIT,
    ACTIVITY_PER_KIND,
    UPCOMING_DAYS,
    UPCOMING_LIMIT,
    day_bounds,
    month_bounds,
)
from fitcoach.services.local_storage import LocalDataError, LocalDataStore, parse_iso

DEFAULT_MAX_STUDENTS = 3


def embedded_name(record: Dict[str, Any]) -> str:
    names = record.get("profiles") or {}
    return f"{names.get('first_name', '')} {names.get('last_name', '')}".strip()


def newest(records: List[Dict[str, Any]], key: str = "created_at", limit: Optional[int] = None) -> List[Dict[str, Any]]:
    ordered = sorted(records, key=lambda r: parse_iso(r.get(key)) or datetime.min, reverse=True)
    return ordered[:limit] if limit is not None else ordered


class LocalDashboardService:
    def __init__(self, store: LocalDataStore):
        self.store = store

    def _load(self) -> Dict[str, Any]:
        self.store.initialize_data()
        data = self.store.get_data()
        if data is None:
            raise LocalDataError("Failed to load local data")
        return data

    def _now(self) -> datetime:
        return self.store.clock()

    def get_trainer_stats(self) -> Dict[str, Any]:
        data = self._load()
        trainer_id = self.store.get_current_trainer_id()
        now = self._now()

        active_students = [
            s for s in data["students"]
            if s["trainer_id"] == trainer_id and s["status"] == "active"
        ]
        trainer_profile = next((tp for tp in data["trainer_profiles"] if tp["id"] == trainer_id), None) or {}

        sessions = [s for s in data["sessions"] if s["trainer_id"] == trainer_id]
        today_start, today_end = day_bounds(now)
        sessions_today = [s for s in sessions if today_start <= parse_iso(s["scheduled_at"]) < today_end]

        month_start, month_end = month_bounds(now)
        monthly_cents = sum(
            int(p["amount"])
            for p in data["payments"]
            if p["trainer_id"] == trainer_id
            and p["status"] == "succeeded"
            and month_start <= parse_iso(p["created_at"]) < month_end
        )

        return {
            "active_students": len(active_students),
            "max_students": trainer_profile.get("max_students") or DEFAULT_MAX_STUDENTS,
            "sessions_today": len(sessions_today),
            "total_sessions": len(sessions),
            "monthly_revenue": monthly_cents / 100,
            "ai_credits": trainer_profile.get("ai_credits") or 0,
        }

    def get_upcoming_sessions(self) -> List[Dict[str, Any]]:
        data = self._load()
        trainer_id = self.store.get_current_trainer_id()
        now = self._now()
        horizon = now + timedelta(days=UPCOMING_DAYS)

        upcoming = [
            s for s in data["sessions"]
            if s["trainer_id"] == trainer_id and now <= parse_iso(s["scheduled_at"]) <= horizon
        ]
        upcoming.sort(key=lambda s: parse_iso(s["scheduled_at"]))

        return [
            {
                "id": s["id"],
                "student_name": embedded_name(s),
                "scheduled_at": parse_iso(s["scheduled_at"]),
                "duration_minutes": s["duration_minutes"],
                "status": s["status"],
            }
            for s in upcoming[:UPCOMING_LIMIT]
        ]

    def get_recent_activity(self) -> List[Dict[str, Any]]:
        data = self._load()
        trainer_id = self.store.get_current_trainer_id()

        def mine(key: str) -> List[Dict[str, Any]]:
            return [r for r in data[key] if r["trainer_id"] == trainer_id]

        completed = [s for s in mine("sessions") if s["status"] == "completed"]

        activity = []
        for s in newest(completed, "updated_at", ACTIVITY_PER_KIND):
            activity.append({
                "id": s["id"],
                "type": "session_completed",
                "description": f"Session with {embedded_name(s)} completed",
                "created_at": parse_iso(s["updated_at"]),
            })
        for s in newest(mine("students"), limit=ACTIVITY_PER_KIND):
            activity.append({
                "id": s["id"],
                "type": "student_added",
                "description": f"New student: {embedded_name(s)}",
                "created_at": parse_iso(s["created_at"]),
            })
        for p in newest(mine("diet_plans"), limit=ACTIVITY_PER_KIND):
            activity.append({
                "id": p["id"],
                "type": "diet_created",
                "description": f"Diet plan '{p['name']}' created for {embedded_name(p)}",
                "created_at": parse_iso(p["created_at"]),
            })
        for p in newest(mine("workout_plans"), limit=ACTIVITY_PER_KIND):
            activity.append({
                "id": p["id"],
                "type": "workout_assigned",
                "description": f"Workout '{p['name']}' assigned to {embedded_name(p)}",
                "created_at": parse_iso(p["created_at"]),
            })

        activity.sort(key=lambda item: item["created_at"], reverse=True)
        return activity[:ACTIVITY_LIMIT]

    def get_admin_stats(self) -> Dict[str, Any]:
        data = self._load()
        now = self._now()

        succeeded = [p for p in data["payments"] if p["status"] == "succeeded"]
        last_month = now - timedelta(days=30)
        last_week = now - timedelta(days=7)

        active_trainers = len(data["trainer_profiles"])
        completed = [s for s in data["sessions"] if s["status"] == "completed"]

        return {
            "active_trainers": active_trainers,
            "total_students": len(data["students"]),
            "total_revenue": sum(int(p["amount"]) for p in succeeded),
            "monthly_revenue": sum(
                int(p["amount"]) for p in succeeded if parse_iso(p["created_at"]) >= last_month
            ),
            "total_sessions": len(data["sessions"]),
            "weekly_signups": len([
                tp for tp in data["trainer_profiles"]
                if (parse_iso(tp.get("created_at")) or datetime.min) >= last_week
            ]),
            "avg_sessions_per_trainer": round(len(completed) / active_trainers, 1) if active_trainers else 0.0,
            "system_health": "healthy",
        }

    def get_admin_recent_payments(self, limit: int = 10) -> List[Dict[str, Any]]:
        data = self._load()
        names = {
            p["id"]: f"{p.get('first_name', '')} {p.get('last_name', '')}".strip()
            for p in data["profiles"]
        }
        return [
            {
                "id": p["id"],
                "amount": int(p["amount"]),
                "status": p["status"],
                "method": p.get("method", "credit_card"),
                "created_at": parse_iso(p["created_at"]),
                "trainer_name": trainer_label(names, p["trainer_id"]),
            }
            for p in newest(data["payments"], limit=limit)
        ]

    def get_admin_activity(self) -> List[Dict[str, Any]]:
        data = self._load()

        succeeded = [p for p in data["payments"] if p["status"] == "succeeded"]
        completed = [s for s in data["sessions"] if s["status"] == "completed"]

        activity = [
            {
                "id": f"payment-{p['id']}",
                "type": "payment_processed",
                "description": f"Payment of R$ {int(p['amount']) / 100:.2f} processed successfully",
                "created_at": parse_iso(p["created_at"]),
            }
            for p in newest(succeeded, limit=3)
        ]
        activity += [
            {
                "id": f"session-{s['id']}",
                "type": "session_completed",
                "description": f"Session with {embedded_name(s) or 'a student'} completed",
                "created_at": parse_iso(s["updated_at"]),
            }
            for s in newest(completed, "updated_at", 2)
        ]
        activity += [
            {
                "id": f"trainer-{tp['id']}",
                "type": "trainer_signup",
                "description": f"New trainer signed up on the {tp.get('plan', 'free')} plan",
                "created_at": parse_iso(tp.get("created_at")) or self._now(),
            }
            for tp in newest(data["trainer_profiles"], limit=2)
        ]

        activity.sort(key=lambda item: item["created_at"], reverse=True)
        return activity[:ACTIVITY_LIMIT]
