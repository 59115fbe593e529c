"""
Unit tests for plan limits and pricing helpers.
"""

from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from fitcoach.models.profile import TrainerPlan
from fitcoach.services.plan_limits import (
    PLAN_LIMITS,
    PlanLimitsService,
    calculate_net_amount,
    calculate_platform_fee,
    calculate_yearly_savings,
    format_price,
    get_days_remaining,
    get_feature_comparison,
    get_plan_display_name,
    get_plan_limits,
    get_recommended_plan,
    is_downgrade,
    is_upgrade,
)


class TestPlanTable:
    def test_plan_limits(self):
        assert PLAN_LIMITS[TrainerPlan.free].max_students == 3
        assert PLAN_LIMITS[TrainerPlan.pro].max_students == 40
        assert PLAN_LIMITS[TrainerPlan.elite].max_students == 0
        assert PLAN_LIMITS[TrainerPlan.pro].ai_credits == 50
        assert PLAN_LIMITS[TrainerPlan.elite].monthly_price == 4900

    def test_unknown_plan_falls_back_to_free(self):
        assert get_plan_limits("platinum") is PLAN_LIMITS[TrainerPlan.free]
        assert get_plan_limits(None) is PLAN_LIMITS[TrainerPlan.free]
        assert get_plan_limits("pro") is PLAN_LIMITS[TrainerPlan.pro]


class TestPricing:
    @pytest.mark.parametrize(
        "cents, expected",
        [(0, "R$ 0,00"), (2900, "R$ 29,00"), (129000, "R$ 1.290,00"), (5, "R$ 0,05")],
    )
    def test_format_price(self, cents, expected):
        assert format_price(cents) == expected

    def test_yearly_savings(self):
        assert calculate_yearly_savings(2900, 29000) == 5800

    def test_platform_fee_rounds_half_up(self):
        """
        Test platform fee rounding.

        This test ensures that fees are rounded half up to whole cents and
        that the net amount is the gross minus the fee.
        """
        assert calculate_platform_fee(10000, 1.5) == 150
        assert calculate_platform_fee(100, 0.5) == 1
        assert calculate_platform_fee(99, 1.5) == 1
        assert calculate_net_amount(10000, 1.5) == 9850

    def test_display_names(self):
        assert get_plan_display_name("elite") == "Elite Plan"
        assert get_plan_display_name("nope") == "Unknown Plan"

    def test_upgrade_and_downgrade(self):
        assert is_upgrade(TrainerPlan.free, TrainerPlan.pro)
        assert not is_upgrade(TrainerPlan.elite, TrainerPlan.pro)
        assert is_downgrade(TrainerPlan.elite, TrainerPlan.free)
        assert not is_downgrade(TrainerPlan.pro, TrainerPlan.pro)

    @pytest.mark.parametrize(
        "students, plan",
        [(0, TrainerPlan.free), (3, TrainerPlan.free), (4, TrainerPlan.pro), (40, TrainerPlan.pro), (41, TrainerPlan.elite)],
    )
    def test_recommended_plan(self, students, plan):
        assert get_recommended_plan(students) == plan

    def test_feature_comparison_covers_every_plan(self):
        for row in get_feature_comparison().values():
            assert set(row) == {"free", "pro", "elite"}

    def test_days_remaining(self):
        now = datetime(2024, 5, 1, 12, 0, 0)
        assert get_days_remaining(now + timedelta(days=2, hours=1), now) == 3
        assert get_days_remaining(now - timedelta(days=1), now) == 0


class TestPlanLimitsService:
    def test_can_add_students(self):
        free = SimpleNamespace(plan=TrainerPlan.free, max_students=3, ai_credits=0)
        elite = SimpleNamespace(plan=TrainerPlan.elite, max_students=0, ai_credits=100)

        assert PlanLimitsService.can_add_students(free, 2) is True
        assert PlanLimitsService.can_add_students(free, 3) is False
        assert PlanLimitsService.can_add_students(elite, 10_000) is True

    def test_max_students_falls_back_to_plan(self):
        trainer = SimpleNamespace(plan=TrainerPlan.pro, max_students=None, ai_credits=0)
        assert PlanLimitsService.get_max_students(trainer) == 40

    def test_can_use_ai(self):
        assert PlanLimitsService.can_use_ai(SimpleNamespace(ai_credits=1)) is True
        assert PlanLimitsService.can_use_ai(SimpleNamespace(ai_credits=0)) is False
        assert PlanLimitsService.can_use_ai(SimpleNamespace()) is False
