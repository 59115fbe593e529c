"""Wires every service into the dependency-injection container."""

from fitcoach.core.container import Container, ServiceLifetime
from fitcoach.services.admin import AdminService
from fitcoach.services.auth import AuthService
from fitcoach.services.dashboard import DashboardService
from fitcoach.services.diet_plan import DietPlanService
from fitcoach.services.local_auth import LocalAuthService
from fitcoach.services.local_dashboard import LocalDashboardService
from fitcoach.services.local_storage import LocalDataStore
from fitcoach.services.notification import NotificationService
from fitcoach.services.payment import PaymentService
from fitcoach.services.plan_limits import PlanLimitsService
from fitcoach.services.profile import ProfileService
from fitcoach.services.session import SessionService
from fitcoach.services.student import StudentService
from fitcoach.services.trainer_management import TrainerManagementService
from fitcoach.services.workout import WorkoutService
from fitcoach.utils.logger import get_logger

logger = get_logger("SETUP")

SERVICES = {
    "AuthService": AuthService,
    "ProfileService": ProfileService,
    "StudentService": StudentService,
    "SessionService": SessionService,
    "DietPlanService": DietPlanService,
    "WorkoutService": WorkoutService,
    "PaymentService": PaymentService,
    "PlanLimitsService": PlanLimitsService,
    "DashboardService": DashboardService,
    "AdminService": AdminService,
    "TrainerManagementService": TrainerManagementService,
    "NotificationService": NotificationService,
}


def setup_modules(container: Container) -> Container:
    for token, service in SERVICES.items():
        container.bind(token).to(service)

    container.bind("LocalDataStore").to_factory(LocalDataStore.from_settings, ServiceLifetime.singleton)
    container.bind("LocalAuthService").to_factory(
        lambda: LocalAuthService(container.resolve("LocalDataStore")), ServiceLifetime.singleton
    )
    container.bind("LocalDashboardService").to_factory(
        lambda: LocalDashboardService(container.resolve("LocalDataStore"))
    )

    logger.info("Modules registered", "CONTAINER", services=len(SERVICES) + 3)
    return container
