"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from macro_planner.adapters.supabase_meal_plan_repository import (
    SupabaseMealPlanRepository,
)
from macro_planner.adapters.supabase_settings_repository import (
    SupabaseSettingsRepository,
)
from macro_planner.config import Settings
from macro_planner.services.meals import MealPlanRepository, MealPlanService
from macro_planner.services.reports import ReportService
from macro_planner.services.schedule import MealScheduleService
from macro_planner.services.user_settings import (
    SettingsRepository,
    UserSettingsService,
)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_settings_service: UserSettingsService
    meal_plan_service: MealPlanService
    schedule_service: MealScheduleService
    report_service: ReportService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    settings_repository = SupabaseSettingsRepository(supabase_client)
    meal_plan_repository = SupabaseMealPlanRepository(supabase_client)
    return build_services(resolved_settings, settings_repository, meal_plan_repository)


def build_services(
    settings: Settings,
    settings_repository: SettingsRepository,
    meal_plan_repository: MealPlanRepository,
) -> AppContainer:
    """Wire services over the given repositories."""
    user_settings_service = UserSettingsService(
        repository=settings_repository,
        default_weight_kg=settings.default_weight_kg,
        default_goal_calories=settings.default_goal_calories,
        default_meal_interval_hours=settings.default_meal_interval_hours,
    )
    meal_plan_service = MealPlanService(
        repository=meal_plan_repository,
        rebase_on_amount_change=settings.rebase_on_amount_change,
    )
    schedule_service = MealScheduleService(
        repository=meal_plan_repository,
        retry_attempts=settings.cascade_retry_attempts,
        retry_delay_seconds=settings.cascade_retry_delay_seconds,
        timeout_seconds=settings.cascade_timeout_seconds,
    )
    report_service = ReportService(
        settings_service=user_settings_service,
        meal_plan_service=meal_plan_service,
    )
    return AppContainer(
        settings=settings,
        user_settings_service=user_settings_service,
        meal_plan_service=meal_plan_service,
        schedule_service=schedule_service,
        report_service=report_service,
    )
