"""Meal time scheduling with cascade from the first meal."""

import asyncio
import logging
import math
import re
from dataclasses import dataclass
from uuid import UUID

from macro_planner.domain.errors import InvalidTimeError, MealTimeCascadeError
from macro_planner.domain.meals import MEAL_IDS, DayKey
from macro_planner.services.meals import MealPlanRepository, validate_meal_id

MINUTES_PER_DAY = 24 * 60
_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")

_logger = logging.getLogger(__name__)


def parse_time(value: str) -> int:
    """Convert an ``HH:MM`` string to minutes since midnight."""
    match = _TIME_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise InvalidTimeError(f"Invalid meal time: {value!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:  # noqa: PLR2004
        raise InvalidTimeError(f"Invalid meal time: {value!r}")
    return hours * 60 + minutes


def format_time(total_minutes: float) -> str:
    """Format minutes since midnight as a zero-padded ``HH:MM`` string."""
    total = total_minutes % MINUTES_PER_DAY
    hours = math.floor(total / 60)
    minutes = math.floor(total % 60 + 0.5)
    if minutes == 60:  # noqa: PLR2004
        hours, minutes = (hours + 1) % 24, 0
    return f"{hours:02d}:{minutes:02d}"


def cascade_meal_times(anchor_time: str, interval_hours: float) -> dict[int, str]:
    """Return the times of meals 2-6 spaced ``interval_hours`` after meal 1."""
    if interval_hours < 0:
        raise ValueError(f"Meal interval must not be negative: {interval_hours}")
    start = parse_time(anchor_time)
    times: dict[int, str] = {}
    for meal_id in MEAL_IDS[1:]:
        offset = (meal_id - 1) * interval_hours * 60
        times[meal_id] = format_time((start + offset) % MINUTES_PER_DAY)
    return times


@dataclass
class MealScheduleService:
    """Persists meal times, cascading from meal 1 in meal order."""

    repository: MealPlanRepository
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3
    timeout_seconds: float | None = None

    async def update_meal_time(  # noqa: PLR0913
        self,
        user_id: UUID,
        day: DayKey,
        meal_id: int,
        time: str,
        interval_hours: float,
    ) -> dict[int, str]:
        """Save a meal time; meal 1 also reschedules meals 2-6.

        Times are stored zero-padded, so ``"8:00"`` is saved as ``"08:00"``.
        Writes are sequential, so an interrupted cascade leaves a prefix of
        meals updated. Failures raise ``MealTimeCascadeError`` with the times
        already applied; those are not rolled back.

        On timeout no further meal is written, but the write that was in
        flight runs on in its worker thread and may still land after
        ``failed_meal_id`` has been reported as not applied. Callers reload
        authoritative state after a failure.
        """
        validate_meal_id(meal_id)
        anchor = format_time(parse_time(time))
        if meal_id != 1:
            planned = {meal_id: anchor}
        else:
            planned = {1: anchor, **cascade_meal_times(anchor, interval_hours)}

        applied: dict[int, str] = {}
        current: int | None = None
        try:
            async with asyncio.timeout(self.timeout_seconds):
                for current, value in planned.items():
                    await self._save_with_retry(user_id, day, current, value)
                    applied[current] = value
        except TimeoutError as exc:
            _logger.warning(
                "Meal time cascade timed out: day=%s applied=%s", day, applied
            )
            raise MealTimeCascadeError(
                f"Timed out saving meal {current} time", applied, current
            ) from exc
        except Exception as exc:
            _logger.exception(
                "Meal time save failed: day=%s meal=%s applied=%s",
                day,
                current,
                applied,
            )
            raise MealTimeCascadeError(
                f"Failed to save meal {current} time", applied, current
            ) from exc
        return applied

    async def _save_with_retry(
        self, user_id: UUID, day: DayKey, meal_id: int, time: str
    ) -> None:
        """Save one meal time with a short retry."""
        attempt = 0
        while True:
            try:
                await asyncio.to_thread(
                    self.repository.save_meal_time, user_id, day, meal_id, time
                )
                return
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Meal time save failed (attempt %s/%s): meal=%s error=%s",
                    attempt,
                    self.retry_attempts + 1,
                    meal_id,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)
