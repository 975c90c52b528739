# salon_booking/services/availability/availability_service.py
"""
Availability engine.

Open time of a professional on a local day is built from the recurring
rules (working windows unioned, contained breaks removed), minus overrides
and, for slot generation, minus non-cancelled appointments. Slots are
stepped from the start of each open interval. Nothing is cached: every
call reads the stores.
"""
from datetime import date, datetime
from typing import Callable, Iterable, List, Optional, Tuple
from zoneinfo import ZoneInfo
import logging

from salon_booking.config.settings import get_settings
from salon_booking.core.errors import (
    ProfessionalNotFoundError,
    ServiceNotBookableError,
    ServiceNotFoundError,
    ValidationError,
)
from salon_booking.models.availability import AvailabilityRule
from salon_booking.models.base import utcnow
from salon_booking.models.professional import Professional
from salon_booking.models.salon import Salon
from salon_booking.models.service import Service
from salon_booking.repositories.appointment_repository import AppointmentRepository
from salon_booking.repositories.availability_repository import (
    AvailabilityRuleRepository,
    ScheduleOverrideRepository,
)
from salon_booking.repositories.catalog_repository import CatalogRepository
from salon_booking.schemas.availability import (
    AvailabilityResponse,
    DayRules,
    ProfessionalRulesDTO,
    RuleWindow,
    TimeSlot,
)
from salon_booking.utils.time_utils import (
    Interval,
    add_minutes,
    contains,
    day_bounds,
    day_name,
    day_of_week,
    ensure_aware,
    format_local_time,
    get_zone,
    local_datetime,
    merge_intervals,
    parse_hhmm,
    subtract_all,
    to_utc,
)

logger = logging.getLogger(__name__)


def working_days_bitset(rules: Iterable[AvailabilityRule]) -> int:
    """Bit n set when a well-formed non-break rule exists for day n (0=Sunday)"""
    bitset = 0
    for rule in rules:
        if rule.is_break or not 0 <= rule.day_of_week <= 6:
            continue
        try:
            if parse_hhmm(rule.start_time) >= parse_hhmm(rule.end_time):
                continue
        except ValidationError:
            continue
        bitset |= 1 << rule.day_of_week
    return bitset


class AvailabilityService:
    """Computes open intervals and bookable slots of professionals"""

    def __init__(
            self,
            catalog: CatalogRepository,
            rules: AvailabilityRuleRepository,
            overrides: ScheduleOverrideRepository,
            appointments: AppointmentRepository,
            clock: Callable[[], datetime] = utcnow,
            default_granularity: Optional[int] = None,
            hide_past_slots: Optional[bool] = None
    ):
        settings = get_settings()
        self.catalog = catalog
        self.rules = rules
        self.overrides = overrides
        self.appointments = appointments
        self.clock = clock
        self.default_granularity = default_granularity or settings.SLOT_GRANULARITY_MINUTES
        self.hide_past_slots = settings.HIDE_PAST_SLOTS if hide_past_slots is None else hide_past_slots

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def compute_slots(
            self,
            professional_id,
            day: date,
            service_duration: int,
            salon_id=None
    ) -> List[TimeSlot]:
        """
        Slots of `service_duration` minutes the professional can take on the
        local `day`, in chronological order.

        Raises:
            ValidationError: duration or slot granularity not positive
            ProfessionalNotFoundError: unknown professional
        """
        if not isinstance(service_duration, int) or service_duration <= 0:
            raise ValidationError(f"Service duration must be a positive number of minutes, got {service_duration}")

        professional = self._get_professional(professional_id, salon_id)
        salon = professional.salon
        tz = self._zone_for(salon)
        granularity = self._granularity_for(salon)

        open_intervals = self._open_intervals(professional, tz, day, include_appointments=True)

        slots = []
        for start, end in open_intervals:
            cursor = start
            while add_minutes(cursor, service_duration) <= end:
                slot_end = add_minutes(cursor, service_duration)
                slots.append((cursor, slot_end))
                cursor = add_minutes(cursor, granularity)

        if self._hide_past_for(salon):
            now = to_utc(self.clock())
            slots = [slot for slot in slots if slot[0] >= now]

        slots.sort(key=lambda slot: slot[0])

        logger.debug(
            f"{len(slots)} slots for professional {professional.id} on {day.isoformat()} "
            f"(duration={service_duration}, step={granularity})"
        )

        return [
            TimeSlot(
                time=format_local_time(start, tz),
                starts_at=start.astimezone(tz),
                ends_at=end.astimezone(tz),
                available=True,
                professional_id=professional.id,
            )
            for start, end in slots
        ]

    def compute_slots_for_service(self, professional_id, day: date, service_id, salon_id=None) -> List[TimeSlot]:
        """Slots sized by the duration of a bookable service of the professional's salon"""
        professional = self._get_professional(professional_id, salon_id)
        service = self._get_bookable_service(professional, service_id)
        return self.compute_slots(professional.id, day, service.duration_minutes)

    def get_availability(
            self,
            salon_id,
            professional_id,
            day: date,
            service_id=None,
            duration: Optional[int] = None
    ) -> AvailabilityResponse:
        """Slots sized by a service when given, else by an explicit duration"""
        professional = self._get_professional(professional_id, salon_id)

        if service_id is not None:
            duration = self._get_bookable_service(professional, service_id).duration_minutes
        elif duration is None:
            raise ValidationError("Either service_id or duration is required")

        slots = self.compute_slots(professional.id, day, duration)
        return AvailabilityResponse(
            salon_id=professional.salon_id,
            professional_id=professional.id,
            date=day.isoformat(),
            timezone=str(self._zone_for(professional.salon)),
            duration_minutes=duration,
            slots=slots,
        )

    def open_intervals(self, professional_id, day: date, include_appointments: bool = True) -> List[Interval]:
        """Open UTC intervals of the professional on the local `day`"""
        professional = self._get_professional(professional_id)
        tz = self._zone_for(professional.salon)
        return self._open_intervals(professional, tz, day, include_appointments)

    def is_within_open_hours(self, professional_id, starts_at: datetime, ends_at: datetime) -> bool:
        """
        True when [starts_at, ends_at) fits inside a single open interval of
        the professional. Appointments are not considered here.
        """
        professional = self._get_professional(professional_id)
        return self.is_within_open_hours_for(professional, starts_at, ends_at)

    def is_within_open_hours_for(self, professional: Professional, starts_at: datetime, ends_at: datetime) -> bool:
        tz = self._zone_for(professional.salon)
        start = to_utc(ensure_aware(starts_at, tz))
        end = to_utc(ensure_aware(ends_at, tz))
        if start >= end:
            return False

        local_day = start.astimezone(tz).date()
        intervals = self._open_intervals(professional, tz, local_day, include_appointments=False)
        return any(contains(interval, (start, end)) for interval in intervals)

    def get_professional_rules(self, professional_id, salon_id=None) -> ProfessionalRulesDTO:
        """Recurring rules of a professional grouped per day of week"""
        professional = self._get_professional(professional_id, salon_id)
        salon = professional.salon
        rules = self.rules.find_by_professional(professional.id)

        days = []
        for day in range(7):
            day_rules = [r for r in rules if r.day_of_week == day]
            if not day_rules:
                continue

            hours = salon.get_business_hours_for_day(day) if salon else None
            days.append(DayRules(
                day_of_week=day,
                day_name=day_name(day),
                windows=[
                    RuleWindow(start_time=r.start_time, end_time=r.end_time, is_break=bool(r.is_break))
                    for r in day_rules
                ],
                business_hours=RuleWindow(start_time=hours["start"], end_time=hours["end"]) if hours else None,
            ))

        return ProfessionalRulesDTO(
            professional_id=professional.id,
            professional_name=professional.name,
            timezone=str(self._zone_for(salon)),
            working_days=working_days_bitset(rules),
            days=days,
            message=None if days else f"{professional.name} has no availability configured",
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _get_professional(self, professional_id, salon_id=None) -> Professional:
        professional = self.catalog.get_professional(professional_id, salon_id)
        if not professional:
            raise ProfessionalNotFoundError(professional_id)
        return professional

    def _get_bookable_service(self, professional: Professional, service_id) -> Service:
        service = self.catalog.get_service(service_id, professional.salon_id)
        if not service:
            raise ServiceNotFoundError(service_id)
        if not service.is_bookable():
            raise ServiceNotBookableError(service.name)
        return service

    def _zone_for(self, salon: Optional[Salon]) -> ZoneInfo:
        name = salon.timezone if salon and salon.timezone else get_settings().DEFAULT_TIMEZONE
        return get_zone(name)

    def _granularity_for(self, salon: Optional[Salon]) -> int:
        value = salon.get_setting(Salon.SETTING_SLOT_GRANULARITY) if salon else None
        if value is None:
            value = self.default_granularity
        if isinstance(value, bool) or not isinstance(value, (int, float)) or int(value) != value or value <= 0:
            raise ValidationError(f"Slot granularity must be a positive number of minutes, got {value!r}")
        return int(value)

    def _hide_past_for(self, salon: Optional[Salon]) -> bool:
        value = salon.get_setting(Salon.SETTING_HIDE_PAST_SLOTS) if salon else None
        return self.hide_past_slots if value is None else bool(value)

    def _rule_interval(self, rule: AvailabilityRule, day: date, tz: ZoneInfo) -> Optional[Interval]:
        try:
            start = parse_hhmm(rule.start_time)
            end = parse_hhmm(rule.end_time)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed availability rule {rule.id}: {e.message}")
            return None

        if start >= end:
            logger.warning(f"Ignoring availability rule {rule.id} with start {rule.start_time} >= end {rule.end_time}")
            return None

        return to_utc(local_datetime(day, start, tz)), to_utc(local_datetime(day, end, tz))

    def _working_windows(self, professional: Professional, tz: ZoneInfo, day: date) -> Tuple[List[Interval], List[Interval]]:
        rules = self.rules.find_by_professional_and_day(professional.id, day_of_week(day, tz))

        working, breaks = [], []
        for rule in rules:
            interval = self._rule_interval(rule, day, tz)
            if interval is None:
                continue
            (breaks if rule.is_break else working).append(interval)

        # A break counts only inside a single working rule
        contained = [b for b in breaks if any(contains(window, b) for window in working)]
        for ignored in breaks:
            if ignored not in contained:
                logger.debug(f"Ignoring break {ignored} of professional {professional.id}: outside working rules")

        return merge_intervals(working), contained

    def _open_intervals(
            self,
            professional: Professional,
            tz: ZoneInfo,
            day: date,
            include_appointments: bool
    ) -> List[Interval]:
        working, breaks = self._working_windows(professional, tz, day)
        if not working:
            return []

        intervals = subtract_all(working, breaks)

        day_start, day_end = day_bounds(day, tz)
        overrides = self.overrides.find_intersecting(professional.salon_id, professional.id, day_start, day_end)
        intervals = subtract_all(intervals, [(to_utc(o.start_time), to_utc(o.end_time)) for o in overrides])

        if include_appointments:
            booked = self.appointments.find_active_for_professional_between(professional.id, day_start, day_end)
            intervals = subtract_all(intervals, [(to_utc(a.starts_at), to_utc(a.ends_at)) for a in booked])

        return sorted((i for i in intervals if i[0] < i[1]), key=lambda i: i[0])
