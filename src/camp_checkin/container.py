from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendees.mysql_attendee_repository import MySQLAttendeeRepository
from .attendees.registration import RegistrationService
from .attendees.repository import AttendeeRepository
from .attendees.search import AttendeeSearchService
from .attendees.service import AttendeeAdminService
from .checkin.numbering import AttendanceNumberAllocator
from .checkin.rate_limit import ScanRateLimiter
from .checkin.service import CheckinService
from .core.constants import (
    DEFAULT_FEE,
    DEFAULT_NUMBER_RETRIES,
    DEFAULT_SCAN_MIN_INTERVAL_SECONDS,
    DEFAULT_TSHIRT_LIMIT,
)
from .core.enums import NumberingStrategy, ReconfirmPolicy
from .database.connection import DBConfig, DatabaseConnection
from .payments.mysql_cash_log_repository import MySQLCashLogRepository
from .payments.repository import CashLogRepository
from .payments.service import CashierService
from .reports.service import ReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    attendees_repo: AttendeeRepository
    cash_log_repo: CashLogRepository

    allocator: AttendanceNumberAllocator
    auth_service: AuthService
    user_service: UserService
    checkin_service: CheckinService
    search_service: AttendeeSearchService
    registration_service: RegistrationService
    attendee_admin_service: AttendeeAdminService
    cashier_service: CashierService
    report_service: ReportService


def assemble_container(
    *,
    users_repo: UserRepository,
    attendees_repo: AttendeeRepository,
    cash_log_repo: CashLogRepository,
    conn: Optional[DatabaseConnection] = None,
    settings=None,
) -> Container:
    """Wire services over the given repositories; tunables come from a settings module."""

    def opt(name: str, default):
        return getattr(settings, name, default) if settings is not None else default

    default_fee = float(opt("DEFAULT_FEE", DEFAULT_FEE))

    allocator = AttendanceNumberAllocator(
        attendees_repo,
        strategy=NumberingStrategy(opt("ATTENDANCE_NUMBERING", NumberingStrategy.SERIALIZED.value)),
        max_retries=int(opt("ATTENDANCE_NUMBER_RETRIES", DEFAULT_NUMBER_RETRIES)),
    )
    checkin_service = CheckinService(
        attendees_repo,
        allocator,
        reconfirm_policy=ReconfirmPolicy(opt("RECONFIRM_POLICY", ReconfirmPolicy.RENUMBER.value)),
        rate_limiter=ScanRateLimiter(float(opt("SCAN_MIN_INTERVAL_SECONDS", DEFAULT_SCAN_MIN_INTERVAL_SECONDS))),
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        attendees_repo=attendees_repo,
        cash_log_repo=cash_log_repo,
        allocator=allocator,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        checkin_service=checkin_service,
        search_service=AttendeeSearchService(attendees_repo),
        registration_service=RegistrationService(
            attendees_repo,
            allocator,
            default_fee=default_fee,
            tshirt_limit=int(opt("TSHIRT_LIMIT", DEFAULT_TSHIRT_LIMIT)),
        ),
        attendee_admin_service=AttendeeAdminService(attendees_repo, allocator),
        cashier_service=CashierService(attendees_repo, cash_log_repo, default_fee=default_fee),
        report_service=ReportService(attendees_repo),
    )


def build_container(*, db_config: dict, settings=None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble_container(
        users_repo=MySQLUserRepository(conn),
        attendees_repo=MySQLAttendeeRepository(conn),
        cash_log_repo=MySQLCashLogRepository(conn),
        conn=conn,
        settings=settings,
    )
