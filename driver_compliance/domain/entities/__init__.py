"""Domain entities - core business objects."""
from driver_compliance.domain.entities.driver import (
    CreateDriverRequest,
    Driver,
    EntityLimit,
    EntityType,
    LoginDriverRequest,
    RestPeriod,
    Suspension,
    UserIdentity,
)
from driver_compliance.domain.entities.workday import Workday, WorkdayGarbage, WorkdayRequest, WorkdayRow
from driver_compliance.domain.entities.update import Update, UpdateRow
from driver_compliance.domain.entities.mail import DriverMail, DriverMailType, MailStatus
from driver_compliance.domain.entities.health import HealthStatus

__all__ = [
    "CreateDriverRequest",
    "Driver",
    "EntityLimit",
    "EntityType",
    "LoginDriverRequest",
    "RestPeriod",
    "Suspension",
    "UserIdentity",
    "Workday",
    "WorkdayGarbage",
    "WorkdayRequest",
    "WorkdayRow",
    "Update",
    "UpdateRow",
    "DriverMail",
    "DriverMailType",
    "MailStatus",
    "HealthStatus",
]
