"""Table definitions of the durable store."""
import uuid

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    ForeignKeyConstraint,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    Time,
    func,
)
from sqlalchemy.dialects.postgresql import UUID

from driver_compliance.domain.entities.driver import EntityType
from driver_compliance.domain.entities.mail import MailStatus

metadata = MetaData()

entity_type_enum = Enum(EntityType, name="entity_type", values_callable=lambda e: [m.value for m in e])
mail_status_enum = Enum(MailStatus, name="mail_status", values_callable=lambda e: [m.value for m in e])

drivers = Table(
    "drivers",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True, default=uuid.uuid4),
    Column("firstname", String(100), nullable=False),
    Column("lastname", String(100), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", Text, nullable=False),
    Column("language", String(10), nullable=False),
    Column("gender", String(20)),
    Column("phone_number", String(32)),
    Column("is_searchable", Boolean, nullable=False, server_default="false"),
    Column("allow_request_professional_agreement", Boolean, nullable=False, server_default="false"),
    Column("rest_json", Text),
    Column("mail_preferences", Integer, nullable=False, server_default="0"),
    Column("verified_at", DateTime(timezone=True)),
    Column("last_login_at", DateTime(timezone=True)),
    Column("deactivated_at", DateTime(timezone=True)),
    Column("refresh_token_hash", Text),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)

maximum_entity_limits = Table(
    "maximum_entity_limits",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("entity_type", entity_type_enum, nullable=False),
    Column("maximum_limit", Integer, nullable=False),
    Column("start_at", DateTime(timezone=True), nullable=False),
    Column("end_at", DateTime(timezone=True)),
    Column("created_by", UUID(as_uuid=True)),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)

driver_suspensions = Table(
    "driver_suspensions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("driver_id", UUID(as_uuid=True), ForeignKey("drivers.id", ondelete="CASCADE"), nullable=False),
    Column("can_access_restricted_space", Boolean, nullable=False, server_default="false"),
    Column("start_at", DateTime(timezone=True), nullable=False),
    Column("end_at", DateTime(timezone=True)),
    Column("driver_message", Text),
    Column("title", String(255)),
    Column("description", Text),
    Column("created_by", UUID(as_uuid=True)),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)

workdays = Table(
    "workdays",
    metadata,
    Column("driver_id", UUID(as_uuid=True), ForeignKey("drivers.id", ondelete="CASCADE"), primary_key=True),
    Column("date", Date, primary_key=True),
    Column("start_time", Time, nullable=False),
    Column("end_time", Time),
    Column("rest_time", Time, nullable=False),
    Column("overnight_rest", Boolean, nullable=False, server_default="false"),
)

workday_garbage = Table(
    "workday_garbage",
    metadata,
    Column("driver_id", UUID(as_uuid=True), primary_key=True),
    Column("workday_date", Date, primary_key=True),
    Column("scheduled_deletion_date", Date, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    ForeignKeyConstraint(
        ["driver_id", "workday_date"],
        ["workdays.driver_id", "workdays.date"],
        ondelete="CASCADE",
    ),
)

updates = Table(
    "updates",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("version", String(32), nullable=False),
    Column("description", Text, nullable=False),
    Column("entity_type", entity_type_enum, nullable=False),
    Column("mandatory_completion_date", DateTime(timezone=True)),
    Column("created_by", UUID(as_uuid=True)),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)

driver_mail_types = Table(
    "driver_mail_types",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(64), nullable=False, unique=True),
)

driver_mails = Table(
    "driver_mails",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True, default=uuid.uuid4),
    Column("driver_id", UUID(as_uuid=True), ForeignKey("drivers.id", ondelete="CASCADE"), nullable=False),
    Column("mail_type_id", Integer, ForeignKey("driver_mail_types.id"), nullable=False),
    Column("email_used", String(255), nullable=False),
    Column("status", mail_status_enum, nullable=False),
    Column("description", Text, nullable=False),
    Column("content", Text),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("sent_at", DateTime(timezone=True)),
)
