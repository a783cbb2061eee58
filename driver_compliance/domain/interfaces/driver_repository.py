"""Interface for the driver credential repository (Repository Pattern)."""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from driver_compliance.domain.entities.driver import (
    CreateDriverRequest,
    Driver,
    EntityLimit,
    EntityType,
    Suspension,
)


class IDriverRepository(ABC):
    """
    Durable storage of drivers, their suspensions and entity limits.

    Implementations raise ``DatabaseError`` for infrastructure failures and the
    driver taxonomy (``DriverAlreadyExists``, ``DriverNotFound`` ...) for
    constraint outcomes.
    """

    @abstractmethod
    async def count_drivers(self) -> int:
        """Return the number of existing drivers."""
        pass

    @abstractmethod
    async def get_driver_by_id(self, driver_id: UUID) -> Optional[Driver]:
        """
        Retrieve a driver by id.

        Args:
            driver_id: Driver identifier

        Returns:
            Driver if exists, None otherwise
        """
        pass

    @abstractmethod
    async def get_driver_by_email(self, email: str) -> Optional[Driver]:
        """
        Retrieve a driver by normalized email.

        Args:
            email: Lowercase, trimmed email

        Returns:
            Driver if exists, None otherwise
        """
        pass

    @abstractmethod
    async def create_driver(self, create_request: CreateDriverRequest) -> Driver:
        """
        Insert a new driver. ``create_request.password`` already holds the hash.

        Raises:
            DriverAlreadyExists: If the email is taken
        """
        pass

    @abstractmethod
    async def update_driver(self, driver: Driver) -> Driver:
        """
        Persist every mutable column of ``driver``.

        A stored ``verified_at`` is never cleared.

        Raises:
            DriverNotFound: If no row matches ``driver.id``
        """
        pass

    @abstractmethod
    async def touch_last_login(self, driver_id: UUID, at: datetime) -> Driver:
        """
        Record a successful login.

        Raises:
            DriverNotFound: If no row matches
        """
        pass

    @abstractmethod
    async def set_refresh_token_hash(self, driver_id: UUID, refresh_token_hash: Optional[str]) -> None:
        """
        Replace the hash of the only refresh token still accepted.

        Raises:
            DriverNotFound: If no row matches
        """
        pass

    @abstractmethod
    async def mark_verified(self, driver_id: UUID, at: datetime) -> Driver:
        """
        Set ``verified_at`` unless it is already set.

        Args:
            driver_id: Driver identifier
            at: Verification instant

        Returns:
            The driver, carrying the first verification instant

        Raises:
            DriverNotFound: If no row matches
        """
        pass

    @abstractmethod
    async def update_password(self, driver_id: UUID, password_hash: str) -> Driver:
        """
        Store a new password hash and revoke the refresh token.

        Raises:
            DriverNotFound: If no row matches
        """
        pass

    @abstractmethod
    async def delete_driver(self, driver_id: UUID) -> None:
        """
        Delete a driver.

        Raises:
            DriverNotFound: If no row matches
        """
        pass

    @abstractmethod
    async def set_rest_periods(self, driver_id: UUID, rest_json: Optional[str]) -> None:
        """
        Replace the whole stored rest-period set (``None`` clears it).

        Raises:
            DriverNotFound: If no row matches
        """
        pass

    @abstractmethod
    async def get_active_limit(self, entity_type: EntityType, at: datetime) -> Optional[EntityLimit]:
        """
        Return the limit whose window contains ``at`` (latest ``start_at`` wins).

        Args:
            entity_type: Kind of entity the limit caps
            at: Instant to evaluate the validity windows against

        Returns:
            EntityLimit if one is active, None otherwise
        """
        pass

    @abstractmethod
    async def create_limit(self, limit: EntityLimit) -> EntityLimit:
        """Insert an entity limit."""
        pass

    @abstractmethod
    async def delete_limit(self, limit_id: int) -> None:
        """
        Delete an entity limit.

        Raises:
            DriverLimitationNotFound: If no row matches
        """
        pass

    @abstractmethod
    async def get_active_suspension(self, driver_id: UUID, at: datetime) -> Optional[Suspension]:
        """Return the suspension whose window contains ``at``, if any."""
        pass

    @abstractmethod
    async def create_suspension(self, suspension: Suspension) -> Suspension:
        """Insert a suspension."""
        pass

    @abstractmethod
    async def delete_suspension(self, suspension_id: int) -> None:
        """
        Delete a suspension.

        Raises:
            DriverSuspensionNotFound: If no row matches
        """
        pass
