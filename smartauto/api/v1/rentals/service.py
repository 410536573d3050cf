import logging
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import and_, or_, select, func, update
from sqlalchemy.orm import selectinload

from smartauto.api.v1.rentals.schemas import (
    CreateRentalRequest,
    RentalFilters,
    RentalSort,
    UpdateRentalRequest,
)
from smartauto.core.deps import role_allowed
from smartauto.core.exceptions import AppException
from smartauto.models.enums import RentalStatus, Role
from smartauto.models.rental import Rental
from smartauto.models.user import User
from smartauto.models.vehicle import Vehicle

# Roles that may arbitrate rentals and book on someone else's behalf
PRIVILEGED_ROLES = (Role.owner, Role.admin)

# Whitelist of sortable columns; anything else sorts by start date ascending
SORTABLE_COLUMNS = {
    "id": Rental.id,
    "start_date": Rental.start_date,
    "end_date": Rental.end_date,
    "status": Rental.status,
}
DEFAULT_SORT_COLUMN = "start_date"


class RentalService:
    """
    Rental lifecycle: booking, arbitration and release of vehicles.

    Status moves only pending -> approved or pending -> rejected. A vehicle's
    `available` flag is the single lock on it: approving (or a privileged
    booking) takes it, deleting an approved rental gives it back. Both writes
    of every transition go through conditional UPDATEs committed together, so
    two concurrent requests cannot both take the same vehicle.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Loading and visibility
    # ------------------------------------------------------------------

    def _with_relations(self, query):
        return query.options(
            selectinload(Rental.customer),
            selectinload(Rental.owner),
            selectinload(Rental.vehicle),
        )

    async def _load_rental(self, rental_id: int) -> Optional[Rental]:
        result = await self.db.execute(
            self._with_relations(select(Rental).where(Rental.id == rental_id)).execution_options(
                populate_existing=True
            )
        )
        return result.scalar_one_or_none()

    def _visibility_clause(self, actor: User):
        """
        Admins see everything, everyone else their own bookings. Owners see the rentals they own
        plus pending requests nobody has claimed yet, so they can arbitrate them.
        """
        if actor.role == Role.admin.value:
            return None
        if actor.role == Role.owner.value:
            return or_(
                Rental.owner_id == actor.id,
                and_(Rental.owner_id.is_(None), Rental.status == RentalStatus.pending.value),
            )
        return Rental.customer_id == actor.id

    def _is_visible(self, rental: Rental, actor: User) -> bool:
        if actor.role == Role.admin.value:
            return True
        if actor.role == Role.owner.value:
            if rental.owner_id is None:
                return rental.status == RentalStatus.pending.value
            return rental.owner_id == actor.id
        return rental.customer_id == actor.id

    def _filter_clauses(self, filters: RentalFilters) -> list:
        clauses = []
        if filters.status is not None:
            clauses.append(Rental.status == filters.status.value)
        if filters.vehicle_id is not None:
            clauses.append(Rental.vehicle_id == filters.vehicle_id)
        if filters.customer_id is not None:
            clauses.append(Rental.customer_id == filters.customer_id)
        if filters.owner_id is not None:
            clauses.append(Rental.owner_id == filters.owner_id)
        if filters.start_date is not None:
            clauses.append(Rental.start_date >= filters.start_date)
        if filters.end_date is not None:
            clauses.append(Rental.end_date == filters.end_date)
        return clauses

    def _order_by(self, sort: RentalSort):
        column = SORTABLE_COLUMNS.get(sort.order_by)
        if column is None:
            return [SORTABLE_COLUMNS[DEFAULT_SORT_COLUMN].asc(), Rental.id.asc()]
        if sort.descending:
            return [column.desc(), Rental.id.desc()]
        return [column.asc(), Rental.id.asc()]

    # ------------------------------------------------------------------
    # Atomic writes
    # ------------------------------------------------------------------

    async def _set_vehicle_availability(self, vehicle_id: int, available: bool) -> bool:
        """
        Flip the flag only if it currently holds the opposite value.
        Returns False when another request got there first.
        """
        result = await self.db.execute(
            update(Vehicle)
            .where(Vehicle.id == vehicle_id)
            .where(Vehicle.available.is_(not available))
            .values(available=available)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def _transition(self, rental_id: int, target: RentalStatus, actor_id: int) -> bool:
        """
        Compare-and-swap pending -> target. An unassigned rental is claimed by the arbitrating
        user in the same write. Returns False if the rental is no longer pending.
        """
        result = await self.db.execute(
            update(Rental)
            .where(Rental.id == rental_id)
            .where(Rental.status == RentalStatus.pending.value)
            .values(status=target.value, owner_id=func.coalesce(Rental.owner_id, actor_id))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_rental(self, rental_id: int, actor: User) -> Rental:
        rental = await self._load_rental(rental_id)
        if not rental or not self._is_visible(rental, actor):
            AppException().raise_404("Rental not found")
        return rental

    async def list_rentals(
        self,
        actor: User,
        filters: RentalFilters,
        sort: RentalSort,
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[List[Rental], int]:
        clauses = self._filter_clauses(filters)
        visibility = self._visibility_clause(actor)
        if visibility is not None:
            clauses.insert(0, visibility)

        count_query = select(func.count()).select_from(Rental).where(*clauses)
        total = (await self.db.execute(count_query)).scalar() or 0

        query = (
            self._with_relations(select(Rental).where(*clauses))
            .order_by(*self._order_by(sort))
            .offset(offset)
            .limit(limit)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all()), total

    # ------------------------------------------------------------------
    # Reference checks
    # ------------------------------------------------------------------

    async def _get_available_vehicle(self, vehicle_id: int) -> Vehicle:
        vehicle = await self.db.get(Vehicle, vehicle_id, populate_existing=True)
        if not vehicle or not vehicle.available:
            AppException().raise_404("Vehicle not found")
        return vehicle

    async def _get_owner(self, owner_id: int) -> User:
        owner = await self.db.get(User, owner_id)
        if not owner:
            AppException().raise_404("Owner not found")
        if not role_allowed(owner.role, PRIVILEGED_ROLES):
            AppException().raise_403("Owner must have role owner or admin")
        return owner

    async def _get_customer(self, customer_id: int) -> User:
        customer = await self.db.get(User, customer_id)
        if not customer:
            AppException().raise_404("Customer not found")
        return customer

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def create_rental(self, data: CreateRentalRequest, actor: User) -> Rental:
        """
        Book a vehicle. Owners and admins are fast-tracked: the rental starts approved and the
        vehicle is taken immediately. Customers get a pending request and the vehicle stays
        bookable, so several pending requests for one vehicle may coexist.
        """
        privileged = role_allowed(actor.role, PRIVILEGED_ROLES)
        customer_id = data.customer_id if data.customer_id is not None else actor.id
        if not privileged and customer_id != actor.id:
            AppException().raise_403("Customers can only book rentals for themselves")

        owner_id = data.owner_id
        if owner_id is None and privileged:
            owner_id = actor.id

        actor_id = actor.id
        vehicle = await self._get_available_vehicle(data.vehicle_id)
        vehicle_id = vehicle.id
        if owner_id is not None:
            await self._get_owner(owner_id)
        await self._get_customer(customer_id)

        # First write of the transaction: on failure there is nothing to undo
        if privileged and not await self._set_vehicle_availability(vehicle_id, False):
            self.logger.warning("Vehicle %s was taken while booking for user %s", vehicle_id, actor_id)
            AppException().raise_404("Vehicle not found")

        rental = Rental(
            start_date=data.start_date,
            end_date=data.end_date,
            customer_id=customer_id,
            owner_id=owner_id,
            vehicle_id=vehicle_id,
            status=RentalStatus.approved.value if privileged else RentalStatus.pending.value,
        )
        self.db.add(rental)
        await self.db.commit()
        # The flag was written with a Core UPDATE; reload it with the rental
        self.db.expire(vehicle)
        self.logger.info(
            "Rental %s created by user %s for vehicle %s with status %s",
            rental.id, actor_id, vehicle_id, rental.status,
        )
        return await self._load_rental(rental.id)

    async def approve_rental(self, rental_id: int, actor: User) -> Rental:
        rental = await self._load_rental(rental_id)
        if not rental:
            AppException().raise_404("Rental not found")
        if rental.status != RentalStatus.pending.value:
            AppException().raise_conflict("approved", rental.status)

        actor_id = actor.id
        vehicle_id = rental.vehicle_id
        # Take the vehicle first; if that fails nothing has been written yet
        if not await self._set_vehicle_availability(vehicle_id, False):
            self.logger.warning(
                "Refused approval of rental %s: vehicle %s is not available", rental_id, vehicle_id
            )
            AppException().raise_400("Vehicle is not available")
        if not await self._transition(rental_id, RentalStatus.approved, actor_id):
            # Lost a race with another approve/reject: give the vehicle back
            await self.db.rollback()
            current = await self._load_rental(rental_id)
            AppException().raise_conflict("approved", current.status if current else "deleted")

        await self.db.commit()
        self.db.expire(rental.vehicle)
        self.logger.info("Rental %s approved by user %s", rental_id, actor_id)
        return await self._load_rental(rental_id)

    async def reject_rental(self, rental_id: int, actor: User) -> Rental:
        rental = await self._load_rental(rental_id)
        if not rental:
            AppException().raise_404("Rental not found")
        if rental.status != RentalStatus.pending.value:
            AppException().raise_conflict("rejected", rental.status)

        actor_id = actor.id
        if not await self._transition(rental_id, RentalStatus.rejected, actor_id):
            # Nothing was written, the status just changed under us
            current = await self._load_rental(rental_id)
            AppException().raise_conflict("rejected", current.status if current else "deleted")

        # A pending rental never held the vehicle, nothing to release
        await self.db.commit()
        self.logger.info("Rental %s rejected by user %s", rental_id, actor_id)
        return await self._load_rental(rental_id)

    async def delete_rental(self, rental_id: int, actor: User) -> None:
        rental = await self.db.get(Rental, rental_id, populate_existing=True)
        if not rental:
            AppException().raise_404("Rental not found")

        actor_id = actor.id
        status = rental.status
        if status == RentalStatus.approved.value:
            await self._set_vehicle_availability(rental.vehicle_id, True)

        await self.db.delete(rental)
        await self.db.commit()
        self.logger.info("Rental %s (%s) deleted by user %s", rental_id, status, actor_id)

    async def update_rental(self, rental_id: int, data: UpdateRentalRequest, actor: User) -> Rental:
        """
        Partial update of dates and references. Status is never writable here; it only
        changes through approve/reject so the vehicle flag stays in step.
        """
        if "status" in data.model_fields_set:
            AppException().raise_400("Rental status cannot be updated directly. Use the approve or reject endpoints")

        rental = await self._load_rental(rental_id)
        if not rental:
            AppException().raise_404("Rental not found")

        update_data = data.model_dump(exclude_unset=True, exclude={"status"})

        vehicle_id = update_data.get("vehicle_id", rental.vehicle_id)
        if vehicle_id is None:
            AppException().raise_400("vehicle_id cannot be null")
        if vehicle_id != rental.vehicle_id:
            if rental.status != RentalStatus.pending.value:
                AppException().raise_400("Only pending rentals can be moved to another vehicle")
            await self._get_available_vehicle(vehicle_id)

        if "customer_id" in update_data:
            if update_data["customer_id"] is None:
                AppException().raise_400("customer_id cannot be null")
            await self._get_customer(update_data["customer_id"])

        if "owner_id" in update_data:
            if update_data["owner_id"] is not None:
                await self._get_owner(update_data["owner_id"])
            elif rental.status != RentalStatus.pending.value:
                AppException().raise_400("owner_id cannot be removed once the rental has been decided")

        for field in ("start_date", "end_date"):
            if field in update_data and update_data[field] is None:
                AppException().raise_400(f"{field} cannot be null")
        start_date = update_data.get("start_date", rental.start_date)
        end_date = update_data.get("end_date", rental.end_date)
        if end_date < start_date:
            AppException().raise_400("end_date must be on or after start_date")

        for field, value in update_data.items():
            setattr(rental, field, value)

        self.db.add(rental)
        await self.db.commit()
        self.logger.info("Rental %s updated by user %s: %s", rental_id, actor.id, sorted(update_data))
        return await self._load_rental(rental_id)
