"""
ReorderReconciler maps a past order onto today's catalog.

    reconciler = ReorderReconciler(cart, orders, catalog, coupons)
    outcome = await reconciler.start("ord-42", OrderType.REGULAR)

    if outcome.needs_replacements:
        await reconciler.record_replacement("m3", "m9")
        await reconciler.complete_replacements()

Fetching is all-or-nothing: the order and the live catalog flags are both
loaded before the first cart mutation. If either fails, the cart is left
untouched and the outcome is FAILED.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field, replace
from uuid import uuid4

from kungfu import Result, Ok, Error

from mealcart._types import MealId
from mealcart.errors import (
    ReconciliationFetchError,
    ReconciliationErrorKind,
    ReplacementError,
    ReplacementErrorKind,
)
from mealcart.lift import guarded
from mealcart.catalog import CatalogGateway, MealAvailability, index_by_id
from mealcart.production import shortest_shelf_life
from mealcart.cart import (
    CartStore,
    CartItem,
    ItemType,
    OrderType,
    PackageData,
    UnavailableItem,
    ReorderContext,
    AddItem,
    AddPackage,
    SetReorderContext,
)
from mealcart.discounts import CouponGateway
from mealcart.reorder._types import (
    ReorderStatus,
    OrderLine,
    HistoricalOrder,
    OrderHistoryGateway,
    CouponAdvisory,
    ReorderOutcome,
)

log = logging.getLogger(__name__)

ALL_ADDED = "All items have been added to cart successfully."


def _unavailable_message(count: int) -> str:
    return f"{count} items unavailable. Please review and replace items in cart."


def _short_id() -> str:
    return uuid4().hex[:8]


@dataclass(frozen=True, slots=True)
class _Fetched:
    order: HistoricalOrder
    live: dict[MealId, MealAvailability]


def partition(
    lines: Iterable[OrderLine],
    live: dict[MealId, MealAvailability],
) -> tuple[list[tuple[OrderLine, MealAvailability]], list[UnavailableItem]]:
    """
    Split lines by the live is_active flag. A meal missing from the
    catalog altogether counts as retired.
    """
    available: list[tuple[OrderLine, MealAvailability]] = []
    unavailable: list[UnavailableItem] = []
    for line in lines:
        meal = live.get(line.meal_id)
        if meal is not None and meal.is_active:
            available.append((line, meal))
        else:
            unavailable.append(UnavailableItem(line.meal_id, line.meal_name, line.quantity))
    return available, unavailable


def _meal_item(meal: MealAvailability) -> CartItem:
    return CartItem(
        id=meal.id,
        name=meal.name,
        price=meal.price,
        shelf_life_days=meal.shelf_life_days,
    )


@dataclass
class ReorderReconciler:
    cart: CartStore
    orders: OrderHistoryGateway
    catalog: CatalogGateway
    coupons: CouponGateway | None = None
    new_id: Callable[[], str] = _short_id
    _status: ReorderStatus = field(default=ReorderStatus.IDLE, init=False)

    @property
    def status(self) -> ReorderStatus:
        return self._status

    # ═══════════════════════════════════════════════════════════════════════════
    # Start
    # ═══════════════════════════════════════════════════════════════════════════

    async def start(
        self,
        order_id: str,
        order_type: OrderType = OrderType.REGULAR,
    ) -> ReorderOutcome:
        self._status = ReorderStatus.FETCHING
        log.info(f"Reorder {order_id} ({order_type.value}): fetching")

        match await self._fetch(order_id, order_type):
            case Error(e):
                self._status = ReorderStatus.FAILED
                log.warning(f"Reorder {order_id} failed: {e.message}")
                return ReorderOutcome(ReorderStatus.FAILED, order_id, e.message, error=e)
            case Ok(fetched):
                pass

        available, unavailable = partition(fetched.order.lines, fetched.live)
        if fetched.order.order_type is OrderType.PACKAGE:
            outcome = await self._apply_package(fetched.order, available, unavailable)
        else:
            outcome = await self._apply_regular(fetched.order, available, unavailable)

        self._status = outcome.status
        log.info(
            f"Reorder {order_id}: {outcome.status.name.lower()}, "
            f"{len(available)} available, {len(unavailable)} unavailable"
        )
        return outcome

    async def _fetch(
        self, order_id: str, order_type: OrderType
    ) -> Result[_Fetched, ReconciliationFetchError]:
        def failed(e: Exception) -> ReconciliationFetchError:
            return ReconciliationFetchError(
                ReconciliationErrorKind.FETCH_FAILED, order_id, "Failed to load order details",
            )

        match await guarded(
            lambda: self.orders.get_order(order_id, order_type),
            on_error=failed,
            what=f"order {order_id}",
        ):
            case Error(e):
                return Error(e)
            case Ok(None):
                return Error(ReconciliationFetchError(
                    ReconciliationErrorKind.NOT_FOUND, order_id, "Order not found",
                ))
            case Ok(order):
                pass

        if order.order_type is OrderType.PACKAGE and order.package is None:
            return Error(ReconciliationFetchError(
                ReconciliationErrorKind.FETCH_FAILED, order_id, "Package details missing for order",
            ))
        if order.package is not None and not order.package.is_active:
            return Error(ReconciliationFetchError(
                ReconciliationErrorKind.PACKAGE_UNAVAILABLE, order_id, "Package is no longer available",
            ))

        meal_ids = list(dict.fromkeys(line.meal_id for line in order.lines))
        match await guarded(
            lambda: self.catalog.get_meal_availability(meal_ids),
            on_error=failed,
            what="meal availability",
        ):
            case Error(e):
                return Error(e)
            case Ok(meals):
                return Ok(_Fetched(order, index_by_id(meals)))

    # ═══════════════════════════════════════════════════════════════════════════
    # Regular orders
    # ═══════════════════════════════════════════════════════════════════════════

    async def _apply_regular(
        self,
        order: HistoricalOrder,
        available: Sequence[tuple[OrderLine, MealAvailability]],
        unavailable: Sequence[UnavailableItem],
    ) -> ReorderOutcome:
        added: list[CartItem] = []
        for line, meal in available:
            item = _meal_item(meal)
            # add increments by one, so repeat per unit
            for _ in range(line.quantity):
                await self.cart.dispatch(AddItem(item))
            added.append(item.with_quantity(line.quantity))

        if unavailable:
            await self.cart.dispatch(SetReorderContext(ReorderContext(
                original_order_id=order.id,
                original_order_type=OrderType.REGULAR,
                unavailable_items=tuple(unavailable),
            )))
            return ReorderOutcome(
                ReorderStatus.AWAITING_REPLACEMENT,
                order.id,
                _unavailable_message(len(unavailable)),
                added=tuple(added),
                unavailable=tuple(unavailable),
            )

        await self.cart.dispatch(SetReorderContext(None))
        return ReorderOutcome(
            ReorderStatus.APPLIED,
            order.id,
            ALL_ADDED,
            added=tuple(added),
            coupon_advisory=await self._coupon_advisory(order),
        )

    async def _coupon_advisory(self, order: HistoricalOrder) -> CouponAdvisory | None:
        if not order.coupon_code or self.coupons is None:
            return None
        code = order.coupon_code
        subtotal = self.cart.total_price
        match await guarded(
            lambda: self.coupons.validate_coupon(code, subtotal),
            on_error=lambda e: e,
            what="coupon re-validation",
        ):
            case Ok(validation) if validation.valid:
                return CouponAdvisory(
                    code, True, f"Coupon {code} from your original order can be applied again at checkout.",
                )
            case Ok(validation):
                return CouponAdvisory(
                    code, False, validation.error or f"Coupon {code} from your original order is no longer valid.",
                )
            case Error(_):
                return None

    # ═══════════════════════════════════════════════════════════════════════════
    # Package orders
    # ═══════════════════════════════════════════════════════════════════════════

    async def _apply_package(
        self,
        order: HistoricalOrder,
        available: Sequence[tuple[OrderLine, MealAvailability]],
        unavailable: Sequence[UnavailableItem],
    ) -> ReorderOutcome:
        item = self._package_item(order, available)

        if unavailable:
            # the package only goes in once every slot is filled
            await self.cart.dispatch(SetReorderContext(ReorderContext(
                original_order_id=order.id,
                original_order_type=OrderType.PACKAGE,
                unavailable_items=tuple(unavailable),
                pending_package=item,
            )))
            return ReorderOutcome(
                ReorderStatus.AWAITING_REPLACEMENT,
                order.id,
                _unavailable_message(len(unavailable)),
                unavailable=tuple(unavailable),
            )

        await self.cart.dispatch(AddPackage(item))
        await self.cart.dispatch(SetReorderContext(None))
        return ReorderOutcome(ReorderStatus.APPLIED, order.id, ALL_ADDED, added=(item,))

    def _package_item(
        self,
        order: HistoricalOrder,
        available: Sequence[tuple[OrderLine, MealAvailability]],
    ) -> CartItem:
        package = order.package
        assert package is not None
        selected: dict[MealId, int] = {}
        for line, _ in available:
            selected[line.meal_id] = selected.get(line.meal_id, 0) + line.quantity

        return CartItem(
            id=f"reorder-{order.id}-{self.new_id()}",
            name=f"{package.package_name} (Reorder)",
            price=package.price,
            type=ItemType.PACKAGE,
            shelf_life_days=shortest_shelf_life(meal for _, meal in available),
            package_data=PackageData(
                package_id=package.package_id,
                package_name=package.package_name,
                meal_count=package.meal_count,
                selected_meals=selected,
            ),
        )

    # ═══════════════════════════════════════════════════════════════════════════
    # Replacements
    # ═══════════════════════════════════════════════════════════════════════════

    async def record_replacement(
        self,
        unavailable_id: MealId,
        replacement_id: MealId,
    ) -> Result[ReorderContext, ReplacementError]:
        """
        Substitute one retired meal. Regular orders get the replacement
        in the cart straight away; package orders fold it into the
        pending package.
        """
        context = self.cart.reorder_context
        if context is None:
            return Error(ReplacementError(ReplacementErrorKind.NO_PENDING_REORDER, "No reorder in progress"))

        target = next((u for u in context.unavailable_items if u.item_id == unavailable_id), None)
        if target is None:
            return Error(ReplacementError(
                ReplacementErrorKind.UNKNOWN_ITEM, f"{unavailable_id} is not awaiting replacement",
            ))
        if unavailable_id in context.replacements:
            return Error(ReplacementError(
                ReplacementErrorKind.ALREADY_REPLACED, f"{target.item_name} has already been replaced",
            ))

        match await guarded(
            lambda: self.catalog.get_meal_availability([replacement_id]),
            on_error=lambda e: ReplacementError(
                ReplacementErrorKind.LOOKUP_FAILED, "Failed to check replacement meal",
            ),
            what="replacement meal",
        ):
            case Error(e):
                return Error(e)
            case Ok(meals):
                meal = index_by_id(meals).get(replacement_id)

        if meal is None or not meal.is_active:
            return Error(ReplacementError(
                ReplacementErrorKind.REPLACEMENT_UNAVAILABLE, "That meal is not available",
            ))

        updated = context.with_replacement(unavailable_id, replacement_id)
        if context.pending_package is not None:
            updated = replace(
                updated,
                pending_package=_with_meal(context.pending_package, meal, target.requested_qty),
            )
        else:
            item = _meal_item(meal)
            for _ in range(target.requested_qty):
                await self.cart.dispatch(AddItem(item))

        await self.cart.dispatch(SetReorderContext(updated))
        return Ok(updated)

    async def complete_replacements(self) -> Result[ReorderOutcome, ReplacementError]:
        context = self.cart.reorder_context
        if context is None:
            return Error(ReplacementError(ReplacementErrorKind.NO_PENDING_REORDER, "No reorder in progress"))
        remaining = context.unresolved()
        if remaining:
            return Error(ReplacementError(
                ReplacementErrorKind.UNRESOLVED, f"{len(remaining)} items still need a replacement",
            ))

        added: tuple[CartItem, ...] = ()
        if context.pending_package is not None:
            await self.cart.dispatch(AddPackage(context.pending_package))
            added = (context.pending_package,)

        await self.cart.dispatch(SetReorderContext(None))
        self._status = ReorderStatus.APPLIED
        return Ok(ReorderOutcome(ReorderStatus.APPLIED, context.original_order_id, ALL_ADDED, added=added))

    async def abandon(self) -> None:
        """Drop the pending reorder. Items already added stay in the cart."""
        await self.cart.dispatch(SetReorderContext(None))
        self._status = ReorderStatus.IDLE


def _with_meal(package_item: CartItem, meal: MealAvailability, quantity: int) -> CartItem:
    data = package_item.package_data
    assert data is not None
    selected = dict(data.selected_meals)
    selected[meal.id] = selected.get(meal.id, 0) + quantity
    lives = [d for d in (package_item.shelf_life_days, meal.shelf_life_days) if d is not None]
    return replace(
        package_item,
        shelf_life_days=min(lives) if lives else None,
        package_data=replace(data, selected_meals=selected),
    )


__all__ = ("partition", "ReorderReconciler", "ALL_ADDED")
