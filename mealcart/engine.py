"""
One storefront session, wired from settings and collaborators.

    engine = await Engine.open(Gateways(
        catalog=catalog_api,
        fulfillment=zones_api,
        coupons=coupons_api,
        gift_cards=gift_cards_api,
        order_history=history_api,
        orders=orders_api,
        payments=stripe_bridge,
    ))

    await engine.cart.dispatch(AddItem(CartItem("m1", "Chicken Bowl", 899)))
    match await engine.postcodes.check("TA6 5LT"): ...
    outcome = await engine.reorder.start("ord-42")
    result = await engine.checkout.checkout(request)

    await engine.close()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from kungfu import LazyCoroResult

from mealcart.config import Settings
from mealcart.errors import EligibilityError
from mealcart.logging_config import setup_logging
from mealcart.catalog import CatalogGateway
from mealcart.cart import CartStore, CartStorage, SQLAlchemyStorage
from mealcart.fulfillment import (
    FulfillmentGateway,
    FulfillmentMethod,
    FulfillmentTarget,
    PostcodeChecker,
    ReferenceData,
    available_dates,
    load_reference_data,
)
from mealcart.discounts import CouponGateway, GiftCardGateway, DiscountComposer
from mealcart.reorder import OrderHistoryGateway, ReorderReconciler
from mealcart.checkout import OrderGateway, PaymentGateway, CheckoutService

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Gateways:
    """Every external collaborator the engine talks to."""
    catalog: CatalogGateway
    fulfillment: FulfillmentGateway
    coupons: CouponGateway
    gift_cards: GiftCardGateway
    order_history: OrderHistoryGateway
    orders: OrderGateway
    payments: PaymentGateway


@dataclass
class Engine:
    settings: Settings
    gateways: Gateways
    storage: CartStorage
    cart: CartStore
    discounts: DiscountComposer
    reorder: ReorderReconciler
    checkout: CheckoutService
    postcodes: PostcodeChecker

    @classmethod
    async def open(
        cls,
        gateways: Gateways,
        settings: Settings | None = None,
        *,
        storage: CartStorage | None = None,
        configure_logging: bool = False,
    ) -> Engine:
        """
        Build the services and rehydrate the cart.

        Without an explicit storage the cart is kept in
        settings.cart_storage_url under settings.cart_storage_key.
        """
        settings = settings or Settings.from_env()
        if configure_logging:
            setup_logging(settings.log_level)
        if storage is None:
            storage = await SQLAlchemyStorage.connect(
                settings.cart_storage_url, settings.cart_storage_key,
            )

        cart = CartStore(storage)
        await cart.rehydrate()
        discounts = DiscountComposer(
            cart, gateways.coupons, gateways.gift_cards, gateways.catalog, settings,
        )
        log.info(f"Engine ready: {cart.total_items} items in cart {settings.cart_storage_key!r}")
        return cls(
            settings=settings,
            gateways=gateways,
            storage=storage,
            cart=cart,
            discounts=discounts,
            reorder=ReorderReconciler(cart, gateways.order_history, gateways.catalog, gateways.coupons),
            checkout=CheckoutService(cart, discounts, gateways.payments, gateways.orders, settings),
            postcodes=PostcodeChecker(gateways.fulfillment, settings.min_postcode_length),
        )

    def reference_data(self) -> LazyCoroResult[ReferenceData, EligibilityError]:
        return load_reference_data(self.gateways.fulfillment)

    def available_dates(
        self,
        method: FulfillmentMethod,
        target: FulfillmentTarget,
        *,
        today: date | None = None,
    ) -> list[date]:
        return available_dates(method, target, today=today, window=self.settings.collection_window_days)

    async def close(self) -> None:
        if isinstance(self.storage, SQLAlchemyStorage):
            await self.storage.close()


__all__ = ("Gateways", "Engine")
