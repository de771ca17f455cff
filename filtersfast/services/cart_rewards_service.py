"""
Gift-with-purchase resolution for a cart.

Two reward sources are evaluated independently:
1. Product-level: a resolved cart line whose product auto-adds a gift
2. Order-level: the single deal whose subtotal band contains the cart subtotal

Reward lines are keyed "reward:<source>:<source id>:<reward product id>";
entries sharing a key merge their quantities. Unknown products, SKUs and
reward references are skipped.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Optional, Union

from filtersfast.core.flow_logging import flow_info
from filtersfast.models.product import Product
from filtersfast.services.catalog import PricingCatalog
from filtersfast.services.tier_pricing_service import ZERO, to_decimal

logger = logging.getLogger(__name__)

MAX_CART_ITEMS = 100
MIN_ITEM_QUANTITY = 1
MAX_ITEM_QUANTITY = 999
MAX_UNIT_PRICE = Decimal("999999.99")
MAX_SUBTOTAL = Decimal("99999999.99")
MIN_REWARD_QUANTITY = 1
MAX_REWARD_QUANTITY = 100


def _clamp(value, low, high):
    return max(low, min(high, value))


@dataclass
class RewardSource:
    type: str
    id: Union[int, str]
    description: Optional[str] = None
    parent_product_id: Optional[int] = None


@dataclass
class RewardLine:
    id: str
    product_id: int
    sku: str
    name: str
    brand: Optional[str]
    image: Optional[str]
    product_type: Optional[str]
    quantity: int
    price: Decimal
    reward_source: RewardSource
    is_reward: bool = True


@dataclass(frozen=True)
class AppliedDeal:
    id: int
    description: str


@dataclass
class CartRewardsResult:
    rewards: list[RewardLine] = field(default_factory=list)
    applied_deals: list[AppliedDeal] = field(default_factory=list)


@dataclass(frozen=True)
class _ResolvedLine:
    product: Product
    quantity: int
    unit_price: Decimal


def build_reward_id(source: str, source_id: Union[int, str], product_id: Union[int, str]) -> str:
    return f"reward:{source}:{source_id}:{product_id}"


def _normalize_product_id(item: Any) -> Optional[str]:
    for value in (getattr(item, "product_id", None), getattr(item, "id", None)):
        if value is None or isinstance(value, bool):
            continue
        return str(value)
    return None


class CartRewardsService:
    def __init__(self, catalog: PricingCatalog):
        self.catalog = catalog

    def _resolve_product(self, item: Any) -> Optional[Product]:
        product = None
        product_id = _normalize_product_id(item)
        if product_id:
            product = self.catalog.get_product_by_id(product_id)
        sku = getattr(item, "sku", None)
        if product is None and sku:
            product = self.catalog.get_product_by_sku(sku)
        return product

    def _resolve_lines(self, items: Iterable[Any]) -> list[_ResolvedLine]:
        lines = []
        for item in list(items)[:MAX_CART_ITEMS]:
            product = self._resolve_product(item)
            if product is None:
                flow_info(
                    logger,
                    "cart_item_skipped product_id=%s sku=%s",
                    _normalize_product_id(item),
                    getattr(item, "sku", None),
                    category="rewards",
                )
                continue

            quantity = _clamp(int(item.quantity), MIN_ITEM_QUANTITY, MAX_ITEM_QUANTITY)
            price = getattr(item, "price", None)
            unit_price = to_decimal(product.price) if price is None else to_decimal(price)
            unit_price = _clamp(unit_price, ZERO, MAX_UNIT_PRICE)
            lines.append(_ResolvedLine(product=product, quantity=quantity, unit_price=unit_price))
        return lines

    def _add_reward(
        self,
        rewards: dict[str, RewardLine],
        reward_id: str,
        product: Product,
        quantity: int,
        price: Decimal,
        source: RewardSource,
    ) -> None:
        existing = rewards.get(reward_id)
        if existing is not None:
            existing.quantity += quantity
            existing.price = price
            return
        rewards[reward_id] = RewardLine(
            id=reward_id,
            product_id=product.id,
            sku=product.sku,
            name=product.name,
            brand=product.brand,
            image=product.primary_image,
            product_type=product.product_type,
            quantity=quantity,
            price=price,
            reward_source=source,
        )

    def _apply_product_rewards(self, lines: list[_ResolvedLine], rewards: dict[str, RewardLine]) -> None:
        for line in lines:
            product = line.product
            if not product.gift_with_purchase_auto_add or not product.gift_with_purchase_product_id:
                continue

            reward_product = self.catalog.get_product_by_id(product.gift_with_purchase_product_id)
            if reward_product is None:
                continue

            quantity = _clamp(
                product.gift_with_purchase_quantity or 1, MIN_REWARD_QUANTITY, MAX_REWARD_QUANTITY
            )
            self._add_reward(
                rewards,
                build_reward_id("product", product.id, reward_product.id),
                reward_product,
                quantity,
                ZERO,
                RewardSource(type="product", id=product.id, parent_product_id=product.id),
            )

    def _apply_deal_rewards(
        self,
        subtotal: Decimal,
        rewards: dict[str, RewardLine],
    ) -> list[AppliedDeal]:
        deal = self.catalog.get_applicable_deal(subtotal)
        if deal is None or not deal.reward_skus or not deal.reward_auto_add:
            return []

        flow_info(
            logger,
            "deal_applied deal_id=%s subtotal=%s band=%s-%s",
            deal.id,
            subtotal,
            deal.start_price,
            deal.end_price,
            category="rewards",
        )
        for reward_sku in deal.reward_skus:
            reward_product = self.catalog.get_product_by_sku(reward_sku.sku)
            if reward_product is None:
                continue

            quantity = _clamp(reward_sku.quantity or 1, MIN_REWARD_QUANTITY, MAX_REWARD_QUANTITY)
            price = ZERO
            if reward_sku.price_override is not None:
                price = _clamp(to_decimal(reward_sku.price_override), ZERO, MAX_UNIT_PRICE)
            self._add_reward(
                rewards,
                build_reward_id("deal", deal.id, reward_product.id),
                reward_product,
                quantity,
                price,
                RewardSource(type="deal", id=deal.id, description=deal.description),
            )
        return [AppliedDeal(id=deal.id, description=deal.description)]

    def calculate(self, items: Iterable[Any], subtotal: Any = None) -> CartRewardsResult:
        items = list(items or [])
        if not items:
            return CartRewardsResult()

        lines = self._resolve_lines(items)
        computed_subtotal = sum((line.unit_price * line.quantity for line in lines), ZERO)

        effective_subtotal = computed_subtotal
        if subtotal is not None and to_decimal(subtotal) >= 0:
            effective_subtotal = to_decimal(subtotal)
        effective_subtotal = _clamp(effective_subtotal, ZERO, MAX_SUBTOTAL)

        rewards: dict[str, RewardLine] = {}
        self._apply_product_rewards(lines, rewards)
        applied_deals = self._apply_deal_rewards(effective_subtotal, rewards)

        logger.info(
            "cart_rewards_calculated items=%s resolved=%s subtotal=%s rewards=%s deals=%s",
            len(items),
            len(lines),
            effective_subtotal,
            len(rewards),
            len(applied_deals),
        )
        return CartRewardsResult(rewards=list(rewards.values()), applied_deals=applied_deals)
