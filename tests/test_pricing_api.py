from __future__ import annotations

from decimal import Decimal

from filtersfast.models.deal import Deal, DealRewardSku


def _tier_table():
    return [
        {"min_quantity": 1, "max_quantity": 11, "fixed_price": "10"},
        {"min_quantity": 12, "max_quantity": 23, "discount_percentage": "10"},
        {"min_quantity": 24, "fixed_price": "8.50"},
    ]


def test_health(client):
    assert client.get("/health").json() == {"status": "up"}


def test_cart_rewards_endpoint(client, db_session, make_product):
    gift = make_product("GIFT-1", "4.99", name="Free Sample")
    source = make_product(
        "FRIDGE-1",
        "39.99",
        gift_with_purchase_product_id=gift.id,
        gift_with_purchase_auto_add=True,
    )
    make_product("BONUS-1", "9.99")
    deal = Deal(
        description="Spend $75",
        start_price=Decimal("75"),
        end_price=Decimal("200"),
        units=1,
        reward_auto_add=True,
        active=True,
        reward_skus=[DealRewardSku(sku="BONUS-1", quantity=1)],
    )
    db_session.add(deal)
    db_session.commit()

    response = client.post(
        "/api/cart/rewards",
        json={
            "items": [
                {"productId": str(source.id), "quantity": 1, "price": 39.99},
                {"id": source.id, "quantity": 1, "price": 39.99},
            ]
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["applied_deals"] == [{"id": deal.id, "description": "Spend $75"}]
    by_id = {reward["id"]: reward for reward in body["rewards"]}
    assert by_id[f"reward:product:{source.id}:{gift.id}"]["quantity"] == 2
    assert by_id[f"reward:product:{source.id}:{gift.id}"]["reward_source"]["type"] == "product"
    assert f"reward:deal:{deal.id}:" in " ".join(by_id)


def test_cart_rewards_rejects_non_positive_quantity(client):
    response = client.post("/api/cart/rewards", json={"items": [{"sku": "X", "quantity": 0}]})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Invalid request"
    assert body["details"]


def test_cart_rewards_rejects_too_many_items(client):
    items = [{"sku": f"S{i}", "quantity": 1} for i in range(101)]

    response = client.post("/api/cart/rewards", json={"items": items})

    assert response.status_code == 400


def test_tier_pricing_admin_crud_and_quote(client, make_product):
    product = make_product("WATER-1", "10.00")

    created = client.post(
        "/api/admin/tier-pricing",
        json={"product_id": product.id, "tiers": _tier_table()},
    )
    assert created.status_code == 201
    tier_pricing_id = created.json()["id"]
    assert [t["position"] for t in created.json()["tiers"]] == [1, 2, 3]

    quote = client.post(
        "/api/b2b/tier-pricing/quote",
        json={"base_price": "10", "quantity": 30, "product_id": product.id, "moq": 50},
    )
    assert quote.status_code == 200
    body = quote.json()
    assert Decimal(body["pricing"]["unit_price"]) == Decimal("8.50")
    assert body["pricing"]["tier_applied"]["min_quantity"] == 24
    assert body["display"]["tier_text"] == "Buy 24+"
    assert body["moq_incentive"]["message"] == "Order 20 more to save $30.00!"

    breaks = client.get(
        f"/api/admin/tier-pricing/{tier_pricing_id}/price-breaks",
        params={"base_price": "10"},
    )
    assert [b["quantity"] for b in breaks.json()] == [1, 12, 24]

    patched = client.patch(
        f"/api/admin/tier-pricing/{tier_pricing_id}",
        json={"tiers": [{"min_quantity": 1, "discount_amount": "1"}]},
    )
    assert patched.status_code == 200
    assert len(patched.json()["tiers"]) == 1

    assert client.delete(f"/api/admin/tier-pricing/{tier_pricing_id}").status_code == 204
    assert client.get(f"/api/admin/tier-pricing/{tier_pricing_id}").status_code == 404


def test_tier_pricing_create_rejects_invalid_table(client):
    response = client.post(
        "/api/admin/tier-pricing",
        json={
            "sku": "WATER-1",
            "tiers": [
                {"min_quantity": 1, "max_quantity": 10, "discount_percentage": "5"},
                {"min_quantity": 5, "max_quantity": 15},
            ],
        },
    )

    assert response.status_code == 400
    assert response.json()["detail"] == [
        "Tiers 1 and 2 have overlapping quantity ranges",
        "Tier 2 must have a pricing method (fixed_price, discount_amount, or discount_percentage)",
    ]


def test_tier_pricing_rejects_multiple_scopes(client):
    response = client.post(
        "/api/admin/tier-pricing",
        json={"product_id": 1, "sku": "WATER-1", "tiers": [{"min_quantity": 1, "fixed_price": "1"}]},
    )

    assert response.status_code == 400


def test_tier_validate_endpoint(client):
    response = client.post("/api/b2b/tier-pricing/validate", json={"tiers": []})

    assert response.json() == {"valid": False, "errors": ["At least one tier is required"]}


def test_b2b_quote_and_credit_check(client, make_product):
    product = make_product("AIR-1", "100.00")
    client.post(
        "/api/admin/tier-pricing",
        json={"product_id": product.id, "tiers": [{"min_quantity": 10, "discount_percentage": "10"}]},
    )
    account = client.post(
        "/api/admin/b2b-accounts",
        json={
            "company_name": "Acme Facilities",
            "status": "approved",
            "discount_percentage": "20",
            "payment_terms": "net-30",
            "credit_limit": "1000",
            "credit_used": "800",
        },
    )
    assert account.status_code == 201
    account_id = account.json()["id"]

    quote = client.post(
        "/api/b2b/price-quote",
        json={"account_id": account_id, "base_price": "100", "quantity": 10, "product_id": product.id},
    )
    assert quote.status_code == 200
    assert Decimal(quote.json()["discounted_base_price"]) == Decimal("80")
    assert Decimal(quote.json()["pricing"]["unit_price"]) == Decimal("72")

    allowed = client.post(
        "/api/b2b/credit-check",
        json={"account_id": account_id, "order_total": "150", "order_date": "2026-03-01"},
    )
    assert allowed.json() == {"allowed": True, "reason": None, "due_date": "2026-03-31"}

    denied = client.post("/api/b2b/credit-check", json={"account_id": account_id, "order_total": "250"})
    assert denied.json()["allowed"] is False
    assert denied.json()["reason"] == "Order exceeds available credit. Available: $200.00"

    suspended = client.patch(
        f"/api/admin/b2b-accounts/{account_id}",
        json={"status": "suspended", "suspension_reason": "Past due"},
    )
    assert suspended.json()["status"] == "suspended"
    denied = client.post("/api/b2b/credit-check", json={"account_id": account_id, "order_total": "1"})
    assert denied.json()["reason"] == "Account suspended: Past due"


def test_b2b_unknown_account_is_404(client):
    response = client.post("/api/b2b/credit-check", json={"account_id": 404, "order_total": "1"})

    assert response.status_code == 404


def test_b2b_account_patch_rejects_null_for_required_fields(client):
    account_id = client.post("/api/admin/b2b-accounts", json={"company_name": "Acme Facilities"}).json()["id"]

    for field in ("status", "payment_terms", "pricing_tier", "discount_percentage", "credit_used", "company_name"):
        response = client.patch(f"/api/admin/b2b-accounts/{account_id}", json={field: None})
        assert response.status_code == 400, field
        assert response.json()["error"] == "Invalid request"

    cleared = client.patch(f"/api/admin/b2b-accounts/{account_id}", json={"credit_limit": None})
    assert cleared.status_code == 200
    assert cleared.json()["credit_limit"] is None
    assert cleared.json()["status"] == "pending"


def test_seed_data_is_idempotent_and_prices_a_quote(client, db_session):
    from scripts.seed_pricing_data import seed_pricing_data

    seed_pricing_data(db_session)
    seed_pricing_data(db_session)

    quote = client.post(
        "/api/b2b/price-quote",
        json={"account_id": 1, "base_price": "39.99", "quantity": 12, "product_id": 1},
    )
    assert quote.status_code == 200
    # 39.99 * 0.85 = 33.99, then 10% off = 30.59
    assert Decimal(quote.json()["pricing"]["unit_price"]) == Decimal("30.59")

    rewards = client.post("/api/cart/rewards", json={"items": [{"productId": 1, "quantity": 2}]})
    skus = sorted(r["sku"] for r in rewards.json()["rewards"])
    assert skus == ["FF-GIFT-BOTTLE", "FF-GIFT-WIPES"]
