from citisignal_mesh.cart import (
    build_adobe_cart_input,
    build_cart_update_input,
    build_remove_item_input,
    extract_cart_item_price,
    extract_variant_display,
    find_existing_cart_item,
    transform_cart_item_to_semantic,
    transform_cart_to_semantic,
)

from fixtures import adobe_cart


class TestTransformCart:
    def test_totals(self) -> None:
        cart = transform_cart_to_semantic(adobe_cart())

        assert cart["id"] == "cart-1"
        assert cart["itemCount"] == 3
        assert cart["totalValue"] == 1618.0
        assert cart["totalDisplay"] == "$1,618.00"
        assert cart["isEmpty"] is False

    def test_configurable_item(self) -> None:
        item = transform_cart_to_semantic(adobe_cart())["items"][0]

        assert item["priceDisplay"] == "$799.00"
        assert item["totalDisplay"] == "$1,598.00"
        assert item["variantDisplay"] == "Black, 128GB"
        assert item["image"] == {"url": "https://cdn.example.com/t.jpg", "altText": "Phone"}
        assert item["selectedOptions"] == [
            {"label": "Color", "value": "Black", "attributeCode": "cs_color"},
            {"label": "Memory", "value": "128GB", "attributeCode": "cs_memory"},
        ]

    def test_simple_item_uses_product_price(self) -> None:
        item = transform_cart_to_semantic(adobe_cart())["items"][1]

        assert item["priceValue"] == 20.0
        assert item["image"] is None
        assert item["selectedOptions"] == []
        assert item["variantDisplay"] is None

    def test_empty_and_missing(self) -> None:
        cart = transform_cart_to_semantic({"id": "c", "items": []})

        assert cart["isEmpty"] is True
        assert cart["totalDisplay"] == "$0.00"
        assert transform_cart_to_semantic(None) is None
        assert transform_cart_item_to_semantic({"id": "1"}) is None


class TestItemPrice:
    def test_row_total_fallback(self) -> None:
        assert extract_cart_item_price({"prices": {"row_total": {"value": "25.5"}}}) == 25.5

    def test_no_price(self) -> None:
        assert extract_cart_item_price({}) == 0

    def test_variant_display_without_options(self) -> None:
        assert extract_variant_display({"configurable_options": []}) is None


class TestMutationInputs:
    def test_simple_input(self) -> None:
        assert build_adobe_cart_input({"sku": "A", "quantity": 2}, "c") == {
            "cart_id": "c",
            "cart_items": [{"data": {"sku": "A", "quantity": 2}}],
        }

    def test_configurable_input(self) -> None:
        result = build_adobe_cart_input(
            {"sku": "A", "quantity": 1, "selectedOptions": [{"attributeCode": "cs_color", "value": "Black"}]}, "c"
        )

        assert result["cart_items"][0]["selected_options"] == [{"option_value": "Black", "option_id": "cs_color"}]

    def test_update_and_remove(self) -> None:
        assert build_cart_update_input({"cartItemId": "11", "quantity": 3}, "c") == {
            "cart_id": "c",
            "cart_items": [{"cart_item_id": 11, "quantity": 3}],
        }
        assert build_remove_item_input("12", "c") == {"cart_id": "c", "cart_item_id": 12}


class TestFindExistingItem:
    def test_same_sku_and_options(self) -> None:
        new_item = {
            "sku": "PHONE-1",
            "selectedOptions": [
                {"attributeCode": "cs_memory", "value": "128GB"},
                {"attributeCode": "cs_color", "value": "Black"},
            ],
        }

        assert find_existing_cart_item(adobe_cart(), new_item)["id"] == "11"

    def test_different_options(self) -> None:
        new_item = {
            "sku": "PHONE-1",
            "selectedOptions": [
                {"attributeCode": "cs_memory", "value": "256GB"},
                {"attributeCode": "cs_color", "value": "Black"},
            ],
        }

        assert find_existing_cart_item(adobe_cart(), new_item) is None

    def test_simple_product(self) -> None:
        assert find_existing_cart_item(adobe_cart(), {"sku": "CASE"})["id"] == "12"
        assert find_existing_cart_item(None, {"sku": "CASE"}) is None
