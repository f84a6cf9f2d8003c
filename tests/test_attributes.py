from citisignal_mesh.attributes import (
    attributes_to_object,
    extract_attribute_value,
    extract_attributes,
    extract_manufacturer,
    extract_sku,
    extract_url_key,
    extract_variant_options,
    find_attribute_value,
    get_color_hex,
    is_in_stock,
)

from fixtures import complex_view


ATTRS = [
    {"name": "cs_manufacturer", "value": "Apple"},
    {"name": "cs_memory", "value": "128GB"},
    {"name": "weight", "value": ""},
]


class TestFindAttributeValue:
    def test_matches_prefixed_name(self) -> None:
        assert find_attribute_value(ATTRS, "manufacturer") == "Apple"
        assert find_attribute_value(ATTRS, "cs_memory") == "128GB"

    def test_empty_value_is_none(self) -> None:
        assert find_attribute_value(ATTRS, "weight") is None
        assert find_attribute_value(None, "manufacturer") is None

    def test_extract_with_default(self) -> None:
        assert extract_attribute_value(ATTRS, "manufacturer", "X") == "Apple"
        assert extract_attribute_value(ATTRS, "size", "X") == "X"
        assert extract_attribute_value(None, "size") == ""

    def test_extract_many(self) -> None:
        assert extract_attributes(ATTRS, ["manufacturer", "size"]) == {"manufacturer": "Apple", "size": None}
        assert extract_attributes(ATTRS, None) == {}


class TestColors:
    def test_known_and_unknown(self) -> None:
        assert get_color_hex("Space Gray") == "#4A4A4A"
        assert get_color_hex("plaid") == "#808080"
        assert get_color_hex(None) == "#808080"


class TestVariantOptions:
    def test_colors_and_storage(self) -> None:
        result = extract_variant_options(complex_view()["options"])

        assert result["colors"] == [{"name": "Black", "hex": "#000000"}, {"name": "Silver", "hex": "#C0C0C0"}]
        assert result["storage"] == ["128GB", "256GB"]

    def test_color_without_swatch_value_uses_name(self) -> None:
        result = extract_variant_options([{"id": "cs_color", "values": [{"title": "Red"}]}])

        assert result["colors"] == [{"name": "Red", "hex": "#FF0000"}]

    def test_unprefixed_and_invalid_options(self) -> None:
        options = [{"id": "size", "values": [{"title": "L"}]}, {"values": [{"title": "x"}]}, {"id": "cs_x"}]

        assert extract_variant_options(options) == {"size": ["L"]}
        assert extract_variant_options(None) == {}


    def test_empty_values_keep_the_key(self) -> None:
        options = [{"id": "cs_memory", "values": []}, {"id": "cs_color", "values": []}]

        assert extract_variant_options(options) == {"storage": [], "colors": []}


class TestProductFields:
    def test_in_stock_sources(self) -> None:
        assert is_in_stock({"inStock": False}) is False
        assert is_in_stock({"in_stock": True}) is True
        assert is_in_stock({"productView": {"inStock": False}}) is False
        assert is_in_stock({"stock_status": "OUT_OF_STOCK"}) is False
        assert is_in_stock({}) is True

    def test_identity_fields_fall_back_to_nested_views(self) -> None:
        product = {"productView": {"sku": "A", "url_key": "a"}}

        assert extract_sku(product) == "A"
        assert extract_url_key(product) == "a"

    def test_manufacturer_from_attributes(self) -> None:
        assert extract_manufacturer({"attributes": ATTRS}) == "Apple"
        assert extract_manufacturer({"manufacturer": "Nokia", "attributes": ATTRS}) == "Nokia"

    def test_attributes_to_object(self) -> None:
        result = attributes_to_object([{"name": "cs_memory", "value": "128GB"}, {"name": "weight", "value": "1"}])

        assert result == {"storage": "128GB", "weight": "1"}
