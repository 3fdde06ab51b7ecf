"""Tests for brand/street extraction from CRM records."""

import pytest

from storematch.config import ExtractionConfig
from storematch.extract import (
    _street_token_pattern,
    extract_fields,
    looks_like_street,
    parse_shipping_address,
)
from storematch.types import CandidateRecord, ExtractedFields


class TestParseShippingAddress:
    """Tests for the tolerant ShippingAddress parser."""

    def test_mapping_passthrough(self):
        assert parse_shipping_address({"street": "1 Elm St"}) == {"street": "1 Elm St"}

    def test_strict_json(self):
        value = '{"street": "1 Elm St", "city": "Metro", "geocodeAccuracy": null}'
        assert parse_shipping_address(value) == {
            "street": "1 Elm St",
            "city": "Metro",
            "geocodeAccuracy": None,
        }

    def test_python_dict_repr(self):
        value = "{'street': '12 Bay Rd', 'country': None, 'verified': True}"
        assert parse_shipping_address(value) == {
            "street": "12 Bay Rd",
            "country": None,
            "verified": True,
        }

    def test_single_quotes_with_json_literals(self):
        value = "{'street': '5 Main St', 'zip': null, 'active': false}"
        assert parse_shipping_address(value) == {
            "street": "5 Main St",
            "zip": None,
            "active": False,
        }

    def test_apostrophe_in_value(self):
        value = "{'street': \"1 O'Hare Dr\", 'city': 'Chicago'}"
        assert parse_shipping_address(value)["street"] == "1 O'Hare Dr"

    @pytest.mark.parametrize("value", [None, "", "   ", "not a dict {", "123", "['a', 'b']", 42])
    def test_unparseable_returns_none(self, value):
        assert parse_shipping_address(value) is None


class TestLooksLikeStreet:

    @pytest.mark.parametrize("text", ["456 Oak", "Main St", "Harbor Way", "Pine Court", "OAK AVE"])
    def test_street_like(self, text):
        assert looks_like_street(text) is True

    @pytest.mark.parametrize("text", ["Downtown", "Westside", "Oakland / San Pablo", "Midtown East"])
    def test_not_street_like(self, text):
        assert looks_like_street(text) is False

    def test_custom_tokens(self):
        config = ExtractionConfig(street_tokens=("pkwy",))
        assert looks_like_street("Lakeview Pkwy", config) is True
        assert looks_like_street("Main St", config) is False

    def test_token_pattern_compiled_once_per_token_set(self):
        looks_like_street("Downtown")
        misses = _street_token_pattern.cache_info().misses
        looks_like_street("Uptown")
        looks_like_street("Midtown")

        assert _street_token_pattern.cache_info().misses == misses

    def test_list_tokens_accepted(self):
        config = ExtractionConfig(street_tokens=["pkwy"])
        assert looks_like_street("Lakeview Pkwy", config) is True


class TestExtractFields:

    def test_street_from_name(self):
        record = CandidateRecord(name="Acme Storage - 456 Oak Ave", shipping_address=None)
        assert extract_fields(record) == ExtractedFields(brand="Acme Storage", street="456 Oak Ave")

    def test_name_rest_without_street_signal(self):
        record = CandidateRecord(name="Acme Storage - Downtown", shipping_address=None)
        assert extract_fields(record) is None

    def test_loose_dialect_address(self):
        record = CandidateRecord(
            name="X",
            shipping_address="{'street': '789 Pine Rd', 'city': 'Metro'}",
        )
        assert extract_fields(record) == ExtractedFields(brand="X", street="789 Pine Rd")

    def test_shipping_address_preferred_over_name(self):
        record = CandidateRecord(
            name="SecureSpace - 16017 SE Division St",
            shipping_address={"street": "16017 SE Division Street"},
        )
        fields = extract_fields(record)
        assert fields.brand == "SecureSpace"
        assert fields.street == "16017 SE Division Street"

    def test_malformed_address_falls_back_to_name(self):
        record = CandidateRecord(name="Brand - 22 River Rd", shipping_address="{'street': ")
        assert extract_fields(record) == ExtractedFields(brand="Brand", street="22 River Rd")

    def test_blank_street_falls_back_to_name(self):
        record = CandidateRecord(name="Brand - 22 River Rd", shipping_address={"street": "  "})
        assert extract_fields(record).street == "22 River Rd"

    def test_non_string_street_ignored(self):
        record = CandidateRecord(name="Brand", shipping_address={"street": 12})
        assert extract_fields(record) is None

    def test_only_first_separator_splits(self):
        record = CandidateRecord(name="StorQuest - 2227 San Pablo Ave - Oakland")
        fields = extract_fields(record)
        assert fields.brand == "StorQuest"
        assert fields.street == "2227 San Pablo Ave - Oakland"

    def test_no_separator_no_address(self):
        assert extract_fields(CandidateRecord(name="Acme Storage 456 Oak Ave")) is None

    def test_brand_is_full_name_without_separator(self):
        record = CandidateRecord(name="Acme Storage", shipping_address={"street": "1 Elm St"})
        assert extract_fields(record).brand == "Acme Storage"

    def test_missing_name(self):
        record = CandidateRecord(name=None, shipping_address={"street": "1 Elm St"})
        assert extract_fields(record) == ExtractedFields(brand="", street="1 Elm St")
