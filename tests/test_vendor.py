import pytest

from part_weight.errors import VendorUnavailable
from part_weight.models import Stage
from part_weight.vendor import (
    VendorAttribute,
    VendorRecord,
    extract_weight_expression,
    normalize_attributes,
    parse_search_payload,
    select_record,
)

ATTRIBUTES = [
    {"AttributeName": "Packaging", "AttributeValue": "Reel"},
    {"AttributeName": "Unit Weight", "AttributeValue": "5.500 mg"},
]


def _part(**extra) -> dict:
    part = {
        "Description": "Thick Film Resistors - SMD 1/8Watt 1Kohms 1% 0805",
        "Manufacturer": "Vishay / Dale",
        "ManufacturerPartNumber": "CRCW08051K00FKEA",
        "MouserPartNumber": "71-CRCW0805-1K",
        "ProductDetailUrl": "https://www.mouser.com/ProductDetail/71-CRCW0805-1K",
        "DataSheetUrl": "https://www.vishay.com/docs/20035/dcrcwe3.pdf",
    }
    part.update(extra)
    return part


def test_record_reads_metadata_fields() -> None:
    record = VendorRecord.from_payload(_part(ProductAttributes=ATTRIBUTES))
    meta = record.metadata()
    assert meta.manufacturer == "Vishay / Dale"
    assert meta.vendor_part_number == "71-CRCW0805-1K"
    assert meta.datasheet_url.endswith(".pdf")
    assert len(record.attributes) == 2


def test_flat_and_nested_attribute_shapes_normalize_the_same() -> None:
    flat = normalize_attributes({"ProductAttributes": ATTRIBUTES})
    nested = normalize_attributes({"ProductAttributes": {"ProductAttribute": ATTRIBUTES}})
    assert flat == nested
    assert flat[1] == VendorAttribute(name="Unit Weight", value="5.500 mg")


def test_missing_or_odd_attribute_collections_are_empty() -> None:
    assert normalize_attributes({}) == []
    assert normalize_attributes({"ProductAttributes": "none"}) == []
    assert normalize_attributes({"ProductAttributes": [None, {"AttributeName": "Weight"}]}) == []


def test_attribute_priority_follows_pattern_not_position() -> None:
    record = VendorRecord(
        attributes=(
            VendorAttribute("Weight", "2 g"),
            VendorAttribute("Net Weight", "1.5 g"),
            VendorAttribute("Unit Weight", "5.500 mg"),
        )
    )
    expression = extract_weight_expression(record)
    assert expression is not None
    assert expression.text == "5.500 mg"
    assert expression.provenance is Stage.NAMED_ATTRIBUTE
    assert expression.detail == "Unit Weight"


def test_mass_attribute_is_last_resort() -> None:
    record = VendorRecord(attributes=(VendorAttribute("Packaging", "Reel"), VendorAttribute("Mass", "3 g")))
    expression = extract_weight_expression(record)
    assert expression is not None
    assert expression.detail == "Mass"


def test_direct_field_beats_attributes() -> None:
    record = VendorRecord.from_payload(_part(UnitWeight="1 g", ProductAttributes=ATTRIBUTES))
    expression = extract_weight_expression(record)
    assert expression is not None
    assert expression.provenance is Stage.DIRECT_FIELD
    assert expression.detail == "UnitWeight"
    assert expression.text == "1 g"


def test_empty_direct_field_is_skipped() -> None:
    record = VendorRecord.from_payload(_part(UnitWeight="  ", Weight="2 g"))
    expression = extract_weight_expression(record)
    assert expression is not None
    assert expression.detail == "Weight"


def test_numeric_kilogram_field_is_rendered_as_kg_expression() -> None:
    record = VendorRecord.from_payload(_part(UnitWeightKg={"UnitWeight": 0.0055}))
    expression = extract_weight_expression(record)
    assert expression is not None
    assert expression.text == "0.0055 kg"
    assert expression.detail == "UnitWeightKg"


def test_record_without_weight_data_yields_nothing() -> None:
    assert extract_weight_expression(VendorRecord.from_payload(_part())) is None


def test_parse_search_payload_reads_parts() -> None:
    payload = {"Errors": [], "SearchResults": {"NumberOfResult": 1, "Parts": [_part()]}}
    records = parse_search_payload(payload)
    assert len(records) == 1
    assert records[0].manufacturer_part_number == "CRCW08051K00FKEA"


def test_parse_search_payload_empty_results() -> None:
    assert parse_search_payload({"Errors": [], "SearchResults": {"NumberOfResult": 0, "Parts": []}}) == []
    assert parse_search_payload({"Errors": [], "SearchResults": None}) == []


def test_parse_search_payload_rejects_errors_and_bad_shapes() -> None:
    with pytest.raises(VendorUnavailable) as err:
        parse_search_payload({"Errors": [{"Code": "Invalid", "Message": "Invalid unique identifier."}]})
    assert err.value.details == ["Invalid unique identifier."]

    for payload in ([], "oops", {"Errors": []}, {"SearchResults": {"Parts": "x"}}, {"SearchResults": []}):
        with pytest.raises(VendorUnavailable):
            parse_search_payload(payload)


def test_select_record_prefers_exact_mpn_match() -> None:
    first = VendorRecord(manufacturer_part_number="CRCW08051K00FKEB")
    exact = VendorRecord(manufacturer_part_number="CRCW08051K00FKEA")
    assert select_record([first, exact], "crcw08051k00fkea") is exact
    assert select_record([first, exact], "CRCW0805-1K") is first
    assert select_record([], "anything") is None
