from part_weight.models import Stage
from part_weight.packages import (
    PACKAGE_CODES,
    TYPICAL_PACKAGE_MASS_G,
    detect_package_code,
    infer_weight_expression,
)
from part_weight.units import canonicalize, convert_to_pounds


def test_every_code_has_a_calibrated_mass() -> None:
    assert set(PACKAGE_CODES) == set(TYPICAL_PACKAGE_MASS_G)
    assert all(mass > 0 for mass in TYPICAL_PACKAGE_MASS_G.values())


def test_bounded_code_in_description_is_detected() -> None:
    assert detect_package_code("Thick Film Resistors - SMD 1/10W 10Kohms 1% 0603") == "0603"


def test_bounded_match_beats_earlier_substring_match() -> None:
    assert detect_package_code("RC0402FR-07 size 0805") == "0805"


def test_substring_fallback_inside_part_number() -> None:
    assert detect_package_code("CRCW0805-1K") == "0805"


def test_list_order_decides_between_bounded_codes() -> None:
    assert detect_package_code("1206 or 0603") == "0603"


def test_unknown_text_has_no_package() -> None:
    assert detect_package_code("LM358DR Dual Op Amp") is None
    assert detect_package_code("") is None
    assert infer_weight_expression("LM358DR", None, "Dual Op Amp") is None


def test_detection_is_deterministic() -> None:
    text = "ERJ-3EKF1001V 1K 1% 0603 thick film"
    assert {detect_package_code(text) for _ in range(5)} == {"0603"}


def test_inferred_expression_normalizes_to_typical_mass() -> None:
    expression = infer_weight_expression("CRCW0805-1K", None, "  ")
    assert expression is not None
    assert expression.provenance is Stage.PACKAGE_INFERENCE
    assert expression.detail == "0805"

    weight = canonicalize(expression)
    assert weight is not None
    assert weight.value_lbs == convert_to_pounds(TYPICAL_PACKAGE_MASS_G["0805"], "g")
