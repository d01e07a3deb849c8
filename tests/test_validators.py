import pytest

from app.errors import ErrorKind, ForecastError
from app.services.validators import extract_zip, is_valid_zip, require_address, zip_from_address


class TestExtractZip:
    def test_five_digit(self):
        assert extract_zip("123 Main St, Beverly Hills, CA 90210") == "90210"

    def test_keeps_plus_four(self):
        assert extract_zip("1 Infinite Loop, Cupertino, CA 95014-2083") == "95014-2083"

    def test_first_match_wins(self):
        assert extract_zip("PO Box 12345, Springfield 62701") == "12345"

    def test_no_zip(self):
        assert extract_zip("Invalid Address Without ZIP") is None

    def test_four_digits_is_not_a_zip(self):
        assert extract_zip("123 Main St, City, ST 1234") is None

    def test_six_digit_run_is_not_a_zip(self):
        assert extract_zip("Order 902101") is None

    def test_none_and_empty(self):
        assert extract_zip(None) is None
        assert extract_zip("") is None


class TestIsValidZip:
    @pytest.mark.parametrize("candidate", ["90210", "12345-6789"])
    def test_accepts(self, candidate):
        assert is_valid_zip(candidate)

    @pytest.mark.parametrize(
        "candidate",
        [None, "", "1234", "123456", "12345-678", "12345 6789", " 90210", "90210 ", "90210\n", "CA 90210"],
    )
    def test_rejects(self, candidate):
        assert not is_valid_zip(candidate)


def test_require_address_strips():
    assert require_address("  123 Main St 90210 ") == "123 Main St 90210"


@pytest.mark.parametrize("address", [None, "", "   "])
def test_require_address_missing(address):
    with pytest.raises(ForecastError) as exc:
        require_address(address)
    assert exc.value.kind is ErrorKind.MISSING_ADDRESS


def test_zip_from_address_invalid():
    with pytest.raises(ForecastError) as exc:
        zip_from_address("Invalid Address Without ZIP")
    assert exc.value.kind is ErrorKind.INVALID_ZIP_CODE
    assert exc.value.status_code == 422


@pytest.mark.parametrize(
    "address",
    [
        "1 Main St, Town, CA ٩٠٢١٠",  # Arabic-Indic digits
        "1 Main St, Town, CA ９０２１０",  # fullwidth digits
        "1 Main St, Town, CA १२३४५",  # Devanagari digits
    ],
)
def test_non_ascii_digits_are_not_a_zip(address):
    assert extract_zip(address) is None
    with pytest.raises(ForecastError) as exc:
        zip_from_address(address)
    assert exc.value.kind is ErrorKind.INVALID_ZIP_CODE


@pytest.mark.parametrize("candidate", ["９０２１０", "90210-١٢٣٤"])
def test_is_valid_zip_rejects_non_ascii_digits(candidate):
    assert not is_valid_zip(candidate)
