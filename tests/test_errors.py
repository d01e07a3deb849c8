from app.errors import MESSAGE_BY_KIND, STATUS_BY_KIND, ErrorKind, ForecastError


def test_every_kind_has_status_and_message():
    assert set(STATUS_BY_KIND) == set(ErrorKind)
    assert set(MESSAGE_BY_KIND) == set(ErrorKind)


def test_status_table():
    assert STATUS_BY_KIND[ErrorKind.MISSING_ADDRESS] == 400
    assert STATUS_BY_KIND[ErrorKind.INVALID_ZIP_CODE] == 422
    assert STATUS_BY_KIND[ErrorKind.UNAUTHORIZED] == 500
    assert STATUS_BY_KIND[ErrorKind.RATE_LIMITED] == 503
    assert STATUS_BY_KIND[ErrorKind.NOT_FOUND] == 404
    assert STATUS_BY_KIND[ErrorKind.UNREACHABLE] == 503


def test_detail_defaults_to_message_and_stays_private():
    err = ForecastError(ErrorKind.PERSISTENCE, "database is locked")
    assert err.detail == "database is locked"
    assert err.public_message == "An unexpected error occurred"
    assert ForecastError(ErrorKind.RATE_LIMITED).detail == "API rate limit exceeded"
