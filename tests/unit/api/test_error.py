"""Unit tests for mapping use case errors to HTTP statuses"""

import pytest

from economy.api.error import ClientError, status_for
from economy.libs.result import Error


@pytest.mark.parametrize(
    "code, expected",
    [
        ("INSUFFICIENT_CREDITS", 402),
        ("INSUFFICIENT_POINTS", 402),
        ("ALREADY_PROCESSED", 409),
        ("REWARD_UNAVAILABLE", 409),
        ("PROMOTION_CONFLICT", 409),
        ("PROMOTION_NOT_FOUND", 404),
        ("PROMOTION_FORBIDDEN", 403),
        ("ADMIN_FORBIDDEN", 403),
        ("INVALID_DURATION", 400),
        ("UNKNOWN_CREDIT_PACKAGE", 400),
        ("PAYMENT_SYSTEM_UNAVAILABLE", 503),
        ("CREATE_BOOST_FAILED", 500),
        ("UNAUTHENTICATED", 401),
    ],
)
def test_status_for(code, expected):
    assert status_for(Error(code=code, message="x")) == expected


def test_explicit_status_overrides_mapping():
    error = ClientError(Error(code="INVALID_PAYLOAD", message="bad"), status_code=422)

    assert error.status_code == 422
    assert str(error) == "bad"
