"""Unit tests for ServiceResult."""

from ubiqa.interfaces.service_result import (
    UNKNOWN_ERROR_MESSAGE,
    ServiceErrorType,
    ServiceResult,
)

# pylint: disable=magic-value-comparison


class TestServiceResult:
    """Tests for the ServiceResult container."""

    @staticmethod
    def test_success():
        """A success carries its data."""
        result = ServiceResult.success(3)
        assert result.is_success and not result.is_failure
        assert result.data == 3
        assert result.error_type is None

    @staticmethod
    def test_failure_defaults_to_unknown():
        """A failure without a type is UNKNOWN."""
        result = ServiceResult.failure("Boom")
        assert result.is_failure
        assert result.error_type is ServiceErrorType.UNKNOWN
        assert result.message() == "Boom"

    @staticmethod
    def test_message_fallback():
        """An empty message falls back to a generic one."""
        assert ServiceResult(False).message() == UNKNOWN_ERROR_MESSAGE

    @staticmethod
    def test_map_and_then():
        """map and then transform successes and pass failures through."""
        doubled = ServiceResult.success(21).map(lambda n: n * 2)
        assert doubled.data == 42
        chained = doubled.then(lambda n: ServiceResult.success(str(n)))
        assert chained.data == "42"

        failed = ServiceResult.failure("offline", ServiceErrorType.NETWORK)
        assert failed.map(lambda n: n * 2) == failed
        assert failed.then(lambda n: ServiceResult.success(n)).error_type is (
            ServiceErrorType.NETWORK
        )


def test_transient_error_types():
    """Only network and availability problems are worth retrying."""
    transient = {t for t in ServiceErrorType if t.is_transient}
    assert transient == {ServiceErrorType.NETWORK, ServiceErrorType.SERVICE_UNAVAILABLE}
