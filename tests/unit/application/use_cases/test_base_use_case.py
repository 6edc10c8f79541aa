"""
Unit tests for base use case classes.
"""

import pytest

from billing.application.use_cases.base_use_case import AdminUseCase, QueryUseCase, UseCaseResult
from billing.domain.models.base import AccountContext, DomainException, ValidationError


class EchoUseCase(QueryUseCase[str, str]):
    async def _execute_business_logic(self, context, request):
        if request == "invalid":
            raise ValidationError("Bad request", "request")
        if request == "crash":
            raise RuntimeError("Unexpected")
        return f"{context.account_id}:{request}"


class AdminEchoUseCase(AdminUseCase, EchoUseCase):
    pass


class TestUseCaseResult:
    """Test cases for UseCaseResult."""

    def test_success_result(self):
        result = UseCaseResult.success_result("data", {"key": "value"})

        assert result.success
        assert result.data == "data"
        assert result.metadata == {"key": "value"}
        assert result.unwrap() == "data"

    def test_error_result(self):
        result = UseCaseResult.error_result("Something broke", "BROKEN")

        assert not result.success
        assert result.error_code == "BROKEN"
        with pytest.raises(DomainException, match="Something broke"):
            result.unwrap()

    def test_from_domain_exception(self):
        exc = ValidationError("Invalid input", "field")

        result = UseCaseResult.from_exception(exc)

        assert result.error == "Invalid input"
        assert result.error_code == "VALIDATION_ERROR"
        with pytest.raises(ValidationError):
            result.unwrap()

    def test_from_unknown_exception(self):
        result = UseCaseResult.from_exception(RuntimeError("Unexpected"))

        assert result.error_code == "UNKNOWN_ERROR"
        with pytest.raises(RuntimeError):
            result.unwrap()


class TestBaseUseCase:
    """Test cases for BaseUseCase.execute."""

    def setup_method(self):
        self.context = AccountContext("acct-1")

    @pytest.mark.asyncio
    async def test_execute_success(self):
        result = await EchoUseCase().execute(self.context, "hello")

        assert result.success
        assert result.data == "acct-1:hello"
        assert "execution_time_seconds" in result.metadata

    @pytest.mark.asyncio
    async def test_execute_domain_error(self):
        result = await EchoUseCase().execute(self.context, "invalid")

        assert not result.success
        assert result.error_code == "VALIDATION_ERROR"
        assert result.metadata["exception_type"] == "ValidationError"

    @pytest.mark.asyncio
    async def test_execute_unexpected_error(self):
        result = await EchoUseCase().execute(self.context, "crash")

        assert not result.success
        assert result.error_code == "UNKNOWN_ERROR"

    @pytest.mark.asyncio
    async def test_admin_required(self):
        result = await AdminEchoUseCase().execute(self.context, "hello")

        assert not result.success
        assert result.error_code == "PERMISSION_DENIED"

        admin = AccountContext("ops", roles=("admin",))
        result = await AdminEchoUseCase().execute(admin, "hello")
        assert result.success
