import pytest
from pydantic import BaseModel, ValidationError

from app.schemas.responses import APIResponse, ErrorResponse, HttpErrorResponse, PaginatedAPIResponse


class Item(BaseModel):
    id: int


class TestAPIResponse:
    def test_serializes_camel_case(self):
        response = APIResponse[Item](is_success=True, message="ok", data=Item(id=1))

        assert response.model_dump(by_alias=True) == {
            "isSuccess": True,
            "message": "ok",
            "data": {"id": 1},
        }

    def test_accepts_camel_case_input(self):
        response = APIResponse[Item].model_validate({"isSuccess": False, "message": "nope"})
        assert response.is_success is False
        assert response.data is None


class TestPaginatedAPIResponse:
    def test_page_fields(self):
        response = PaginatedAPIResponse[Item](
            is_success=True,
            message="ok",
            data=[Item(id=1), Item(id=2)],
            total=10,
            page=1,
            page_size=2,
        )

        dumped = response.model_dump(by_alias=True)
        assert dumped["pageSize"] == 2
        assert dumped["data"] == [{"id": 1}, {"id": 2}]

    def test_rejects_page_zero(self):
        with pytest.raises(ValidationError):
            PaginatedAPIResponse[Item](is_success=True, message="ok", data=[], total=0, page=0, page_size=10)


class TestErrorResponses:
    def test_error_response_is_never_successful(self):
        response = ErrorResponse(message="Quota exceeded", error_code="QUOTA")

        assert response.model_dump(by_alias=True)["isSuccess"] is False
        with pytest.raises(ValidationError):
            ErrorResponse(is_success=True, message="x")

    def test_http_error_response_matches_pipeline_body(self):
        body = {
            "statusCode": 500,
            "timestamp": "2024-05-01T12:00:00.123Z",
            "path": "/api/orders",
            "message": "MongoDB connection refused",
        }
        assert HttpErrorResponse.model_validate(body).statusCode == 500
