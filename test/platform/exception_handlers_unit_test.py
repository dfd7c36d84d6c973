from datetime import datetime, timezone

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    IntegrityViolationError,
    NotFoundError,
    ServiceUnavailableError,
)
from src.service.ticketing.domain.ticketing_error import TooEarlyError


class _Body(BaseModel):
    count: int


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get('/raise/{kind}')
    async def raise_error(kind: str) -> None:
        errors = {
            'domain': DomainError('bad input'),
            'missing': NotFoundError('nothing here'),
            'conflict': ConflictError('taken', details={'holder': 'someone'}),
            'integrity': IntegrityViolationError('broken row'),
            'unavailable': ServiceUnavailableError('try later'),
            'too_early': TooEarlyError(
                event_start=datetime(2026, 5, 14, 9, tzinfo=timezone.utc),
                opens_at=datetime(2026, 5, 14, 7, tzinfo=timezone.utc),
            ),
            'bug': ZeroDivisionError('division by zero'),
        }
        raise errors[kind]

    @app.post('/validate')
    async def validate(body: _Body) -> int:
        return body.count

    return TestClient(app, raise_server_exceptions=False)


@pytest.mark.unit
class TestExceptionHandlers:
    @pytest.mark.parametrize(
        'kind, status_code, code',
        [
            ('domain', 400, 'invalid_request'),
            ('missing', 404, 'not_found'),
            ('conflict', 409, 'conflict'),
            ('integrity', 500, 'integrity_error'),
            ('unavailable', 503, 'service_unavailable'),
        ],
    )
    def test_status_and_code(
        self, client: TestClient, kind: str, status_code: int, code: str
    ) -> None:
        response = client.get(f'/raise/{kind}')

        assert response.status_code == status_code
        assert response.json()['code'] == code

    def test_details_flattened_into_body(self, client: TestClient) -> None:
        response = client.get('/raise/conflict')

        assert response.json() == {'detail': 'taken', 'code': 'conflict', 'holder': 'someone'}

    def test_unavailable_asks_for_retry(self, client: TestClient) -> None:
        unavailable = client.get('/raise/unavailable')
        conflict = client.get('/raise/conflict')

        assert unavailable.headers['retry-after'] == '5'
        assert 'retry-after' not in conflict.headers

    def test_datetimes_serialized(self, client: TestClient) -> None:
        response = client.get('/raise/too_early')

        body = response.json()
        assert response.status_code == 409
        assert body['code'] == 'too_early'
        assert body['detail'] == 'Check-in not yet available'
        assert datetime.fromisoformat(body['event_start']) == datetime(
            2026, 5, 14, 9, tzinfo=timezone.utc
        )

    def test_validation_error_is_400(self, client: TestClient) -> None:
        response = client.post('/validate', json={'count': 'many'})

        assert response.status_code == 400
        body = response.json()
        assert body['code'] == 'invalid_input'
        assert body['detail'][0]['loc'] == ['body', 'count']

    def test_unhandled_error_hides_internals(self, client: TestClient) -> None:
        response = client.get('/raise/bug')

        assert response.status_code == 500
        assert response.json() == {'detail': 'Internal server error', 'code': 'internal_error'}
