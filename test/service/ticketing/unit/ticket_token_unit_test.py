import pytest

from src.service.ticketing.domain.ticket_token import TokenGenerator


@pytest.mark.unit
class TestTokenGenerator:
    def test_generate__matches_token_shape(self) -> None:
        # Act
        token = TokenGenerator().generate(now_ms=1735689600000)

        # Assert
        prefix, millis, random_part = token.split('_')
        assert prefix == 'ticket'
        assert millis == '1735689600000'
        assert len(random_part) == 9
        assert random_part.isalnum() and random_part == random_part.lower()
        assert TokenGenerator.validate_syntax(token)

    def test_generate__tokens_are_unique(self) -> None:
        generator = TokenGenerator()

        tokens = {generator.generate(now_ms=1) for _ in range(2000)}

        assert len(tokens) == 2000

    @pytest.mark.parametrize(
        'token',
        [
            '',
            'ticket',
            'ticket_123',
            'ticket_abc_k3j9x2m1q',
            'ticket_123_K3J9X2M1Q',
            'ticket_123_k3j9x2m1',
            'ticket_123_k3j9x2m1qq',
            'TICKET_123_k3j9x2m1q',
            'ticket_123_k3j9x2m1q\n',
            ' ticket_123_k3j9x2m1q',
        ],
    )
    def test_validate_syntax__rejects_malformed(self, token: str) -> None:
        assert TokenGenerator.validate_syntax(token) is False

    def test_validate_syntax__rejects_non_string(self) -> None:
        assert TokenGenerator.validate_syntax(None) is False
        assert TokenGenerator.validate_syntax(12345) is False
