"""Unit tests for per-model pricing."""

import pytest

from duologue.providers.pricing import PRICING, calculate_cost


class TestCalculateCost:
    """Tests for calculate_cost."""

    def test_known_model(self) -> None:
        """Cost is USD per million tokens, input and output priced separately."""
        assert calculate_cost("claude-sonnet-4-20250514", 1_000_000, 1_000_000) == pytest.approx(18.0)

    def test_partial_million(self) -> None:
        assert calculate_cost("gpt-4o", 1000, 500) == pytest.approx(0.0075)

    @pytest.mark.parametrize("model", ["unknown-model", "", None])
    def test_unknown_model_is_free(self, model: str | None) -> None:
        """Unknown models never break cost accounting."""
        assert calculate_cost(model, 1000, 1000) == 0.0

    def test_zero_tokens(self) -> None:
        assert calculate_cost("gpt-4", 0, 0) == 0.0

    def test_every_model_priced(self) -> None:
        """Each entry has input and output prices."""
        for model, prices in PRICING.items():
            assert set(prices) == {"input", "output"}, model
