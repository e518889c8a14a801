"""Shared pytest fixtures for sizingkit tests."""
import pytest
import pandas as pd
import numpy as np

from sizingkit.core.models import PositionSizeRequest
from sizingkit.data.bars import clear_bar_cache


@pytest.fixture(autouse=True)
def empty_bar_cache():
    """Each test starts without cached price history."""
    clear_bar_cache()
    yield
    clear_bar_cache()


@pytest.fixture
def sample_ohlcv_data():
    """Provide sample OHLCV data for testing indicators."""
    np.random.seed(42)
    dates = pd.date_range(start='2023-01-01', periods=100, freq='D')

    # Generate realistic price data with random walk
    base_price = 100.0
    prices = [base_price]

    for _ in range(99):
        change = prices[-1] * 0.02 * (2 * (np.random.random() - 0.5))
        prices.append(max(prices[-1] + change, 1.0))

    return pd.DataFrame({
        'date': dates,
        'open': [p * (1 + np.random.uniform(-0.01, 0.01)) for p in prices],
        'high': [p * (1 + np.random.uniform(0, 0.02)) for p in prices],
        'low': [p * (1 - np.random.uniform(0, 0.02)) for p in prices],
        'close': prices,
        'volume': [1000000 + np.random.randint(-100000, 100000) for _ in range(100)]
    })


@pytest.fixture
def rising_bars():
    """Steadily rising bars: high = close + 1, low = close - 1."""
    closes = [50.0 + 2 * i for i in range(21)]
    return pd.DataFrame({
        'high': [c + 1 for c in closes],
        'low': [c - 1 for c in closes],
        'close': closes,
    })


@pytest.fixture
def bars_csv(tmp_path, sample_ohlcv_data):
    """Write the sample OHLCV data to a CSV file."""
    path = tmp_path / "bars.csv"
    sample_ohlcv_data.to_csv(path, index=False)
    return path


@pytest.fixture
def base_request():
    """A long trade: $100k portfolio, entry $50, stop $48, 2% risk."""
    return PositionSizeRequest(
        portfolio_value=100000,
        entry_price=50.0,
        stop_loss=48.0,
        risk_percent=0.02,
    )
