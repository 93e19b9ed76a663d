import pytest

from mandelbrot.geometry import Bounds, Window


@pytest.fixture
def dyadic_bounds():
    # Pixel spacing of 3/64 and 1/16 keeps every mapped coordinate exact.
    return Bounds(64, 48)


@pytest.fixture
def dyadic_window():
    return Window(complex(-2.0, 1.5), complex(1.0, -1.5))


@pytest.fixture(autouse=True)
def skip_mlflow(monkeypatch):
    monkeypatch.setenv("SKIP_MLFLOW", "1")
