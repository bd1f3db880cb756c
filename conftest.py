import pytest
from prometheus_client import CollectorRegistry

from rngkit.generator import Generator
from rngkit.metrics import Metrics
from rngkit.source import use_source


@pytest.fixture
def metrics() -> Metrics:
    """Metrics bound to a private registry so counters start at zero."""
    return Metrics(registry=CollectorRegistry())


@pytest.fixture
def registry_value():
    """Read a sample from a Metrics instance's private registry."""

    def _value(m: Metrics, name: str, labels=None) -> float:
        v = m.registry.get_sample_value(name, labels or {})
        return 0.0 if v is None else v

    return _value


@pytest.fixture
def gen(metrics) -> Generator:
    return Generator(metrics=metrics)


@pytest.fixture
def make_gen(metrics):
    def _make(buffer_size=None, **kw) -> Generator:
        kw.setdefault("metrics", metrics)
        return Generator(buffer_size, **kw)

    return _make


@pytest.fixture(autouse=True)
def _restore_default_source():
    yield
    use_source(None)


@pytest.fixture(autouse=True)
def _reset_rngkit_logging():
    """Drop handlers installed by setup_logging (the CLI calls it) after each test."""
    import logging

    yield
    log = logging.getLogger("rngkit")
    for h in list(log.handlers):
        if getattr(h, "_rngkit_handler", False):
            log.removeHandler(h)
            h.close()
    log.setLevel(logging.NOTSET)
