import os

import pytest

# Test layer directory -> marker applied to everything collected under it
_LAYER_MARKERS = {
    "domain": pytest.mark.domain,
    "application": pytest.mark.application,
    "integration": pytest.mark.integration,
    "bdd": pytest.mark.bdd,
}


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Protean config overlay to run the bakery tests against",
    )


def pytest_sessionstart(session):
    """Select the config overlay before any bakery domain is imported.

    Each context's conftest builds and tears down its own DomainFixture.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    for item in items:
        layer = next((part for part in item.path.parts if part in _LAYER_MARKERS), None)
        if layer is None:
            continue
        item.add_marker(_LAYER_MARKERS[layer])
        if layer == "integration" and not any(m.name == "fast" for m in item.iter_markers()):
            item.add_marker(pytest.mark.slow)
