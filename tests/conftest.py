"""Shared fixtures for dbchart tests."""

import pytest

from dbchart.core.defaults import default_values
from dbchart.generators.manifests import compose
from dbchart.resolver.config import resolve
from dbchart.resolver.names import derive
from dbchart.resolver.secrets import resolve_credentials


@pytest.fixture
def defaults():
    return default_values()


@pytest.fixture
def composed():
    """Compose documents for overrides, the way render() does after validation."""

    def _compose(overrides, instance="orders"):
        config = resolve(default_values(), overrides)
        source = resolve_credentials(config.credentials, config.external_secret_name)
        return compose(config, source, derive(instance))

    return _compose
