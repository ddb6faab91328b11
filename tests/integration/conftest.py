"""Fixtures for cross-domain integration tests.

Both domains are active: catalogue data is written inside its own context
while the ordering context stays current for the request under test.
"""

import pytest


@pytest.fixture(autouse=True)
def _ctx(catalogue_bed, ordering_bed):
    with catalogue_bed.domain_context():
        with ordering_bed.domain_context():
            yield
