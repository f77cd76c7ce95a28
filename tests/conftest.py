"""
pytest configuration and shared fixtures for emitforge tests.

Fixtures
--------
order_id_model : StrongIdModel
    Model of the ``OrderId`` strong identifier.

order_id_emission : CustomizableEmission
    Default emission built from ``order_id_model``.

project_dir : Path
    Temporary project with an ``emitforge.toml`` and no templates.
"""

from pathlib import Path

import pytest

from emitforge.emission import CustomizableEmission
from emitforge.emitters import build_emission
from emitforge.models import BackingType, StrongIdModel


SAMPLE_CONFIG = '''
templates_dir = "Templates"
template_extension = ".py.j2"

[[units]]
name = "order-id"
generator = "strong-id"
output = "src/shop/ids/order_id.py"

[units.model]
type_name = "OrderId"
module = "shop.ids"
backing_type = { code_name = "int", default = "0" }

[[units]]
name = "customer-id"
generator = "strong-id"
output = "src/shop/ids/customer_id.py"

[units.model]
type_name = "CustomerId"
module = "shop.ids"
backing_type = { code_name = "str", default = "''" }

[[units]]
name = "order-not-found"
generator = "error"
output = "src/shop/errors.py"

[units.model]
class_name = "OrderNotFound"
base_class = "LookupError"
message = "Order could not be found."
'''


@pytest.fixture
def order_id_model() -> StrongIdModel:
    return StrongIdModel(
        type_name="OrderId",
        module="shop.ids",
        backing_type=BackingType(code_name="int", default="0"),
    )


@pytest.fixture
def order_id_emission(order_id_model: StrongIdModel) -> CustomizableEmission:
    return build_emission("strong-id", order_id_model)


@pytest.fixture
def sample_config_text() -> str:
    return SAMPLE_CONFIG


@pytest.fixture
def sample_python_module() -> str:
    """Valid Python source for frontend tests."""
    return '''
"""A sample module."""


def hello(name: str = "World") -> str:
    """Return a greeting."""
    return f"Hello, {name}!"
'''


@pytest.fixture
def project_dir(tmp_path: Path, sample_config_text: str) -> Path:
    """
    Create a temporary project containing only ``emitforge.toml``.

    Returns
    -------
    Path
        The project root.
    """
    root = tmp_path / "project"
    root.mkdir()
    (root / "emitforge.toml").write_text(sample_config_text, encoding="utf-8")
    return root
