import pytest
from pricing.cart.cart import PricedCart
from pricing.conditions.condition import CartCondition
from pricing.config import PricingSettings
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def pricing_bed():
    from pricing.domain import pricing

    bed = DomainFixture(pricing)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(pricing_bed):
    with pricing_bed.domain_context():
        yield


@pytest.fixture()
def settings():
    return PricingSettings(environment="test", log_level="WARNING")


@pytest.fixture()
def cart(settings):
    return PricedCart(settings=settings)


@pytest.fixture()
def make_condition():
    """Factory for conditions that default to the cart subtotal."""

    def _make(name, value, target="cart@cart_subtotal/aggregate", order=0, condition_type="discount", **kwargs):
        return CartCondition(name, condition_type, target, value, order=order, **kwargs)

    return _make
