import pytest
from ordering.access.principal import Principal, Role
from ordering.catalog import FakeCatalog, Meal, reset_catalog, set_catalog
from ordering.gateway import FakeGateway, reset_gateway, set_gateway
from protean.integrations.pytest import DomainFixture

MEALS = [
    Meal(meal_id="meal-biryani", name="Kacchi Biryani", price=150.0, chef_id="chef-1"),
    Meal(meal_id="meal-rezala", name="Mutton Rezala", price=250.0, chef_id="chef-1"),
    Meal(meal_id="meal-bhuna", name="Beef Bhuna", price=200.0, chef_id="chef-2"),
    Meal(meal_id="meal-pitha", name="Bhapa Pitha", price=45.5, chef_id="chef-2"),
    Meal(meal_id="meal-sold-out", name="Shorshe Ilish", price=400.0, chef_id="chef-1", available=False),
]


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def catalog():
    fake = FakeCatalog(MEALS)
    set_catalog(fake)
    yield fake
    reset_catalog()


@pytest.fixture(autouse=True)
def gateway():
    fake = FakeGateway()
    set_gateway(fake)
    yield fake
    reset_gateway()


@pytest.fixture()
def customer():
    return Principal(email="rina@example.com", role=Role.USER)


@pytest.fixture()
def other_customer():
    return Principal(email="tanvir@example.com", role=Role.USER)


@pytest.fixture()
def chef():
    return Principal(email="chef.one@example.com", role=Role.CHEF, chef_id="chef-1")


@pytest.fixture()
def other_chef():
    return Principal(email="chef.two@example.com", role=Role.CHEF, chef_id="chef-2")


@pytest.fixture()
def admin():
    return Principal(email="admin@example.com", role=Role.ADMIN)
