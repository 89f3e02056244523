import pytest
from httpx import ASGITransport, AsyncClient

from merchant_rules.main import create_app
from merchant_rules.repositories.rule_store import RuleStore
from merchant_rules.services.rules import RulesService
from merchant_rules.storage.memory import InMemoryKeyValueStore


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def rule_store(kv_store: InMemoryKeyValueStore) -> RuleStore:
    return RuleStore(kv_store)


@pytest.fixture
def rules_service(rule_store: RuleStore) -> RulesService:
    """Service configured like the mobile client: SMS text cut at 50 characters."""
    return RulesService(rule_store, truncation_limit=50)


@pytest.fixture
async def client(rules_service: RulesService):
    """Provide test client over an in-memory rules service."""
    app = create_app(service=rules_service)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
