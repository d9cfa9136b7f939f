"""Tests for PreconditionVerifier read-only checks."""

import pytest

from core.domain.errors import SimulationFailed
from core.domain.value_objects import Address
from core.infrastructure.chain import ContractRegistry
from core.application.services.precondition_verifier import PreconditionVerifier
from tests.conftest import ADMIN, OWNER, STRANGER, signer_overrides


@pytest.fixture
def verifier(chain, resolver):
    request = resolver.resolve(overrides=signer_overrides())
    return PreconditionVerifier(chain, ContractRegistry().build(request))


@pytest.mark.asyncio
async def test_is_owner_of(chain, verifier):
    chain.give_token(3, OWNER)

    assert await verifier.is_owner_of(3, Address(OWNER)) is True
    assert await verifier.is_owner_of(3, Address(STRANGER)) is False


@pytest.mark.asyncio
async def test_total_supply(chain, verifier):
    chain.give_token(1, OWNER)
    chain.give_token(2, OWNER)

    assert await verifier.total_supply() == 2


@pytest.mark.asyncio
async def test_total_supply_is_none_without_the_getter(chain, verifier, monkeypatch):
    original = chain.call_view

    async def call_view(binding, method, args=(), from_address=None):
        if method == "totalSupply":
            raise SimulationFailed("execution reverted without data", method)
        return await original(binding, method, args, from_address)

    monkeypatch.setattr(chain, "call_view", call_view)

    assert await verifier.total_supply() is None


@pytest.mark.asyncio
async def test_native_balance(chain, verifier):
    chain.native_balances[ADMIN] = 7

    assert await verifier.native_balance(Address(ADMIN)) == 7
    assert await verifier.native_balance(Address(OWNER)) == 10 ** 18


@pytest.mark.asyncio
async def test_contracts_deployed_lists_missing(chain, verifier):
    chain.undeploy(chain.wrapped_address)
    contracts = verifier.contracts

    result = await verifier.contracts_deployed(b.address for b in contracts.all())

    assert result["missing"] == [chain.wrapped_address]


@pytest.mark.asyncio
async def test_approval_for_all_counts(chain, verifier):
    chain.give_token(3, OWNER)
    chain.operators.add((OWNER, chain.wrapped_address))
    wrapped = Address(chain.wrapped_address)

    assert await verifier.is_approved_for_transfer(3, Address(OWNER), wrapped) is True
    assert await verifier.is_approved_for_transfer(3, Address(STRANGER), wrapped) is False
