"""Domain tests for principals, role rules and bearer tokens."""

from datetime import UTC, datetime, timedelta
from types import SimpleNamespace

import jwt
import pytest
from ordering.access.principal import (
    Principal,
    Role,
    require_admin,
    require_chef_scope,
    require_order_reader,
)
from ordering.access.tokens import decode_token, encode_token
from ordering.exceptions import AuthenticationError, AuthorizationError
from ordering.utils import settings


class TestPrincipal:
    def test_from_actor_defaults_to_user(self):
        principal = Principal.from_actor("rina@example.com")
        assert principal.role == Role.USER
        assert principal.chef_id is None

    def test_actor_round_trip(self, chef):
        assert Principal.from_actor(**{k.removeprefix("actor_"): v for k, v in chef.as_actor().items()}) == chef

    def test_owns_kitchen(self, chef, admin):
        assert chef.owns_kitchen("chef-1")
        assert not chef.owns_kitchen("chef-2")
        assert not admin.owns_kitchen("chef-1")


class TestRoleRules:
    def test_require_admin(self, admin, customer):
        require_admin(admin)
        with pytest.raises(AuthorizationError):
            require_admin(customer)

    def test_chef_scope(self, chef, other_chef, admin):
        require_chef_scope(chef, "chef-1")
        require_chef_scope(admin, "chef-1")
        with pytest.raises(AuthorizationError):
            require_chef_scope(other_chef, "chef-1")

    def test_order_reader(self, customer, other_customer, chef, other_chef, admin):
        order = SimpleNamespace(owner_email=customer.email, items=[SimpleNamespace(chef_id="chef-1")])
        for principal in (customer, chef, admin):
            require_order_reader(principal, order)
        for principal in (other_customer, other_chef):
            with pytest.raises(AuthorizationError):
                require_order_reader(principal, order)

    def test_any_chef_on_a_mixed_order_may_read_it(self, customer, chef, other_chef):
        order = SimpleNamespace(
            owner_email=customer.email, items=[SimpleNamespace(chef_id="chef-1"), SimpleNamespace(chef_id="chef-2")]
        )
        for principal in (chef, other_chef):
            require_order_reader(principal, order)


class TestTokens:
    def test_round_trip(self):
        token = encode_token("chef.one@example.com", role="chef", chef_id="chef-1")
        principal = decode_token(token)

        assert principal == Principal(email="chef.one@example.com", role=Role.CHEF, chef_id="chef-1")

    def test_role_defaults_to_user(self):
        claims = {"email": "rina@example.com", "exp": datetime.now(UTC) + timedelta(minutes=5)}
        token = jwt.encode(claims, settings.AUTH_TOKEN_SECRET, algorithm=settings.AUTH_TOKEN_ALGORITHM)
        assert decode_token(token).role == Role.USER

    def test_expired_token_rejected(self):
        token = encode_token("rina@example.com", ttl_minutes=-1)
        with pytest.raises(AuthenticationError):
            decode_token(token)

    def test_wrong_signature_rejected(self):
        claims = {"email": "rina@example.com", "exp": datetime.now(UTC) + timedelta(minutes=5)}
        token = jwt.encode(claims, "some-other-secret-of-decent-length", algorithm="HS256")
        with pytest.raises(AuthenticationError):
            decode_token(token)

    def test_garbage_rejected(self):
        with pytest.raises(AuthenticationError):
            decode_token("not-a-token")

    def test_unknown_role_rejected(self):
        token = encode_token("rina@example.com", role="superuser")
        with pytest.raises(AuthenticationError):
            decode_token(token)

    def test_chef_without_chef_id_rejected(self):
        token = encode_token("chef@example.com", role="chef")
        with pytest.raises(AuthenticationError):
            decode_token(token)
