"""Scoped order reads. Results are newest first."""

from protean.utils.globals import current_domain

from ordering.access.principal import Principal, require_admin, require_chef_scope, require_order_reader
from ordering.order.order import Order
from ordering.utils.queries import fetch_all


def _newest_first(orders) -> list:
    return sorted(orders, key=lambda o: o.order_time, reverse=True)


def orders_for_owner(principal: Principal) -> list:
    return _newest_first(fetch_all(Order, owner_email=principal.email))


def orders_for_chef(principal: Principal, chef_id) -> list:
    require_chef_scope(principal, chef_id)
    chef_id = str(chef_id)
    return _newest_first(o for o in fetch_all(Order) if chef_id in o.chef_ids)


def all_orders(principal: Principal) -> list:
    require_admin(principal)
    return _newest_first(fetch_all(Order))


def order_detail(principal: Principal, order_id) -> Order:
    order = current_domain.repository_for(Order).get(order_id)
    require_order_reader(principal, order)
    return order
