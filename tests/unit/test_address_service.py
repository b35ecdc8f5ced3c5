"""Unit tests for UserAddressService."""

from __future__ import annotations

import pytest

from agristore.models.dtos import CreateAddressRequest, UpdateAddressRequest
from agristore.utils.exceptions import ValidationError

HOME = "1 Farm Road, Greenfield"
BARN = "2 Barn Street, Greenfield"


class TestAddresses:
    """Tests for address CRUD and the default flag."""

    def test_create_plain_address(self, services, customer) -> None:
        address = services.addresses.create(customer.id, CreateAddressRequest(address_line=HOME))

        assert address.is_default is False
        assert services.addresses.get_default_address(customer.id) is None

    def test_create_default_address(self, services, customer) -> None:
        address = services.addresses.create(customer.id, CreateAddressRequest(address_line=HOME, is_default=True))

        assert address.is_default is True
        assert services.addresses.get_default_address(customer.id).id == address.id

    def test_new_default_clears_previous(self, services, customer) -> None:
        first = services.addresses.create(customer.id, CreateAddressRequest(address_line=HOME, is_default=True))
        second = services.addresses.create(customer.id, CreateAddressRequest(address_line=BARN, is_default=True))

        flags = {a.id: a.is_default for a in services.addresses.get_addresses(customer.id)}
        assert flags == {first.id: False, second.id: True}

    def test_set_default_address(self, services, customer) -> None:
        first = services.addresses.create(customer.id, CreateAddressRequest(address_line=HOME, is_default=True))
        second = services.addresses.create(customer.id, CreateAddressRequest(address_line=BARN))

        assert services.addresses.set_default_address(customer.id, second.id)

        defaults = [a.id for a in services.addresses.get_addresses(customer.id) if a.is_default]
        assert defaults == [second.id]
        assert first.id not in defaults

    def test_set_default_without_addresses(self, services, customer) -> None:
        assert services.addresses.set_default_address(customer.id, 1) is False

    def test_default_of_other_user_is_not_checked(self, services, customer, other_customer) -> None:
        mine = services.addresses.create(customer.id, CreateAddressRequest(address_line=HOME, is_default=True))
        theirs = services.addresses.create(other_customer.id, CreateAddressRequest(address_line=BARN))

        assert services.addresses.set_default_address(customer.id, theirs.id)

        assert services.addresses.get_default_address(customer.id) is None
        assert services.addresses.get_address(mine.id).is_default is False

    def test_update_line_and_default(self, services, customer) -> None:
        address = services.addresses.create(customer.id, CreateAddressRequest(address_line=HOME))

        assert services.addresses.update(address.id, UpdateAddressRequest(address_line=BARN, is_default=True))

        stored = services.addresses.get_address(address.id)
        assert stored.address_line == BARN
        assert stored.is_default is True

    def test_update_missing(self, services) -> None:
        assert services.addresses.update(77, UpdateAddressRequest(address_line=BARN)) is False

    def test_delete_is_physical(self, services, customer) -> None:
        address = services.addresses.create(customer.id, CreateAddressRequest(address_line=HOME))

        assert services.addresses.delete(address.id)
        assert services.addresses.get_address(address.id) is None
        assert services.addresses.delete(address.id) is False

    def test_short_line_is_rejected(self, services, customer) -> None:
        with pytest.raises(ValidationError):
            services.addresses.create(customer.id, CreateAddressRequest(address_line="tiny"))
