from typing import List, Optional

from agristore.models import mapping
from agristore.models.dtos import AddressDto, CreateAddressRequest, UpdateAddressRequest
from agristore.models.entities import UserAddress
from agristore.models.validation import ensure_valid, validate_create_address, validate_update_address
from agristore.repositories import UnitOfWork
from agristore.utils.logging import get_logger

log = get_logger(__name__)


class UserAddressService:
    """Addresses are hard deleted. At most one address per user is the default."""

    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    def get_addresses(self, user_id: int) -> List[AddressDto]:
        return [mapping.address_to_dto(a) for a in self.uow.addresses.get_by_user(user_id)]

    def get_address(self, address_id: int) -> Optional[AddressDto]:
        address = self.uow.addresses.get_by_id(address_id)
        return mapping.address_to_dto(address) if address else None

    def get_default_address(self, user_id: int) -> Optional[AddressDto]:
        address = self.uow.addresses.get_default(user_id)
        return mapping.address_to_dto(address) if address else None

    def create(self, user_id: int, dto: CreateAddressRequest) -> AddressDto:
        ensure_valid(validate_create_address(dto))
        address = self.uow.addresses.add(UserAddress(user_id=user_id, address_line=dto.address_line))
        if dto.is_default:
            self.set_default_address(user_id, address.id)
            address.is_default = True
        return mapping.address_to_dto(address)

    def update(self, address_id: int, dto: UpdateAddressRequest) -> bool:
        ensure_valid(validate_update_address(dto))
        address = self.uow.addresses.get_by_id(address_id)
        if address is None:
            return False
        if dto.address_line is not None:
            address.address_line = dto.address_line
            self.uow.addresses.update(address, "address_line")
        if dto.is_default is True:
            self.set_default_address(address.user_id, address.id)
        elif dto.is_default is False and address.is_default:
            address.is_default = False
            self.uow.addresses.update(address, "is_default")
        return True

    def delete(self, address_id: int) -> bool:
        address = self.uow.addresses.get_by_id(address_id)
        if address is None:
            return False
        return self.uow.addresses.delete(address)

    def set_default_address(self, user_id: int, address_id: int) -> bool:
        """
        Flag ``address_id`` as the user's default and clear every other flag,
        in one transaction. Ownership of ``address_id`` is not checked: when it
        belongs to someone else the user ends up with no default at all.
        Returns False when the user has no addresses.
        """
        with self.uow.transaction():
            addresses = self.uow.addresses.get_by_user(user_id)
            if not addresses:
                return False
            for address in addresses:
                address.is_default = address.id == address_id
                self.uow.addresses.update(address, "is_default")
        log.info("User %s default address -> %s", user_id, address_id)
        return True

    def get_owner_id(self, address_id: int) -> Optional[int]:
        address = self.uow.addresses.get_by_id(address_id)
        return address.user_id if address else None
