from typing import List

from sqlalchemy.orm import Session

from homeservices.core.errors import AddressNotFound
from homeservices.core.policy import Actor, require_authenticated
from homeservices.db.models.provider import Address

ADDRESS_FIELDS = (
    "street",
    "landmark",
    "apartment",
    "city",
    "state",
    "pin_code",
    "country",
    "latitude",
    "longitude",
    "is_default",
)


class AddressService:
    def __init__(self, db: Session):
        self.db = db

    def list_mine(self, actor: Actor) -> List[Address]:
        actor = require_authenticated(actor)
        return (
            self.db.query(Address)
            .filter(Address.user_id == actor.user_id)
            .order_by(Address.created_at.desc(), Address.id.desc())
            .all()
        )

    def _unset_default(self, user_id: int) -> None:
        self.db.query(Address).filter(Address.user_id == user_id).update(
            {Address.is_default: False}, synchronize_session="fetch"
        )

    def _mine(self, actor: Actor, address_id: int) -> Address:
        address = self.db.query(Address).filter(Address.id == address_id).first()
        if not address or address.user_id != actor.user_id:
            raise AddressNotFound()
        return address

    def create(self, actor: Actor, data: dict) -> Address:
        actor = require_authenticated(actor)
        if data.get("is_default"):
            self._unset_default(actor.user_id)
        address = Address(user_id=actor.user_id, **{k: v for k, v in data.items() if k in ADDRESS_FIELDS})
        self.db.add(address)
        self.db.commit()
        self.db.refresh(address)
        return address

    def update(self, actor: Actor, address_id: int, changes: dict) -> Address:
        actor = require_authenticated(actor)
        address = self._mine(actor, address_id)
        if changes.get("is_default"):
            self._unset_default(actor.user_id)
        for field, value in changes.items():
            if field in ADDRESS_FIELDS:
                setattr(address, field, value)
        self.db.commit()
        self.db.refresh(address)
        return address

    def delete(self, actor: Actor, address_id: int) -> None:
        actor = require_authenticated(actor)
        address = self._mine(actor, address_id)
        self.db.delete(address)
        self.db.commit()
