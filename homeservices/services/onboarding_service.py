"""Occupations and provider profiles: how a user becomes a partner."""
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from homeservices.core.errors import OccupationNotFound, ProfileAlreadyExists, ProfileNotFound
from homeservices.core.policy import Actor, require_authenticated, require_role
from homeservices.db.models.provider import Occupation, ProviderProfile
from homeservices.db.models.user import Role, User

logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    "occupation_id",
    "business_name",
    "business_address",
    "phone_number",
    "experience",
    "skills",
    "certifications",
    "bio",
)


class OccupationService:
    def __init__(self, db: Session):
        self.db = db

    def list_active(self) -> List[Occupation]:
        return self.db.query(Occupation).filter(Occupation.is_active.is_(True)).order_by(Occupation.name).all()

    def list_all(self, actor: Actor) -> List[Occupation]:
        require_role(actor, Role.ADMIN)
        return self.db.query(Occupation).order_by(Occupation.id).all()

    def get(self, actor: Actor, occupation_id: int) -> Occupation:
        require_role(actor, Role.ADMIN)
        return self._get(occupation_id)

    def _get(self, occupation_id: int) -> Occupation:
        occupation = self.db.query(Occupation).filter(Occupation.id == occupation_id).first()
        if not occupation:
            raise OccupationNotFound()
        return occupation

    def create(self, actor: Actor, name: str, description: Optional[str] = None,
               is_active: bool = True) -> Occupation:
        require_role(actor, Role.ADMIN)
        occupation = Occupation(name=name, description=description, is_active=is_active)
        self.db.add(occupation)
        self.db.commit()
        self.db.refresh(occupation)
        return occupation

    def update(self, actor: Actor, occupation_id: int, changes: dict) -> Occupation:
        require_role(actor, Role.ADMIN)
        occupation = self._get(occupation_id)
        for field in ("name", "description", "is_active"):
            if field in changes:
                setattr(occupation, field, changes[field])
        self.db.commit()
        self.db.refresh(occupation)
        return occupation

    def delete(self, actor: Actor, occupation_id: int) -> None:
        require_role(actor, Role.ADMIN)
        occupation = self._get(occupation_id)
        self.db.delete(occupation)
        self.db.commit()


class ProviderProfileService:
    def __init__(self, db: Session):
        self.db = db

    def get_for_user(self, user_id: int) -> Optional[ProviderProfile]:
        return self.db.query(ProviderProfile).filter(ProviderProfile.user_id == user_id).first()

    def my_profile(self, actor: Actor) -> ProviderProfile:
        actor = require_authenticated(actor)
        profile = self.get_for_user(actor.user_id)
        if not profile:
            raise ProfileNotFound()
        return profile

    def _check_occupation(self, occupation_id: Optional[int]) -> None:
        if occupation_id is not None and not self.db.query(Occupation).filter(Occupation.id == occupation_id).first():
            raise OccupationNotFound()

    def create(self, actor: Actor, data: dict) -> ProviderProfile:
        actor = require_authenticated(actor)
        if self.get_for_user(actor.user_id):
            raise ProfileAlreadyExists()
        self._check_occupation(data.get("occupation_id"))

        profile = ProviderProfile(user_id=actor.user_id, **{k: v for k, v in data.items() if k in PROFILE_FIELDS})
        self.db.add(profile)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ProfileAlreadyExists() from e
        self.db.refresh(profile)
        logger.info(f"📝 Provider profile {profile.id} created for user {actor.user_id}")
        return profile

    def update(self, actor: Actor, changes: dict) -> ProviderProfile:
        profile = self.my_profile(actor)
        if "occupation_id" in changes:
            self._check_occupation(changes["occupation_id"])
        for field, value in changes.items():
            if field in PROFILE_FIELDS:
                setattr(profile, field, value)
        self.db.commit()
        self.db.refresh(profile)
        return profile

    def list_all(self, actor: Actor) -> List[ProviderProfile]:
        require_role(actor, Role.ADMIN)
        return self.db.query(ProviderProfile).order_by(ProviderProfile.id).all()

    def verify_and_promote(self, actor: Actor, profile_id: int) -> ProviderProfile:
        """Mark the profile verified and make its user a partner, in one commit."""
        require_role(actor, Role.ADMIN)
        profile = self.db.query(ProviderProfile).filter(ProviderProfile.id == profile_id).first()
        if not profile:
            raise ProfileNotFound()

        user = self.db.query(User).filter(User.id == profile.user_id).first()
        profile.is_verified = True
        # never demote an admin who also runs a profile
        if user is not None and user.role != Role.ADMIN:
            user.role = Role.PARTNER
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(profile)
        logger.info(f"🛡️ Admin {actor.user_id} verified profile {profile.id}; user {profile.user_id} is a partner")
        return profile
