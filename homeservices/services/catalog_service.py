import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from homeservices.core.errors import CategoryNotFound, NotFound, ServiceNotFound
from homeservices.core.policy import Actor, require_role
from homeservices.db.models.category import ServiceCategory, ServiceType
from homeservices.db.models.service import Service
from homeservices.db.models.user import Role

logger = logging.getLogger(__name__)

SERVICE_FIELDS = (
    "name",
    "description",
    "price",
    "service_type",
    "category_id",
    "service_type_id",
    "duration_minutes",
    "availability",
    "time_slots",
)


class CatalogService:
    def __init__(self, db: Session):
        self.db = db

    # -------------------------
    # Categories & types
    # -------------------------
    def list_categories(self) -> List[ServiceCategory]:
        return self.db.query(ServiceCategory).order_by(ServiceCategory.id.desc()).all()

    def get_category(self, category_id: int) -> ServiceCategory:
        category = self.db.query(ServiceCategory).filter(ServiceCategory.id == category_id).first()
        if not category:
            raise CategoryNotFound()
        return category

    def create_category(self, actor: Actor, name: str, description: Optional[str] = None,
                        emoji: Optional[str] = None) -> ServiceCategory:
        require_role(actor, Role.ADMIN)
        category = ServiceCategory(name=name, description=description, emoji=emoji)
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    def list_types(self, category_id: int) -> List[ServiceType]:
        self.get_category(category_id)
        return (
            self.db.query(ServiceType)
            .filter(ServiceType.category_id == category_id)
            .order_by(ServiceType.id.desc())
            .all()
        )

    def create_type(self, actor: Actor, category_id: int, name: str,
                    description: Optional[str] = None) -> ServiceType:
        require_role(actor, Role.ADMIN)
        self.get_category(category_id)
        service_type = ServiceType(category_id=category_id, name=name, description=description)
        self.db.add(service_type)
        self.db.commit()
        self.db.refresh(service_type)
        return service_type

    # -------------------------
    # Services (public + admin)
    # -------------------------
    def list_services(self, limit: int = 50, offset: int = 0, category_id: Optional[int] = None,
                      service_type_id: Optional[int] = None) -> List[Service]:
        q = self.db.query(Service).filter(Service.availability.is_(True))
        if category_id:
            q = q.filter(Service.category_id == category_id)
        if service_type_id:
            q = q.filter(Service.service_type_id == service_type_id)
        return q.order_by(Service.id).offset(offset).limit(limit).all()

    def get_service(self, service_id: int) -> Service:
        service = self.db.query(Service).filter(Service.id == service_id).first()
        if not service or not service.availability:
            raise ServiceNotFound()
        return service

    def services_by_type(self, service_type_id: int) -> List[Service]:
        if not self.db.query(ServiceType).filter(ServiceType.id == service_type_id).first():
            raise NotFound("Service type not found")
        return (
            self.db.query(Service)
            .filter(Service.service_type_id == service_type_id, Service.availability.is_(True))
            .all()
        )

    def _create_service(self, provider_id: Optional[int], data: dict) -> Service:
        service = Service(provider_id=provider_id, **{k: v for k, v in data.items() if k in SERVICE_FIELDS})
        self.db.add(service)
        self.db.commit()
        self.db.refresh(service)
        return service

    def create_catalog_service(self, actor: Actor, data: dict) -> Service:
        require_role(actor, Role.ADMIN)
        service = self._create_service(None, data)
        logger.info(f"🗂️ Admin {actor.user_id} created catalog service {service.id}")
        return service

    # -------------------------
    # Partner-owned services
    # -------------------------
    def list_partner_services(self, actor: Actor) -> List[Service]:
        actor = require_role(actor, Role.PARTNER)
        return (
            self.db.query(Service)
            .filter(Service.provider_id == actor.user_id)
            .order_by(Service.created_at.desc(), Service.id.desc())
            .all()
        )

    def create_partner_service(self, actor: Actor, data: dict) -> Service:
        actor = require_role(actor, Role.PARTNER)
        service = self._create_service(actor.user_id, data)
        logger.info(f"🧰 Partner {actor.user_id} created service {service.id}")
        return service

    def _partner_service(self, actor: Actor, service_id: int) -> Service:
        # not-owned answers like not-found so other partners' ids stay hidden
        service = self.db.query(Service).filter(Service.id == service_id).first()
        if not service or service.provider_id != actor.user_id:
            raise ServiceNotFound("Service not found or you don't have permission")
        return service

    def update_partner_service(self, actor: Actor, service_id: int, changes: dict) -> Service:
        actor = require_role(actor, Role.PARTNER)
        service = self._partner_service(actor, service_id)
        for field, value in changes.items():
            if field in SERVICE_FIELDS:
                setattr(service, field, value)
        self.db.commit()
        self.db.refresh(service)
        return service

    def delete_partner_service(self, actor: Actor, service_id: int) -> Service:
        # soft delete: bookings keep pointing at the service
        actor = require_role(actor, Role.PARTNER)
        service = self._partner_service(actor, service_id)
        service.availability = False
        self.db.commit()
        self.db.refresh(service)
        logger.info(f"🗑️ Partner {actor.user_id} deactivated service {service_id}")
        return service
