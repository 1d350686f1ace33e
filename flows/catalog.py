import logging
from database.db import db
from models.catalog import AVAILABILITY, CATEGORIES, DESCRIPTION_MAX_LENGTH, Service
from utils.errors import InvalidInput, NotFound

logger = logging.getLogger(__name__)


def _parse_price(value):
    if isinstance(value, bool):
        raise InvalidInput("Price must be a positive whole number")
    try:
        price = int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidInput("Price must be a positive whole number")
    if price <= 0:
        raise InvalidInput("Price must be a positive whole number")
    return price


def list_services(category=None, vendor_id=None):
    query = Service.query
    if category:
        query = query.filter_by(category=category)
    if vendor_id:
        query = query.filter_by(vendor_id=vendor_id)
    return query.order_by(Service.created_at.desc(), Service.id.desc()).all()


def get_service(service_id):
    service = db.session.get(Service, service_id)
    if not service:
        raise NotFound("Service not found")
    return service


def create_service(vendor, organization_name, category, price, description,
                   availability=None, photo=None):
    for value in (organization_name, category, description):
        if value is not None and not isinstance(value, str):
            raise InvalidInput("Organization name, category and description must be text")
    if not all([organization_name, category, description]) or price in (None, ""):
        raise InvalidInput("Organization name, category, price and description are required")
    if category not in CATEGORIES:
        raise InvalidInput(f"Invalid category: {category}")
    availability = availability or "Yes"
    if availability not in AVAILABILITY:
        raise InvalidInput("Availability must be Yes or No")
    description = description.strip()
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise InvalidInput(f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters")

    service = Service(
        organization_name=organization_name.strip(),
        category=category,
        price=_parse_price(price),
        availability=availability,
        description=description,
        vendor_id=vendor.id,
        vendor_name=vendor.name,
        photo=photo
    )
    db.session.add(service)
    db.session.commit()
    logger.info("Vendor %s listed service %s (id=%s)", vendor.id, service.organization_name, service.id)
    return service
