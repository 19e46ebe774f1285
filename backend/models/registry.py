# backend/models/registry.py
# Imports every model so Base.metadata is complete for create_all and Alembic
from models.product import Product, Variant, Category, Collection  # noqa: F401
from models.customer import Customer  # noqa: F401
from models.order import Order, OrderItem, OrderNote, OrderEvent  # noqa: F401
from models.stock import InventoryAdjustment  # noqa: F401
from models.promotion import Promotion  # noqa: F401
from models.log import AuditLog  # noqa: F401
from models.setting import Setting  # noqa: F401
from models.users import AdminUser  # noqa: F401
from models.marketing import Campaign, AutomationTemplate, AutomationSend  # noqa: F401
from models.review import Review, WaitlistEntry  # noqa: F401
