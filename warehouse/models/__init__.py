# Inventory
from warehouse.models.inventory.inventory_batch_models import InventoryBatch
from warehouse.models.inventory.inventory_transaction_models import InventoryTransaction
from warehouse.models.inventory.inventory_request_models import InventoryRequest, InventoryRequestItem
from warehouse.models.inventory.merchant_location_models import MerchantLocation

# Masters
from warehouse.models.masters.product_models import Product

# Users
from warehouse.models.users.user_models import User

# Support
from warehouse.models.support.activity_models import UserActivity
from warehouse.models.support.app_state_models import AppState

# Orders
from warehouse.models.orders.order_models import Order
