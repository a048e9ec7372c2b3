# Orders
from fabtrack.models.orders.order_models import OrderDocument

# Users and sessions
from fabtrack.models.users.user_models import AdminCredential, UserSession

# Support
from fabtrack.models.support.activity_models import OrderActivity
