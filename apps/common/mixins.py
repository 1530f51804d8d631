from rest_framework.permissions import AllowAny

from .drf_permissions import RoleBasedPermission, StaffWritePermission
from .throttling import CheckoutRateThrottle, DisplayBoardThrottle, TicketPollingThrottle


class PermissionMixin:
    permission_classes = [RoleBasedPermission]


class PublicReadMixin:
    permission_classes = [StaffWritePermission]


class PublicCheckoutMixin:
    permission_classes = [AllowAny]
    throttle_classes = [CheckoutRateThrottle]


class PublicTicketMixin:
    permission_classes = [AllowAny]
    throttle_classes = [TicketPollingThrottle]


class PublicDisplayMixin:
    permission_classes = [AllowAny]
    throttle_classes = [DisplayBoardThrottle]


# Examples of how to use the mixins:
# class ResetCounterView(PermissionMixin, APIView):
#     required_permission = "queues.reset_queuecounter"

# class TicketView(PublicTicketMixin, APIView):
#     # Anonymous ticket holders, rate limited
#     pass
