from .beacon import BeaconSender
from .http import ApiClient, DeliveryError

__all__ = ["ApiClient", "BeaconSender", "DeliveryError"]
