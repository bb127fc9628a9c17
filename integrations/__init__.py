"""External integrations for the pawaPay sandbox tester."""
from .pawapay_client import GatewayError, GatewayOk, GatewayResult, PawapayClient

__all__ = ["GatewayError", "GatewayOk", "GatewayResult", "PawapayClient"]
