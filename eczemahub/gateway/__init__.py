from .server import GatewayServer
from .middleware import CallerIdentity

__all__ = ["GatewayServer", "CallerIdentity"]
