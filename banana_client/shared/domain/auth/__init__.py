"""Authentication: login/registration gateway and logout coordinator."""

from banana_client.shared.domain.auth.gateway import AuthGateway
from banana_client.shared.domain.auth.logout import LogoutCoordinator

__all__ = ["AuthGateway", "LogoutCoordinator"]
