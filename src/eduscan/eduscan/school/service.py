from __future__ import annotations

import logging
from typing import Optional

from ..common.validators import require_non_empty
from ..core.exceptions import AuthorizationError
from ..users.model import User
from .model import SchoolConfig
from .repository import SchoolConfigRepository

logger = logging.getLogger(__name__)


class SchoolService:
    def __init__(self, repository: SchoolConfigRepository):
        self._repository = repository

    def get_config(self) -> SchoolConfig:
        return self._repository.get()

    def update_config(self, actor: User, *, name: str, logo: Optional[str] = None) -> SchoolConfig:
        if not actor.is_admin:
            raise AuthorizationError("Admin privileges required")
        current = self._repository.get()
        config = SchoolConfig(
            name=require_non_empty(name, "School name"),
            logo=current.logo if logo is None else logo,
        )
        self._repository.save(config)
        logger.info("School settings updated by %s", actor.username)
        return config
