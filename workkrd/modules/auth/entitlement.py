"""Template entitlements - who may use, and export, which template."""

from dataclasses import dataclass

from workkrd.config import get_settings
from workkrd.modules.templates import DEFAULT_TEMPLATES, TemplateEntry


@dataclass(frozen=True)
class Entitlement:
    has_access: bool
    can_export: bool


class EntitlementService:
    """
    Settings-backed entitlement provider.

    Free templates are open to everyone; premium templates to the users
    listed in ``premium_user_ids``. Deployments with a billing backend swap
    this out through a dependency override on ``get_entitlement_service``.
    """

    def __init__(
        self,
        premium_user_ids: list[str] | set[str],
        templates: tuple[TemplateEntry, ...] = DEFAULT_TEMPLATES,
    ) -> None:
        self.premium_user_ids = set(premium_user_ids)
        self._tiers = {entry.id: entry.tier for entry in templates}

    def check(self, user_id: str, template_id: str) -> Entitlement:
        tier = self._tiers.get(template_id)
        if tier is None:
            return Entitlement(has_access=False, can_export=False)
        if tier == "free":
            return Entitlement(has_access=True, can_export=True)
        premium = user_id in self.premium_user_ids
        return Entitlement(has_access=premium, can_export=premium)


_service: EntitlementService | None = None


def get_entitlement_service() -> EntitlementService:
    global _service
    if _service is None:
        _service = EntitlementService(get_settings().premium_user_ids)
    return _service


def reset_entitlement_service() -> None:
    global _service
    _service = None
