"""Account mapping service.

The classification engine posts to a handful of fixed PGC codes (client,
supplier, VAT, payroll liabilities...). They are kept as data: defaults
below, overridable per database.
"""

import logging
from dataclasses import dataclass, fields, replace

from kwanza.database.base import Database
from kwanza.domain.errors import ValidationError
from kwanza.domain.pgc import is_valid_code

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountMapping:
    """Fixed account codes used by automatic classification."""

    sales_client: str = "31.1.2.1"
    sales_revenue_product: str = "61.1"
    sales_revenue_service: str = "62.1"
    sales_return_product: str = "61.2"
    sales_return_service: str = "62.9"
    sales_vat: str = "34.5.3.1"
    purchase_cost: str = "71.1"
    purchase_supplier: str = "32.1"
    purchase_vat: str = "34.5.2.1"
    payroll_cost: str = "72.1"
    payroll_subsidies: str = "72.2"
    payroll_payable: str = "36.1"
    payroll_irt: str = "34.3"
    payroll_inss: str = "34.7"
    payroll_advances: str = "37.2"
    payroll_bank: str = "43.1"

    @classmethod
    def keys(cls) -> list[str]:
        return [f.name for f in fields(cls)]


DEFAULT_MAPPING = AccountMapping()


class AccountMappingService:
    """Service for reading and overriding the classification account codes."""

    def __init__(self, db: Database):
        """Initialize account mapping service.

        Args:
            db: Database instance
        """
        self.db = db

    def _check_key(self, key: str) -> None:
        if key not in AccountMapping.keys():
            raise ValidationError(
                f"Unknown mapping key '{key}'. Valid keys: {', '.join(AccountMapping.keys())}"
            )

    def get_mapping(self) -> AccountMapping:
        """Return the defaults with stored overrides applied."""
        valid = set(AccountMapping.keys())
        overrides = {m.key: m.account_code for m in self.db.list_account_mappings() if m.key in valid}
        return replace(DEFAULT_MAPPING, **overrides)

    def list_overrides(self) -> dict[str, str]:
        """Return the stored overrides keyed by mapping key."""
        return {m.key: m.account_code for m in self.db.list_account_mappings()}

    def set_code(self, key: str, code: str) -> None:
        """Override the account code of a mapping key.

        Args:
            key: Mapping key (e.g., "sales_vat")
            code: PGC account code

        Raises:
            ValidationError: If the key is unknown or the code malformed
        """
        self._check_key(key)
        code = code.strip()
        if not is_valid_code(code):
            raise ValidationError(f"Invalid PGC code '{code}'")
        self.db.set_account_mapping(key, code)
        logger.info("Account mapping %s set to %s", key, code)

    def reset(self, key: str) -> bool:
        """Drop the override of a key. Returns True if one existed."""
        self._check_key(key)
        removed = self.db.delete_account_mapping(key)
        if removed:
            logger.info("Account mapping %s reset to default", key)
        return removed
