"""PGC (Plano Geral de Contabilidade) chart of accounts service."""

import logging
import re
from typing import Optional

from kwanza.database.base import Database
from kwanza.domain.entities import (
    PGCAccount,
    AccountTreeNode,
    AccountType,
    AccountNature,
)
from kwanza.domain.errors import (
    ValidationError,
    NotFoundError,
    ConflictError,
    account_not_found,
    duplicate_account_code,
)

logger = logging.getLogger(__name__)

ACCOUNT_CODE_PATTERN = re.compile(r"^\d+(\.\d+)*$")

# Base chart seeded by `kwanza init-pgc`. Covers every code the
# classification engine posts to by default.
DEFAULT_CHART: tuple[tuple[str, str, AccountType, AccountNature], ...] = (
    ("1", "Meios fixos e investimentos", AccountType.CLASSE, AccountNature.DEBITO),
    ("11", "Imobilizações corpóreas", AccountType.GRUPO, AccountNature.DEBITO),
    ("2", "Existências", AccountType.CLASSE, AccountNature.DEBITO),
    ("26", "Mercadorias", AccountType.GRUPO, AccountNature.DEBITO),
    ("3", "Terceiros", AccountType.CLASSE, AccountNature.AMBOS),
    ("31", "Clientes", AccountType.GRUPO, AccountNature.DEBITO),
    ("31.1", "Clientes - correntes", AccountType.SUBGRUPO, AccountNature.DEBITO),
    ("31.1.2", "Não grupo", AccountType.CONTA, AccountNature.DEBITO),
    ("31.1.2.1", "Nacionais", AccountType.CONTA, AccountNature.DEBITO),
    ("32", "Fornecedores", AccountType.GRUPO, AccountNature.CREDITO),
    ("32.1", "Fornecedores - correntes", AccountType.SUBGRUPO, AccountNature.CREDITO),
    ("34", "Estado", AccountType.GRUPO, AccountNature.AMBOS),
    ("34.3", "Imposto sobre o rendimento de trabalho", AccountType.SUBGRUPO, AccountNature.CREDITO),
    ("34.5", "Imposto sobre o valor acrescentado", AccountType.SUBGRUPO, AccountNature.AMBOS),
    ("34.5.2", "IVA suportado", AccountType.CONTA, AccountNature.DEBITO),
    ("34.5.2.1", "IVA dedutível", AccountType.SUBCONTA, AccountNature.DEBITO),
    ("34.5.3", "IVA liquidado", AccountType.CONTA, AccountNature.CREDITO),
    ("34.5.3.1", "IVA liquidado - operações gerais", AccountType.SUBCONTA, AccountNature.CREDITO),
    ("34.7", "Segurança social", AccountType.SUBGRUPO, AccountNature.CREDITO),
    ("36", "Pessoal", AccountType.GRUPO, AccountNature.AMBOS),
    ("36.1", "Pessoal - remunerações", AccountType.SUBGRUPO, AccountNature.CREDITO),
    ("37", "Outros valores a receber e a pagar", AccountType.GRUPO, AccountNature.AMBOS),
    ("37.2", "Adiantamentos ao pessoal", AccountType.SUBGRUPO, AccountNature.DEBITO),
    ("4", "Meios monetários", AccountType.CLASSE, AccountNature.DEBITO),
    ("43", "Depósitos à ordem", AccountType.GRUPO, AccountNature.DEBITO),
    ("43.1", "Moeda nacional", AccountType.SUBGRUPO, AccountNature.DEBITO),
    ("45", "Caixa", AccountType.GRUPO, AccountNature.DEBITO),
    ("5", "Capital e reservas", AccountType.CLASSE, AccountNature.CREDITO),
    ("51", "Capital", AccountType.GRUPO, AccountNature.CREDITO),
    ("6", "Proveitos e ganhos por natureza", AccountType.CLASSE, AccountNature.CREDITO),
    ("61", "Vendas", AccountType.GRUPO, AccountNature.CREDITO),
    ("61.1", "Produtos acabados e intermédios", AccountType.SUBGRUPO, AccountNature.CREDITO),
    ("61.2", "Devoluções de vendas", AccountType.SUBGRUPO, AccountNature.DEBITO),
    ("62", "Prestações de serviço", AccountType.GRUPO, AccountNature.CREDITO),
    ("62.1", "Serviços principais", AccountType.SUBGRUPO, AccountNature.CREDITO),
    ("62.9", "Anulações de serviços", AccountType.SUBGRUPO, AccountNature.DEBITO),
    ("7", "Custos e perdas por natureza", AccountType.CLASSE, AccountNature.DEBITO),
    ("71", "Custo das existências vendidas", AccountType.GRUPO, AccountNature.DEBITO),
    ("71.1", "Matérias-primas e mercadorias", AccountType.SUBGRUPO, AccountNature.DEBITO),
    ("72", "Custos com o pessoal", AccountType.GRUPO, AccountNature.DEBITO),
    ("72.1", "Remunerações - pessoal", AccountType.SUBGRUPO, AccountNature.DEBITO),
    ("72.2", "Subsídios", AccountType.SUBGRUPO, AccountNature.DEBITO),
    ("75", "Outros custos e perdas operacionais", AccountType.GRUPO, AccountNature.DEBITO),
    ("75.2", "Fornecimentos e serviços de terceiros", AccountType.SUBGRUPO, AccountNature.DEBITO),
    ("8", "Resultados", AccountType.CLASSE, AccountNature.AMBOS),
    ("88", "Resultado líquido do exercício", AccountType.GRUPO, AccountNature.AMBOS),
)


def derive_parent_code(code: str) -> Optional[str]:
    """Derive the parent of a PGC code.

    "31.1.2" -> "31.1", "311" -> "31"; codes of one or two characters
    without a dot have no parent.
    """
    if "." in code:
        return code.rsplit(".", 1)[0]
    if len(code) > 2:
        return code[:-1]
    return None


def display_level(code: str) -> int:
    """Indentation level of a code in hierarchical listings."""
    dots = code.count(".")
    if len(code) == 1:
        return 0
    if len(code) == 2 and dots == 0:
        return 1
    return dots + 1


def code_sort_key(code: str) -> tuple:
    """Natural sort key, so that "31.2" sorts before "31.10"."""
    return tuple(int(part) if part.isdigit() else part for part in code.split("."))


def is_valid_code(code: str) -> bool:
    """Whether a code is a non-empty dot-separated run of digits."""
    return bool(ACCOUNT_CODE_PATTERN.match(code))


def matches_account(code: str, prefix: str) -> bool:
    """Whether `code` is the account `prefix` or one of its sub-accounts."""
    if code == prefix or code.startswith(prefix + "."):
        return True
    # Undotted group codes ("31") also cover "311"-style children.
    return "." not in prefix and code.startswith(prefix)


def ancestor_codes(code: str) -> list[str]:
    """Chain of parents of a code, nearest first."""
    ancestors = []
    parent = derive_parent_code(code)
    while parent:
        ancestors.append(parent)
        parent = derive_parent_code(parent)
    return ancestors


class PGCService:
    """Service for managing the PGC chart of accounts."""

    def __init__(self, db: Database):
        """Initialize PGC service.

        Args:
            db: Database instance
        """
        self.db = db

    def _validate(self, code: str, description: str, parent_code: Optional[str]) -> Optional[str]:
        code = code.strip()
        if not code or not description.strip():
            raise ValidationError("Code and description are required")
        if not is_valid_code(code):
            raise ValidationError(f"Invalid PGC code '{code}'")

        derived = derive_parent_code(code)
        if not parent_code:
            return derived
        if "." in code and parent_code != derived:
            raise ValidationError(f"Parent of '{code}' must be '{derived}', got '{parent_code}'")
        return parent_code

    def create_account(
        self,
        code: str,
        description: str,
        account_type: AccountType = AccountType.CONTA,
        nature: AccountNature = AccountNature.AMBOS,
        parent_code: Optional[str] = None,
    ) -> int:
        """Create a PGC account.

        Args:
            code: Account code (e.g., "31.1.2.1")
            description: Account description
            account_type: Hierarchy level of the account
            nature: Side the account normally carries its balance on
            parent_code: Optional explicit parent; derived from the code if None

        Returns:
            Account ID

        Raises:
            ValidationError: If code or description is missing or malformed
            ConflictError: If the code already exists
        """
        code = code.strip()
        parent = self._validate(code, description, parent_code)
        if self.db.get_pgc_account_by_code(code) is not None:
            raise ConflictError(duplicate_account_code(code))

        account_id = self.db.create_pgc_account(
            code=code,
            description=description.strip(),
            account_type=AccountType(account_type).value,
            nature=AccountNature(nature).value,
            parent_code=parent,
        )
        logger.info("Created PGC account %s", code)
        return account_id

    def update_account(
        self,
        account_id: int,
        code: str,
        description: str,
        account_type: AccountType,
        nature: AccountNature,
        parent_code: Optional[str] = None,
    ) -> None:
        """Update a PGC account.

        Sub-accounts keep their codes when a parent is renamed.

        Raises:
            NotFoundError: If the account does not exist
            ValidationError: If code or description is missing or malformed
            ConflictError: If another account already uses the code
        """
        current = self.db.get_pgc_account(account_id)
        if current is None:
            raise NotFoundError(f"PGC account {account_id} not found")

        code = code.strip()
        parent = self._validate(code, description, parent_code)
        existing = self.db.get_pgc_account_by_code(code)
        if existing is not None and existing.id != account_id:
            raise ConflictError(duplicate_account_code(code))

        if code != current.code:
            children = [acc for acc in self.db.list_pgc_accounts() if acc.parent_code == current.code]
            if children:
                logger.warning(
                    "Account %s renamed to %s; %d sub-account(s) still point to the old code",
                    current.code,
                    code,
                    len(children),
                )

        self.db.update_pgc_account(
            account_id=account_id,
            code=code,
            description=description.strip(),
            account_type=AccountType(account_type).value,
            nature=AccountNature(nature).value,
            parent_code=parent,
        )

    def get_account_by_code(self, code: str) -> PGCAccount:
        """Get account by code.

        Raises:
            NotFoundError: If no account has the code
        """
        account = self.db.get_pgc_account_by_code(code)
        if account is None:
            raise NotFoundError(account_not_found(code))
        return account

    def find_account(self, code: str) -> Optional[PGCAccount]:
        """Get account by code, or None."""
        return self.db.get_pgc_account_by_code(code)

    def list_accounts(self, search: Optional[str] = None) -> list[PGCAccount]:
        """List accounts in natural code order.

        Args:
            search: Optional filter matched against the code or the
                description (case-insensitive)

        Returns:
            List of PGC accounts
        """
        accounts = self.db.list_pgc_accounts()
        if search:
            term = search.lower()
            accounts = [acc for acc in accounts if term in acc.code or term in acc.description.lower()]
        return sorted(accounts, key=lambda acc: code_sort_key(acc.code))

    def get_account_tree(self) -> list[AccountTreeNode]:
        """Build the account hierarchy from parent codes.

        Accounts whose parent is not in the chart are returned as roots.
        """
        accounts = self.list_accounts()
        known = {acc.code for acc in accounts}
        children_map: dict[Optional[str], list[PGCAccount]] = {}
        for acc in accounts:
            parent = acc.parent_code if acc.parent_code in known else None
            children_map.setdefault(parent, []).append(acc)

        def build(parent_code: Optional[str]) -> tuple[AccountTreeNode, ...]:
            return tuple(
                AccountTreeNode(account=acc, level=display_level(acc.code), children=build(acc.code))
                for acc in children_map.get(parent_code, [])
            )

        return list(build(None))

    def seed_default_chart(self) -> int:
        """Create the default chart of accounts, skipping existing codes.

        Returns:
            Number of accounts created
        """
        existing = {acc.code for acc in self.db.list_pgc_accounts()}
        created = 0
        for code, description, account_type, nature in DEFAULT_CHART:
            if code in existing:
                continue
            self.db.create_pgc_account(
                code=code,
                description=description,
                account_type=account_type.value,
                nature=nature.value,
                parent_code=derive_parent_code(code),
                system_auto=True,
            )
            created += 1
        logger.info("Seeded %d PGC accounts", created)
        return created
