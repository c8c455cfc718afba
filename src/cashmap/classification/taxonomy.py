#!/usr/bin/env python3
"""
Financial Category Taxonomy

Closed set of movement categories, the DFC nature each one belongs to, and
the statement groups used to build the simplified income statement.

Two sentinels sit outside the taxonomy proper:
- UNCATEGORIZED: imported but not yet classified
- TRANSFER: movement between the client's own accounts, excluded from every
  profitability and risk figure
"""

from enum import Enum


class Direction(Enum):
    """Direction of a cash movement."""

    IN = "IN"
    OUT = "OUT"


class Nature(Enum):
    """DFC bucket a category belongs to."""

    OPERATING = "OPERATING"
    INVESTING = "INVESTING"
    FINANCING = "FINANCING"


class Category(Enum):
    """Movement categories, grouped by the direction they normally carry."""

    # Inflows
    REV_SALES = "rev_sales"
    REV_ASSET_SALE = "rev_asset_sale"
    REV_FINANCIAL = "rev_financial"
    REV_LOAN = "rev_loan"
    REV_CAPITAL = "rev_capital"
    OTHER_IN = "other_in"

    # Variable costs
    COST_GOODS = "cost_goods"
    COST_TAXES_SALES = "cost_taxes_sales"
    COST_COMMISSION = "cost_commission"
    COST_FREIGHT = "cost_freight"
    COST_MARKETING_PERFORMANCE = "cost_marketing_performance"

    # Fixed expenses
    EXP_PAYROLL = "exp_payroll"
    EXP_PAYROLL_TAXES = "exp_payroll_taxes"
    EXP_BENEFITS = "exp_benefits"
    EXP_PRO_SERVICES = "exp_pro_services"
    EXP_OCCUPANCY = "exp_occupancy"
    EXP_UTILITIES = "exp_utilities"
    EXP_SOFTWARE = "exp_software"
    EXP_MAINTENANCE = "exp_maintenance"
    EXP_GENERAL_ADMIN = "exp_general_admin"
    EXP_TRAVEL = "exp_travel"

    # Financial expenses
    EXP_BANK_FEES = "exp_bank_fees"
    EXP_LOAN_INTEREST = "exp_loan_interest"
    EXP_TAXES_PROFIT = "exp_taxes_profit"

    # Non-operating outflows
    OUT_DEBT_AMORTIZATION = "out_debt_amortization"
    OUT_CAPEX = "out_capex"
    OUT_WITHDRAWAL = "out_withdrawal"
    OTHER_OUT = "other_out"

    # Sentinels
    TRANSFER = "transfer"
    UNCATEGORIZED = "uncategorized"

    @property
    def label(self) -> str:
        """Display label used in reports."""
        return CATEGORY_LABELS[self]

    @property
    def nature(self) -> Nature | None:
        """DFC nature; None only for TRANSFER."""
        return nature_of(self)

    @property
    def is_sentinel(self) -> bool:
        return self in (Category.TRANSFER, Category.UNCATEGORIZED)


CATEGORY_LABELS: dict[Category, str] = {
    Category.REV_SALES: "Receita de Vendas / Serviços",
    Category.REV_ASSET_SALE: "Venda de Ativo Imobilizado",
    Category.REV_FINANCIAL: "Rendimentos Financeiros",
    Category.REV_LOAN: "Empréstimo Obtido (Entrada)",
    Category.REV_CAPITAL: "Aporte de Capital",
    Category.OTHER_IN: "Outras Entradas",
    Category.COST_GOODS: "Fornecedores (Matéria-Prima/Produtos)",
    Category.COST_TAXES_SALES: "Impostos s/ Venda (Simples/ICMS/ISS)",
    Category.COST_COMMISSION: "Comissões de Venda",
    Category.COST_FREIGHT: "Fretes / Logística de Entrega",
    Category.COST_MARKETING_PERFORMANCE: "Marketing de Performance (Ads)",
    Category.EXP_PAYROLL: "Folha de Pagamento (Salários)",
    Category.EXP_PAYROLL_TAXES: "Encargos Trabalhistas (FGTS/INSS)",
    Category.EXP_BENEFITS: "Benefícios (VR/VT/Saúde)",
    Category.EXP_PRO_SERVICES: "Serviços de Terceiros e Consultorias",
    Category.EXP_OCCUPANCY: "Ocupação (Aluguel/Cond/IPTU)",
    Category.EXP_UTILITIES: "Utilidades (Energia/Água/Tel/Internet)",
    Category.EXP_SOFTWARE: "Software / Licenças / TI",
    Category.EXP_MAINTENANCE: "Manutenção e Conservação",
    Category.EXP_GENERAL_ADMIN: "Despesas Administrativas / Escritório",
    Category.EXP_TRAVEL: "Viagens e Representações",
    Category.EXP_BANK_FEES: "Tarifas Bancárias",
    Category.EXP_LOAN_INTEREST: "Juros de Empréstimos/Mora",
    Category.EXP_TAXES_PROFIT: "Impostos s/ Lucro (IRPJ/CSLL)",
    Category.OUT_DEBT_AMORTIZATION: "Amortização de Principal (Dívida)",
    Category.OUT_CAPEX: "Investimentos (Capex/Equipamentos)",
    Category.OUT_WITHDRAWAL: "Retirada de Sócios (Lucros)",
    Category.OTHER_OUT: "Outras Saídas",
    Category.TRANSFER: "Transferência entre Contas",
    Category.UNCATEGORIZED: "A Classificar",
}

# Statement groups, in presentation order
REVENUE_CATEGORIES: tuple[Category, ...] = (
    Category.REV_SALES,
    Category.REV_FINANCIAL,
    Category.REV_ASSET_SALE,
    Category.REV_LOAN,
    Category.REV_CAPITAL,
    Category.OTHER_IN,
)

SALES_TAX_CATEGORIES: tuple[Category, ...] = (Category.COST_TAXES_SALES,)

VARIABLE_COST_CATEGORIES: tuple[Category, ...] = (
    Category.COST_GOODS,
    Category.COST_FREIGHT,
    Category.COST_COMMISSION,
    Category.COST_MARKETING_PERFORMANCE,
)

FIXED_EXPENSE_CATEGORIES: tuple[Category, ...] = (
    Category.EXP_PAYROLL,
    Category.EXP_PAYROLL_TAXES,
    Category.EXP_BENEFITS,
    Category.EXP_OCCUPANCY,
    Category.EXP_UTILITIES,
    Category.EXP_PRO_SERVICES,
    Category.EXP_SOFTWARE,
    Category.EXP_MAINTENANCE,
    Category.EXP_GENERAL_ADMIN,
    Category.EXP_TRAVEL,
)

FINANCIAL_EXPENSE_CATEGORIES: tuple[Category, ...] = (
    Category.EXP_BANK_FEES,
    Category.EXP_LOAN_INTEREST,
    Category.EXP_TAXES_PROFIT,
)

NON_OPERATING_CATEGORIES: tuple[Category, ...] = (
    Category.OUT_DEBT_AMORTIZATION,
    Category.OUT_CAPEX,
    Category.OUT_WITHDRAWAL,
    Category.OTHER_OUT,
)

INFLOW_CATEGORIES: tuple[Category, ...] = REVENUE_CATEGORIES + (Category.TRANSFER,)

OUTFLOW_CATEGORIES: tuple[Category, ...] = (
    SALES_TAX_CATEGORIES
    + VARIABLE_COST_CATEGORIES
    + FIXED_EXPENSE_CATEGORIES
    + FINANCIAL_EXPENSE_CATEGORIES
    + NON_OPERATING_CATEGORIES
    + (Category.TRANSFER, Category.UNCATEGORIZED)
)

CATEGORY_NATURE: dict[Category, Nature] = {
    category: Nature.OPERATING for category in Category if category is not Category.TRANSFER
}
CATEGORY_NATURE.update(
    {
        Category.REV_ASSET_SALE: Nature.INVESTING,
        Category.OUT_CAPEX: Nature.INVESTING,
        Category.REV_LOAN: Nature.FINANCING,
        Category.REV_CAPITAL: Nature.FINANCING,
        Category.OUT_DEBT_AMORTIZATION: Nature.FINANCING,
        Category.OUT_WITHDRAWAL: Nature.FINANCING,
    }
)


def nature_of(category: Category) -> Nature | None:
    """
    Look up the DFC nature of a category.

    UNCATEGORIZED movements count as operating until classified.
    TRANSFER has no nature: it never reaches the DFC.
    """
    return CATEGORY_NATURE.get(category)


def categories_for(direction: Direction) -> tuple[Category, ...]:
    """Categories offered for a movement of the given direction."""
    if direction is Direction.IN:
        return INFLOW_CATEGORIES + (Category.UNCATEGORIZED,)
    return OUTFLOW_CATEGORIES


def parse_category(value: str) -> Category:
    """
    Resolve a category from its code, enum name or display label.

    Raises:
        ValueError: If nothing matches
    """
    text = value.strip()
    for category in Category:
        if text in (category.value, category.name, category.label):
            return category
    lowered = text.lower()
    for category in Category:
        if lowered in (category.value, category.name.lower(), category.label.lower()):
            return category
    raise ValueError(f"Unknown category: {value}")
