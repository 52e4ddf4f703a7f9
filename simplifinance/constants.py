"""Display constants shared by the presentation layer and the models."""

MONTHS = [
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro",
]

# Short labels shown next to each entry in the month list
ENTRY_TYPE_LABELS = {
    "INCOME": "Receita",
    "FIXED_EXPENSE": "Fixa",
    "VARIABLE_EXPENSE": "Variável",
}

DEFAULT_PENDENCY_MARKER = "(Pendente)"

# Day cap for the default date of a new entry, so it exists in every month
DEFAULT_ENTRY_DAY_CAP = 28
