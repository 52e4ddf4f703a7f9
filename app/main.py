"""
Streamlit Frontend for SimpliFinance

A thin presentation layer: every action goes through FinanceTracker,
and nothing here decides what is replicated, how installments split,
or how entries are ordered.

Run with:
    streamlit run app/main.py
"""

from datetime import datetime, time
from decimal import Decimal

import streamlit as st

from simplifinance.config import get_settings
from simplifinance.constants import ENTRY_TYPE_LABELS, MONTHS
from simplifinance.models.entry import EntryType, FinancialEntry
from simplifinance.orchestrator import FinanceTracker, create_app_components
from simplifinance.services.storage import StorageError
from simplifinance.validation import EntryValidationError


st.set_page_config(
    page_title="SimpliFinance",
    page_icon="💰",
    layout="centered",
)


@st.cache_resource
def get_tracker() -> FinanceTracker:
    """Create the tracker once per server process (cached)."""
    return create_app_components()


def format_currency(value: Decimal) -> str:
    """Brazilian-style amount: R$ 1.234,56"""
    symbol = get_settings().app.currency_symbol
    text = f"{value:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{symbol} {text}"


def render_header(tracker: FinanceTracker):
    st.title("SimpliFinance")
    st.caption("Controle suas finanças com clareza.")

    prev_col, label_col, next_col = st.columns([1, 3, 1])
    with prev_col:
        if st.button("◀", use_container_width=True):
            tracker.change_month(-1)
            st.rerun()
    with label_col:
        st.markdown(
            f"<h3 style='text-align: center'>{MONTHS[tracker.view.month]} "
            f"{tracker.view.year}</h3>",
            unsafe_allow_html=True,
        )
    with next_col:
        if st.button("▶", use_container_width=True):
            tracker.change_month(1)
            st.rerun()


def render_summary(tracker: FinanceTracker):
    summary = tracker.summary()
    cols = st.columns(4)
    cols[0].metric("Receitas", format_currency(summary.income))
    cols[1].metric("Despesas Total", format_currency(summary.total_expenses))
    cols[2].metric("Despesas Pagas", format_currency(summary.paid_expenses))
    cols[3].metric("Saldo Disponível", format_currency(summary.balance))


def render_entry(tracker: FinanceTracker, entry: FinancialEntry):
    info_col, amount_col, pay_col, edit_col, delete_col = st.columns([5, 3, 1, 1, 1])

    with info_col:
        title = f"~~{entry.description}~~" if entry.is_paid else f"**{entry.description}**"
        st.markdown(title)
        st.caption(
            f"{ENTRY_TYPE_LABELS[entry.type.value]} • {entry.date.strftime('%d/%m/%Y')}"
        )
    with amount_col:
        st.markdown(format_currency(entry.amount))
        if entry.is_paid:
            st.caption("Pago")
    with pay_col:
        if st.button("✓", key=f"pay-{entry.id}", help="Marcar como pago / não pago"):
            tracker.toggle_paid(entry.id)
            st.rerun()
    with edit_col:
        if st.button("✎", key=f"edit-{entry.id}", help="Editar"):
            st.session_state.editing_id = entry.id
            st.rerun()
    with delete_col:
        if st.button("✕", key=f"delete-{entry.id}", help="Excluir"):
            tracker.delete_entry(entry.id)
            if st.session_state.get("editing_id") == entry.id:
                st.session_state.editing_id = None
            st.rerun()


def render_entries(tracker: FinanceTracker):
    st.subheader("Lançamentos do Mês")
    entries = tracker.current_entries()
    if not entries:
        st.info("Nenhum lançamento encontrado para este período.")
        return
    for entry in entries:
        render_entry(tracker, entry)


def render_form(tracker: FinanceTracker):
    editing_id = st.session_state.get("editing_id")
    editing = tracker.store.get(editing_id) if editing_id else None

    st.subheader("Editar Lançamento" if editing else "Novo Lançamento")

    types = list(EntryType)
    with st.form("entry-form", clear_on_submit=True):
        description = st.text_input(
            "Descrição",
            value=editing.description if editing else "",
            placeholder="Ex: Aluguel, Supermercado, Salário...",
        )
        amount = st.text_input(
            "Valor",
            value=str(editing.amount) if editing else "",
        )
        entry_type = st.selectbox(
            "Tipo",
            options=types,
            index=types.index(editing.type if editing else EntryType.VARIABLE_EXPENSE),
            format_func=lambda t: ENTRY_TYPE_LABELS[t.value],
        )
        entry_date = st.date_input(
            "Data",
            value=editing.date.date() if editing else None,
            format="DD/MM/YYYY",
        )
        installments = 1
        if not editing:
            installments = st.number_input(
                "Parcelas (apenas despesas variáveis)",
                min_value=1,
                value=1,
                step=1,
            )
        submitted = st.form_submit_button("Salvar", type="primary")

    if editing and st.button("Cancelar edição"):
        st.session_state.editing_id = None
        st.rerun()

    if not submitted:
        return

    form = {
        "description": description,
        "amount": amount.replace(",", "."),
        "type": entry_type,
        "installments": int(installments),
    }
    if entry_date:
        form["date"] = datetime.combine(entry_date, time(12, 0))

    try:
        tracker.on_submit_entry(form, editing_id=editing.id if editing else None)
    except EntryValidationError as e:
        st.error(tracker.validator.get_user_friendly_summary(e.result))
        return
    except StorageError as e:
        st.error(f"Não foi possível salvar: {e}")
        return

    st.session_state.editing_id = None
    st.rerun()


def main():
    """Main application entry point."""
    tracker = get_tracker()
    if "editing_id" not in st.session_state:
        st.session_state.editing_id = None

    render_header(tracker)
    render_summary(tracker)
    st.markdown("---")
    render_entries(tracker)
    st.markdown("---")
    render_form(tracker)


if __name__ == "__main__":
    main()
