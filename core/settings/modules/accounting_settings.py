from __future__ import annotations

from typing import Dict, Optional

from pydantic import Field

from core.settings.base_settings import OrderflowBaseSettings


class AccountingSettings(OrderflowBaseSettings):
    """
    Chart-of-accounts codes used by order postings.
    Loaded from .env file with exact variable name matching.
    """

    cash_account_code: str = Field("1010", alias="ACCOUNTING_CASH_ACCOUNT")
    bank_account_code: str = Field("1020", alias="ACCOUNTING_BANK_ACCOUNT")
    revenue_account_code: str = Field("4000", alias="ACCOUNTING_REVENUE_ACCOUNT")
    # JSON object, e.g. {"MBOB": "1021"}; methods not listed fall back below.
    payment_method_accounts: Dict[str, str] = Field(
        default_factory=dict, alias="ACCOUNTING_PAYMENT_METHOD_ACCOUNTS"
    )

    def account_for(self, payment_method: Optional[str]) -> str:
        """Debit account for a payment method: CASH to cash, anything else to bank."""
        if payment_method and payment_method in self.payment_method_accounts:
            return self.payment_method_accounts[payment_method]
        if payment_method is None or payment_method == "CASH":
            return self.cash_account_code
        return self.bank_account_code
