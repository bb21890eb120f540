"""
IssuanceSettings — параметры конструирования контроллера выпуска

Immutable Pydantic модель. Все адреса обязательны, не нулевые и
нормализуются к нижнему регистру. После создания не изменяются: параметры
кривой и комиссии — константы модулей, мутация параметров не поддерживается.
"""

from pydantic import BaseModel, Field, field_validator, model_validator

from .address import ADDRESS_PATTERN, ZERO_ADDRESS


class IssuanceSettings(BaseModel):
    """
    Параметры контроллера выпуска.

    - controller_address: адрес контроллера допуска (eligibility oracle)
    - fee_recipient: получатель комиссии (освобождён от eligibility/cap)
    - treasury_address: собственный адрес контроллера выпуска
      (освобождён от eligibility/cap)
    """

    controller_address: str = Field(
        ..., pattern=ADDRESS_PATTERN, description="Адрес eligibility oracle"
    )
    fee_recipient: str = Field(
        ..., pattern=ADDRESS_PATTERN, description="Получатель комиссии"
    )
    treasury_address: str = Field(
        ..., pattern=ADDRESS_PATTERN, description="Собственный адрес контроллера выпуска"
    )

    model_config = {"frozen": True}

    @field_validator("controller_address", "fee_recipient", "treasury_address")
    @classmethod
    def validate_non_zero(cls, v: str, info) -> str:
        """Адрес не может быть нулевым; нормализация регистра."""
        normalized = v.lower()
        if normalized == ZERO_ADDRESS:
            raise ValueError(f"{info.field_name} must be non-zero")
        return normalized

    @model_validator(mode="after")
    def validate_fee_recipient_is_not_treasury(self) -> "IssuanceSettings":
        """fee_recipient и treasury_address — разные адреса."""
        if self.fee_recipient == self.treasury_address:
            raise ValueError("fee_recipient must differ from treasury_address")
        return self

    @property
    def exempt_addresses(self) -> frozenset[str]:
        """Адреса, освобождённые от eligibility и bootstrap cap."""
        return frozenset({self.treasury_address, self.fee_recipient})
