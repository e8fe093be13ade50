from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./orders.db"
    COMPANY_NAME: str = "OMSAN MERMER SAN. TİC. LTD. ŞTİ."
    COMPANY_PHONE: str = ""
    COMPANY_ADDRESS: str = ""
    DOCUMENT_TITLE: str = "Fiyat Teklifi"
    ORDER_NUMBER_PREFIX: str = "SP"
    DEFAULT_VAT_RATE: float = 20.0

    # Regional number convention (tr-TR), one value for the whole process
    DECIMAL_SEPARATOR: str = ","
    THOUSANDS_SEPARATOR: str = "."
    CURRENCY_LABEL: str = "TL"
    CURRENCY_SYMBOL: str = "₺"
    DATE_FORMAT: str = "%d.%m.%Y"

    # Optional Unicode TTF for PDFs; without it non latin-1 text is transliterated
    PDF_FONT_PATH: str = ""

    class Config:
        env_file = ".env"


settings = Settings()
