from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")
    
    # Portfolio
    SK_PORTFOLIO_VALUE: float = 100_000.0
    SK_RISK_PERCENT: float = 0.01  # 1% of portfolio at risk per trade
    
    # Kelly criterion inputs
    SK_KELLY_WIN_RATE: float = 0.5
    SK_KELLY_AVG_WIN: float = 0.10
    SK_KELLY_AVG_LOSS: float = 0.05
    
    # ATR sizing
    SK_ATR_PERIOD: int = 14
    SK_ATR_MULTIPLIER: float = 2.0
    
    # Lot rounding
    SK_LOT_SIZE: int = 1
    
    # Validation limits
    SK_MAX_POSITION_WEIGHT: float = 0.10  # 10% max position
    SK_MAX_RISK_PERCENT: float = 0.05  # 5% max risk
    
    # Price history cache
    SK_CACHE_MAX_SIZE: int = 256
    SK_CACHE_TTL_SECONDS: float = 300.0
    
    # Logging
    SK_LOG_LEVEL: str = "WARNING"
    SK_JSON_LOGS: bool = False
    SK_LOG_FILE: str = ""  # JSON log file, disabled when empty

settings = Settings()
