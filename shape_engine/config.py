from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "Shape Calculation Engine"
    LOG_LEVEL: str = "INFO"

    # Material defaults: structural carbon steel
    DEFAULT_DENSITY: float = 7850.0  # kg/m³
    DEFAULT_CURRENCY: str = "INR"

    # Scrap is sold back at a fraction of the raw material price
    SCRAP_RECOVERY_RATE: float = 0.30

    # Fabrication rate fallbacks (INR), used when neither the user,
    # the shape nor the category tables provide a rate
    DEFAULT_CUTTING_COST_PER_METER: float = 50.0
    DEFAULT_EDGE_PREPARATION_COST_PER_METER: float = 100.0
    DEFAULT_WELDING_COST_PER_METER: float = 500.0
    DEFAULT_SURFACE_TREATMENT_COST_PER_SQM: float = 50.0
    LABOR_RATE_PER_HOUR: float = 500.0

    # Expression evaluator
    DECIMAL_PRECISION: int = 50
    EXPRESSION_CACHE_SIZE: int = 512
    # Bounds parser and evaluator recursion
    MAX_EXPRESSION_DEPTH: int = 100

    class Config:
        env_file = ".env"


settings = Settings()
