from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "", "case_sensitive": False}

    # App
    environment: str = "development"
    debug: bool = True
    app_name: str = "FinSight"
    log_json: bool = False

    # Covenant thresholds applied when a request omits them
    default_min_dscr: float = 1.2
    default_target_icr: float = 2.0
    default_max_nd_to_ebitda: float = 3.5

    # Sanity-check tuning
    ltv_warning_pct: float = 80.0
    dscr_warning_buffer: float = 1.1


settings = Settings()
