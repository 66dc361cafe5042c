from pydantic_settings import BaseSettings
import os


class Settings(BaseSettings):
    openrouter_api_key: str = os.getenv("OPENROUTER_API_KEY", "")
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_model: str = "openai/gpt-4-turbo"
    nhtsa_base_url: str = "https://vpic.nhtsa.dot.gov/api/vehicles"
    http_timeout: float = 15.0
    generation_timeout: float = 180.0
    max_form_sessions: int = 1000

    class Config:
        env_file = ".env"
        extra = "allow"


settings = Settings()
