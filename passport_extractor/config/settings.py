from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    pdf_engine: str = "pdfplumber"
    pdf_extraction_mode: str = "visual"
    pdf_render_dpi: int = Field(default=200, gt=0)
    pdf_page_concurrency: int = Field(default=3, gt=0)
    pdf_inter_batch_delay_seconds: float = Field(default=0.0, ge=0)
    pdf_section_min_length: int = Field(default=40, ge=0)

    extraction_provider: str = "openai"
    extraction_api_key: str = ""
    extraction_model_name: str = "gpt-4o"
    extraction_base_url: str = ""
    extraction_timeout_seconds: int = Field(default=30, gt=0)
    extraction_temperature: float = Field(default=0.1, ge=0)
    extraction_max_tokens: int = Field(default=4096, gt=0)
    extraction_default_confidence: float = Field(default=0.5, ge=0, le=1)

    # Fallback for extraction_api_key, matches the OpenAI SDK variable.
    openai_api_key: str = ""

    image_max_width: int = Field(default=1200, gt=0)
    image_max_height: int = Field(default=1200, gt=0)
    image_jpeg_quality: int = Field(default=80, ge=1, le=100)
    image_dimension_ceiling: int = Field(default=5000, gt=0)
    image_cache_capacity: int = Field(default=50, gt=0)

    max_image_upload_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    max_pdf_upload_bytes: int = Field(default=50 * 1024 * 1024, gt=0)
    max_processed_image_bytes: int = Field(default=2 * 1024 * 1024, gt=0)

    image_batch_concurrency: int = Field(default=5, gt=0)
    max_batch_items: int = Field(default=50, gt=0)

    validation_confidence_threshold: float = Field(default=0.6, ge=0, le=1)
    validation_allow_short_mrz: bool = False
