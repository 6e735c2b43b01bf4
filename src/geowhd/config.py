"""
Configuration Management for GeoWHD
Uses Pydantic Settings for type-safe configuration with environment variable support
"""
from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


BLS_TIME_SERIES_BASE = "https://download.bls.gov/pub/time.series"

# BLS rejects the default python-requests agent with a 403
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class DataSourceSettings(BaseSettings):
    """Upstream BLS resources and HTTP behaviour"""
    laus_url: str = Field('https://www.bls.gov/web/metro/laucntycur14.txt', alias='BLS_LAUS_URL')
    qcew_url_template: str = Field(
        'https://data.bls.gov/cew/data/files/{year}/csv/{year}_qtrly_singlefile.zip',
        alias='BLS_QCEW_URL_TEMPLATE',
    )
    qcew_year: Optional[int] = Field(None, alias='QCEW_YEAR')
    oews_series_url: str = Field(f'{BLS_TIME_SERIES_BASE}/oe/oe.series', alias='BLS_OEWS_SERIES_URL')
    oews_data_url: str = Field(f'{BLS_TIME_SERIES_BASE}/oe/oe.data.0.Current', alias='BLS_OEWS_DATA_URL')
    ces_series_url: str = Field(f'{BLS_TIME_SERIES_BASE}/sm/sm.series', alias='BLS_CES_SERIES_URL')
    ces_data_url: str = Field(f'{BLS_TIME_SERIES_BASE}/sm/sm.data.0.Current', alias='BLS_CES_DATA_URL')

    user_agent: str = Field(DEFAULT_USER_AGENT, alias='BLS_USER_AGENT')
    timeout: int = Field(120, alias='HTTP_TIMEOUT')
    chunk_size: int = Field(200_000, alias='PARSE_CHUNK_SIZE')
    # Declared text encoding of BLS flat files; undecodable bytes are a FormatError
    encoding: str = Field('utf-8', alias='BLS_FILE_ENCODING')

    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

    @field_validator('qcew_year')
    @classmethod
    def validate_qcew_year(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1990:
            raise ValueError('qcew_year must be 1990 or later')
        return v


class ReferenceSettings(BaseSettings):
    """Static geography reference files"""
    county_path: str = Field('data/reference/do-counties.csv', alias='COUNTY_REFERENCE_PATH')
    msa_path: str = Field('data/reference/msa-offices.csv', alias='MSA_REFERENCE_PATH')
    office_path: Optional[str] = Field(None, alias='OFFICE_REFERENCE_PATH')

    model_config = SettingsConfigDict(env_file='.env', extra='ignore')


class AppSettings(BaseSettings):
    """Main application settings"""
    environment: str = Field('development', alias='ENVIRONMENT')
    log_level: str = Field('INFO', alias='LOG_LEVEL')
    log_file_path: Optional[str] = Field(None, alias='LOG_FILE_PATH')
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3001", "http://localhost:5173"],
        alias='CORS_ORIGINS',
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f'log_level must be one of {valid_levels}')
        return v

    @field_validator('environment')
    @classmethod
    def validate_environment(cls, v: str) -> str:
        valid_envs = ['development', 'staging', 'production']
        v = v.lower()
        if v not in valid_envs:
            raise ValueError(f'environment must be one of {valid_envs}')
        return v

    model_config = SettingsConfigDict(env_file='.env', extra='ignore')


class Settings:
    """Centralized settings manager"""
    _data_sources: Optional[DataSourceSettings] = None
    _reference: Optional[ReferenceSettings] = None
    _app: Optional[AppSettings] = None

    @property
    def data_sources(self) -> DataSourceSettings:
        if self._data_sources is None:
            self._data_sources = DataSourceSettings()  # type: ignore
        return self._data_sources

    @property
    def reference(self) -> ReferenceSettings:
        if self._reference is None:
            self._reference = ReferenceSettings()  # type: ignore
        return self._reference

    @property
    def app(self) -> AppSettings:
        if self._app is None:
            self._app = AppSettings()  # type: ignore
        return self._app


# Global settings instance
settings = Settings()
