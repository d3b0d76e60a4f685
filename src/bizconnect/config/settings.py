"""
Configuration settings for BizConnect
Centralizes all constants and environment variables
"""
import os
from typing import Dict, List


class Settings:
    """Application settings"""

    # Database Configuration
    DB_HOST: str = os.getenv('DB_HOST', 'localhost')
    DB_PORT: str = os.getenv('DB_PORT', '5432')
    DB_NAME: str = os.getenv('DB_NAME', 'bizconnect')
    DB_USER: str = os.getenv('DB_USER', 'bizconnect')
    DB_PASSWORD: str = os.getenv('DB_PASSWORD', 'bizconnect')

    # Admin Authentication
    JWT_SECRET_KEY: str = os.getenv('JWT_SECRET_KEY', 'change-me-in-production')
    JWT_ALGORITHM: str = os.getenv('JWT_ALGORITHM', 'HS256')
    ADMIN_TOKEN_EXPIRE_HOURS: int = int(os.getenv('ADMIN_TOKEN_EXPIRE_HOURS', '24'))
    BCRYPT_ROUNDS: int = int(os.getenv('BCRYPT_ROUNDS', '12'))

    # Quick Sale Rules
    MAX_PRODUCTS_PER_SALE: int = 20
    PRODUCT_CONDITIONS: List[str] = ['new', 'like_new', 'good', 'fair', 'poor']
    CURRENCY_SYMBOL: str = 'GH₵'
    MAX_TITLE_LENGTH: int = 200

    # API Client
    API_BASE_URL: str = os.getenv('API_BASE_URL', 'http://localhost:5001')
    API_TIMEOUT_SECONDS: float = 30.0

    # Countdown
    COUNTDOWN_TICK_SECONDS: float = 1.0
    COUNTDOWN_RECONCILE_SECONDS: float = float(os.getenv('COUNTDOWN_RECONCILE_SECONDS', '15'))

    # Web Server
    CORS_ORIGINS: str = os.getenv('CORS_ORIGINS', '*')
    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FORMAT: str = os.getenv('LOG_FORMAT', 'text')

    @property
    def db_config(self) -> Dict[str, str]:
        """Get database configuration as dictionary"""
        return {
            'host': self.DB_HOST,
            'port': self.DB_PORT,
            'database': self.DB_NAME,
            'user': self.DB_USER,
            'password': self.DB_PASSWORD
        }

    def format_amount(self, amount) -> str:
        """Format a money amount with the marketplace currency symbol"""
        return f"{self.CURRENCY_SYMBOL}{amount}"


# Global settings instance
settings = Settings()
