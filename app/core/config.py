from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv(override=True)

class Settings(BaseSettings):
    PROJECT_NAME: str = "Lab Registry"
    # Application settings
    PORT: int = 4000
    HOST: str = "127.0.0.1"
    VERSION: str = "1.0.0"
    CORS_ORIGINS: str = "*"

    # Ledger store (SQLAlchemy URL)
    LEDGER_URL: str = "sqlite:///./ledger.db"

    # Deployment descriptors
    DEPLOYMENTS_PATH: str = "deployments/localhost.json"
    NETWORK_NAME: str = "localhost"
    CHAIN_ID: int = 31337
    DEPLOYER_ADDRESS: str = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"  # hardhat account #0

    # Login configuration
    ENCODE_KEY: str = "lab-redes-super-secret"
    ENCODE_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_SECONDS: int = 3600 # 1 hour
    NONCE_EXPIRY_SECONDS: int = 300 # 5 minutes
    NONCE_MESSAGE_PREFIX: str = "Assine para entrar no Lab Redes: "
    # comma-separated wallet addresses
    ADMIN_ADDRESSES: str = ""

    # Debug settings
    DEBUG: bool = False

    class Config:
        env_file = ".env"

    @property
    def admin_addresses(self) -> List[str]:
        return [addr.strip().lower() for addr in self.ADMIN_ADDRESSES.split(",") if addr.strip()]

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

# Instantiate the settings
settings = Settings()
