import logging
from cryptography.fernet import Fernet

logger = logging.getLogger(__name__)


class EncryptionManager:
    def __init__(self, key=None):
        self.cipher = Fernet(key) if key else None

    def init_app(self, app):
        key = app.config.get("ENCRYPTION_KEY")
        if not key:
            key = Fernet.generate_key()
            logger.warning("ENCRYPTION_KEY is not set; generated a temporary key. "
                           "Stored payment instruments will not be readable after a restart.")
        elif isinstance(key, str):
            key = key.encode()
        self.cipher = Fernet(key)

    def encrypt(self, data):
        """Encrypt sensitive data"""
        if not data:
            return None
        return self.cipher.encrypt(data.encode()).decode()

    def decrypt(self, encrypted_data):
        """Decrypt sensitive data"""
        if not encrypted_data:
            return None
        return self.cipher.decrypt(encrypted_data.encode()).decode()


def mask(value, visible=4):
    if not value:
        return None
    return "*" * max(len(value) - visible, 0) + value[-visible:]


# Global instance, keyed in create_app()
encryption_manager = EncryptionManager()
