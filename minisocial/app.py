"""Main application entry point"""

from pathlib import Path
from typing import Optional

from .services.identity_store import IdentityStore
from .services.post_store import PostStore
from .storage.json_storage import JsonStorage
from .utils.config import ConfigManager, Settings
from .utils.logger import setup_logger, get_logger

logger = get_logger(__name__)


class MiniSocialApp:
    """Owns the storage adapter and both stores for one process"""
    
    def __init__(self, config_manager: Optional[ConfigManager] = None, settings: Optional[Settings] = None):
        self.config_manager = config_manager or ConfigManager()
        self.config: Optional[Settings] = settings
        self.storage: Optional[JsonStorage] = None
        self.identity: Optional[IdentityStore] = None
        self.posts: Optional[PostStore] = None
    
    def initialize(self) -> "MiniSocialApp":
        """Load settings, configure logging and open the stores"""
        if self.config is None:
            self.config = self.config_manager.load_settings()
        
        setup_logger(
            log_level=self.config.logging.level,
            log_format=self.config.logging.format,
            file_path=self.config.logging.file_path,
            max_bytes=self.config.logging.max_bytes,
            backup_count=self.config.logging.backup_count,
        )
        
        self.storage = JsonStorage(Path(self.config.storage.data_dir))
        self.identity = IdentityStore(
            self.storage,
            avatar_template=self.config.profile.default_avatar_template,
        )
        self.posts = PostStore(self.storage)
        
        if self.config.seed.demo_user:
            self.identity.ensure_demo_user()
        
        logger.info(
            "MiniSocial initialized",
            app_name=self.config.app.name,
            version=self.config.app.version,
            environment=self.config.app.environment,
            data_dir=str(self.storage.data_dir),
            user_count=len(self.identity.users),
            post_count=len(self.posts.posts),
        )
        return self
