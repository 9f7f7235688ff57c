import os
import configparser
import urllib.parse
from pathlib import Path

DEFAULT_SEASONALITY = {
    1: 0.7, 2: 0.7,
    3: 1.0, 4: 1.0, 5: 1.0,
    6: 1.3, 7: 1.3, 8: 1.3,
    9: 1.0, 10: 1.0,
    11: 1.5, 12: 1.5,
}

class Config:
    """Configuration manager for the inventory seeder."""

    _instance = None

    def __new__(cls):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize the configuration if not already initialized."""
        if self._initialized:
            return

        # INVENTORY_SEEDER_CONFIG points at an alternate settings.ini
        config_override = os.getenv('INVENTORY_SEEDER_CONFIG')
        if config_override:
            self._config_path = Path(config_override)
            self._config_dir = self._config_path.parent
        else:
            self._config_dir = Path('config')
            self._config_path = self._config_dir / 'settings.ini'
        self._config = configparser.ConfigParser(interpolation=None)

        # Create config directory if it doesn't exist
        if not self._config_dir.exists():
            self._config_dir.mkdir(parents=True)

        # Load config or create default
        if self._config_path.exists():
            self._config.read(self._config_path)
        else:
            self._create_default_config()

        self._initialized = True

    def _create_default_config(self):
        """Create default configuration file."""
        self._config['DATABASE'] = {
            'engine': 'postgresql',
            'host': 'localhost',
            'port': '5432',
            'database': 'inventory_management',
            'username': 'postgres',
            'password': 'postgres',
            'echo': 'False',
            'pool_size': '5',
            'max_overflow': '10',
            'pool_timeout': '30',
            'pool_recycle': '1800'
        }

        self._config['LOGGING'] = {
            'level': 'INFO',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'directory': 'logs',
            'max_size_mb': '10',
            'backup_count': '5',
            'console_output': 'True'
        }

        self._config['SEEDING'] = {
            'categories': '10',
            'products_per_category': '10',
            'suppliers': '20',
            'historical_months': '12',
            'orders_per_month': '100',
            'max_order_items': '5',
            'random_seed': ''
        }

        self._config['HISTORY'] = {
            'restock_min': '10',
            'restock_max': '100',
            'negative_stock_policy': 'clamp'
        }

        self._config['FORECAST'] = {
            'horizon_months': '3',
            'recent_months': '3',
            'damping_min': '0.8',
            'damping_max': '1.2',
            'confidence_min': '70',
            'confidence_max': '95',
            'model_type': 'SMA'
        }

        self._config['SEASONALITY'] = {
            str(month): str(factor) for month, factor in DEFAULT_SEASONALITY.items()
        }

        self._save_config()

    def _save_config(self):
        """Save configuration to file."""
        with open(self._config_path, 'w') as configfile:
            self._config.write(configfile)

    def get(self, section, key, default=None):
        """Get configuration value."""
        try:
            return self._config.get(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return default

    def get_int(self, section, key, default=None):
        """Get configuration value as integer."""
        try:
            return self._config.getint(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default

    def get_float(self, section, key, default=None):
        """Get configuration value as float."""
        try:
            return self._config.getfloat(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default

    def get_boolean(self, section, key, default=None):
        """Get configuration value as boolean."""
        try:
            return self._config.getboolean(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default

    def set(self, section, key, value):
        """Set configuration value."""
        if not self._config.has_section(section):
            self._config.add_section(section)

        self._config.set(section, key, str(value))
        self._save_config()

    def get_db_url(self):
        """Generate SQLAlchemy database URL."""
        # DATABASE_URL wins over the ini file
        env_url = os.getenv('DATABASE_URL')
        if env_url:
            return env_url

        engine = self.get('DATABASE', 'engine', 'postgresql')
        username = self.get('DATABASE', 'username', 'postgres')
        # URL encode the password to handle special characters
        password = urllib.parse.quote_plus(self.get('DATABASE', 'password', 'postgres'))
        host = self.get('DATABASE', 'host', 'localhost')
        port = self.get('DATABASE', 'port', '5432')
        database = self.get('DATABASE', 'database', 'inventory_management')

        return f"{engine}://{username}:{password}@{host}:{port}/{database}"

    @property
    def log_config(self):
        """Get logging configuration."""
        return {
            'level': self.get('LOGGING', 'level', 'INFO'),
            'format': self.get('LOGGING', 'format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
            'directory': self.get('LOGGING', 'directory', 'logs'),
            'max_size_mb': self.get_int('LOGGING', 'max_size_mb', 10),
            'backup_count': self.get_int('LOGGING', 'backup_count', 5),
            'console_output': self.get_boolean('LOGGING', 'console_output', True)
        }

    @property
    def seeding_config(self):
        """Get seeding volume configuration."""
        seed = self.get('SEEDING', 'random_seed', '')
        return {
            'categories': self.get_int('SEEDING', 'categories', 10),
            'products_per_category': self.get_int('SEEDING', 'products_per_category', 10),
            'suppliers': self.get_int('SEEDING', 'suppliers', 20),
            'historical_months': self.get_int('SEEDING', 'historical_months', 12),
            'orders_per_month': self.get_int('SEEDING', 'orders_per_month', 100),
            'max_order_items': self.get_int('SEEDING', 'max_order_items', 5),
            'random_seed': int(seed) if seed and seed.strip().lstrip('-').isdigit() else None
        }

    @property
    def history_config(self):
        """Get stock history synthesis configuration."""
        return {
            'window_months': self.get_int('SEEDING', 'historical_months', 12),
            'restock_min': self.get_int('HISTORY', 'restock_min', 10),
            'restock_max': self.get_int('HISTORY', 'restock_max', 100),
            'negative_stock_policy': self.get('HISTORY', 'negative_stock_policy', 'clamp')
        }

    @property
    def forecast_config(self):
        """Get demand forecast configuration."""
        return {
            'horizon_months': self.get_int('FORECAST', 'horizon_months', 3),
            'recent_months': self.get_int('FORECAST', 'recent_months', 3),
            'damping_min': self.get_float('FORECAST', 'damping_min', 0.8),
            'damping_max': self.get_float('FORECAST', 'damping_max', 1.2),
            'confidence_min': self.get_int('FORECAST', 'confidence_min', 70),
            'confidence_max': self.get_int('FORECAST', 'confidence_max', 95),
            'model_type': self.get('FORECAST', 'model_type', 'SMA'),
            'seasonality': self.seasonality
        }

    @property
    def seasonality(self):
        """Get the seasonal multiplier per calendar month (1-12)."""
        return {
            month: self.get_float('SEASONALITY', str(month), default)
            for month, default in DEFAULT_SEASONALITY.items()
        }

# Global config instance
config = Config()
