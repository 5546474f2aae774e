from flightarchive.core.config import ArchiveConfig, load_config


def get_config() -> ArchiveConfig:
    return load_config()
