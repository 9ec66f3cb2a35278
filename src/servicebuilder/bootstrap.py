# servicebuilder/bootstrap.py
"""
Builder factory driven by environment settings.

Wires logging, the optional persistent cache and the configuration file
named in ``servicebuilder.core.config.Settings``.
"""
from __future__ import annotations

import logging

from servicebuilder.core.builder import ServiceBuilder
from servicebuilder.core.cache.disk import DiskCacheBackend
from servicebuilder.core.catalog import BuildableCatalog
from servicebuilder.core.config import Settings, settings as default_settings
from servicebuilder.core.logging import configure_logging

logger = logging.getLogger(__name__)


def build_from_settings(
    cfg: Settings | None = None,
    *,
    catalog: BuildableCatalog | None = None,
    setup_logging: bool = False,
) -> ServiceBuilder:
    """
    Create a ServiceBuilder from settings.

    A ``DiskCacheBackend`` is opened in ``cfg.cache_dir`` when it is set;
    otherwise the configuration file is read and resolved on every call.
    """
    cfg = cfg or default_settings

    if setup_logging:
        configure_logging(cfg.log_level)

    logger.info(
        "Creating service builder (env=%s, config=%s)", cfg.app_env, cfg.clients_config_path
    )

    cache = DiskCacheBackend(cfg.cache_dir) if cfg.cache_dir else None
    if cache is None:
        logger.debug("No cache directory configured, resolution cache disabled")

    return ServiceBuilder.factory(
        cfg.clients_config_path,
        cache,
        cfg.cache_ttl,
        catalog=catalog,
    )
